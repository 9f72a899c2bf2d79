'''
weldbid.errors의 Docstring
도메인 에러 모음. 서비스 계층이 던지고 라우터가 HTTP 상태코드로 바꿉니다.
이미 낙찰된 job에 다시 낙찰 요청하는 건 에러가 아닙니다 (멱등성, 기존 낙찰 결과 반환).
'''


class WeldbidError(Exception):
    """도메인 에러 기본 클래스. status_code는 라우터가 HTTP 응답으로 쓸 값."""

    status_code = 400

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class JobNotFound(WeldbidError):
    status_code = 404

    def __init__(self, job_id: str):
        super().__init__(f"Job not found: {job_id}")
        self.job_id = job_id


class NoBids(WeldbidError):
    status_code = 409

    def __init__(self, job_id: str):
        super().__init__(f"Job {job_id} has no bids to award")
        self.job_id = job_id


class DuplicateBid(WeldbidError):
    status_code = 409

    def __init__(self, job_id: str, business_id: str):
        super().__init__(f"Business {business_id} already bid on job {job_id}")
        self.job_id = job_id
        self.business_id = business_id


class JobClosed(WeldbidError):
    status_code = 409

    def __init__(self, job_id: str, status: str):
        super().__init__(f"Job {job_id} is {status} and no longer accepts bids")
        self.job_id = job_id
        self.status = status


class JobNotAwarded(WeldbidError):
    status_code = 409

    def __init__(self, job_id: str, status: str):
        super().__init__(f"Job {job_id} is {status}, only awarded jobs can be completed")
        self.job_id = job_id
        self.status = status


class NotWinningBusiness(WeldbidError):
    status_code = 403

    def __init__(self, job_id: str, business_id: str):
        super().__init__(f"Business {business_id} did not win job {job_id}")
        self.job_id = job_id
        self.business_id = business_id


class InvalidAmount(WeldbidError):
    status_code = 422


class StorageFailure(WeldbidError):
    """일시적인 DB 오류. 아무것도 commit 안 됐으니 다시 시도하면 됨."""

    status_code = 503


class ReviewNotAllowed(WeldbidError):
    status_code = 409


class NotJobCustomer(WeldbidError):
    status_code = 403

    def __init__(self, job_id: str, customer_id: str):
        super().__init__(f"Customer {customer_id} did not post job {job_id}")
        self.job_id = job_id
        self.customer_id = customer_id


class DuplicateReview(WeldbidError):
    status_code = 409

    def __init__(self, job_id: str, customer_id: str):
        super().__init__(f"Customer {customer_id} already reviewed job {job_id}")
        self.job_id = job_id
        self.customer_id = customer_id
