'''
weldbid.jobs_router의 Docstring
jobs / bids / 낙찰 관련 HTTP 엔드포인트 정의
Request -> Service 호출 -> Response 반환만 함. 도메인 에러는 상태코드로 바꿈.
'''

from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from weldbid.bids_service import get_job_bids, submit_bid
from weldbid.config import Config
from weldbid.db import engine, get_session
from weldbid.errors import WeldbidError
from weldbid.jobs_service import award_job, complete_job, create_job, get_job, list_open_jobs
from weldbid.reviews_service import submit_review
from weldbid.notifications import (
    LoggingDispatcher,
    NotificationDispatcher,
    StoredNotificationDispatcher,
)
from weldbid.schemas import (
    AwardResponse,
    BidCreateRequest,
    BidResponse,
    JobBidsResponse,
    JobCompleteRequest,
    JobCreateRequest,
    JobResponse,
    ReviewCreateRequest,
    ReviewResponse,
)

router = APIRouter(prefix="/jobs", tags=["jobs"])


def get_dispatcher() -> NotificationDispatcher:
    if Config.NOTIFICATIONS_BACKEND == "log":
        return LoggingDispatcher()
    return StoredNotificationDispatcher(engine)


def to_http_error(e: WeldbidError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail=e.detail)


@router.post("/", response_model=JobResponse, status_code=201)
def post_job(payload: JobCreateRequest, session: Session = Depends(get_session)):
    try:
        job = create_job(
            session=session,
            customer_id=payload.customer_id,
            title=payload.title,
            description=payload.description,
            city=payload.city,
            state=payload.state,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except WeldbidError as e:
        raise to_http_error(e)
    return JobResponse.from_job(job)


@router.get("/", response_model=list[JobResponse])
def read_open_jobs(session: Session = Depends(get_session)):
    return [JobResponse.from_job(j) for j in list_open_jobs(session)]


@router.get("/{job_id}", response_model=JobResponse)
def read_job(job_id: str, session: Session = Depends(get_session)):
    try:
        return JobResponse.from_job(get_job(session, job_id))
    except WeldbidError as e:
        raise to_http_error(e)


@router.get("/{job_id}/bids", response_model=JobBidsResponse)
def read_job_bids(job_id: str, session: Session = Depends(get_session)):
    try:
        summary = get_job_bids(session, job_id)
    except WeldbidError as e:
        raise to_http_error(e)

    return JobBidsResponse(
        job_id=summary.job.id,
        status=summary.job.status.value,
        winning_bid_id=summary.job.winning_bid_id,
        count=summary.count,
        mean=summary.mean,
        bids=[BidResponse.from_bid(b) for b in summary.bids],
    )


@router.post("/{job_id}/bids", response_model=BidResponse, status_code=201)
def post_bid(job_id: str, payload: BidCreateRequest, session: Session = Depends(get_session)):
    try:
        bid = submit_bid(
            session=session,
            job_id=job_id,
            business_id=payload.business_id,
            amount=payload.amount,
            notes=payload.notes,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except WeldbidError as e:
        raise to_http_error(e)
    return BidResponse.from_bid(bid)


@router.post("/{job_id}/award", response_model=AwardResponse)
def post_award(
    job_id: str,
    session: Session = Depends(get_session),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    # 클라이언트는 낙찰자를 제안하지 않음. 서버가 계산하고 CAS로 확정
    try:
        result = award_job(session, job_id, dispatcher=dispatcher)
    except WeldbidError as e:
        raise to_http_error(e)

    return AwardResponse(
        job_id=result.job_id,
        winning_bid_id=result.winning_bid_id,
        business_id=result.business_id,
        amount=result.amount,
        mean=result.mean,
        bid_count=result.bid_count,
        already_awarded=result.already_awarded,
    )


@router.patch("/{job_id}/complete", response_model=JobResponse)
def patch_complete(job_id: str, payload: JobCompleteRequest, session: Session = Depends(get_session)):
    try:
        job = complete_job(session, job_id, payload.business_id)
    except WeldbidError as e:
        raise to_http_error(e)
    return JobResponse.from_job(job)


@router.post("/{job_id}/review", response_model=ReviewResponse, status_code=201)
def post_review(job_id: str, payload: ReviewCreateRequest, session: Session = Depends(get_session)):
    try:
        review = submit_review(
            session=session,
            job_id=job_id,
            customer_id=payload.customer_id,
            rating=payload.rating,
            comment=payload.comment,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except WeldbidError as e:
        raise to_http_error(e)
    return ReviewResponse.from_review(review)
