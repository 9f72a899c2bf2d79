'''
weldbid.jobs_service의 Docstring
jobs를 어떻게 처리할지 결정합니다 (비즈니스 로직).
예: 없는 job은 에러, 이미 낙찰된 job은 다시 계산하지 않고 기존 낙찰 결과 반환(멱등성),
낙찰 상태 변경은 조건부 업데이트(CAS) 한 번으로만.
'''

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from weldbid.award import select_winner
from weldbid.bids_repo import get_bid_by_id, list_bids_for_job
from weldbid.errors import (
    JobNotAwarded,
    JobNotFound,
    NoBids,
    NotWinningBusiness,
    StorageFailure,
)
from weldbid.jobs_repo import (
    conditional_award_update,
    conditional_complete_update,
    get_job_by_id,
    lock_job_for_award,
    list_jobs_by_customer,
    list_jobs_by_status,
    list_jobs_won_by_business,
    save_job,
)
from weldbid.logging_config import get_structured_logger
from weldbid.models import BIDDABLE_STATUSES, Job, JobStatus
from weldbid.money import from_cents, mean_of_cents
from weldbid.notifications import NotificationDispatcher, notify_award

logger = get_structured_logger(__name__)

# CAS에서 졌는데 낙찰자가 없으면(상태나 입찰 수만 바뀐 경우) 한 번 더 계산
MAX_AWARD_ATTEMPTS = 2


@dataclass(frozen=True)
class AwardResult:
    job_id: str
    winning_bid_id: str
    business_id: str
    amount: Decimal
    mean: Decimal | None
    bid_count: int
    already_awarded: bool


def _validate_text(value: str | None, field_name: str) -> str:
    if value is None or not value.strip():
        raise ValueError(f"{field_name} is required")
    return value.strip()


def create_job(
    session: Session,
    customer_id: str,
    title: str,
    description: str | None = None,
    city: str | None = None,
    state: str | None = None,
) -> Job:
    job = Job(
        customer_id=_validate_text(customer_id, "customer_id"),
        title=_validate_text(title, "title"),
        description=description,
        city=city,
        state=state,
    )
    try:
        job = save_job(session, job)
    except SQLAlchemyError as e:
        session.rollback()
        raise StorageFailure("Failed to create job") from e

    logger.bind(job_id=job.id, customer_id=job.customer_id).info("Job posted")
    return job


def get_job(session: Session, job_id: str) -> Job:
    job = get_job_by_id(session, job_id)
    if not job:
        raise JobNotFound(job_id)
    return job


def list_open_jobs(session: Session) -> list[Job]:
    return list_jobs_by_status(session, BIDDABLE_STATUSES)


def list_customer_jobs(session: Session, customer_id: str) -> list[Job]:
    return list_jobs_by_customer(session, customer_id)


def list_won_jobs(session: Session, business_id: str) -> list[Job]:
    return list_jobs_won_by_business(session, business_id)


def _existing_award(session: Session, job: Job) -> AwardResult:
    bids = list_bids_for_job(session, job.id)
    winner = next((b for b in bids if b.id == job.winning_bid_id), None)
    if winner is None:
        winner = get_bid_by_id(session, job.winning_bid_id)

    return AwardResult(
        job_id=job.id,
        winning_bid_id=job.winning_bid_id,
        business_id=winner.business_id,
        amount=from_cents(winner.amount_cents),
        mean=mean_of_cents([b.amount_cents for b in bids]),
        bid_count=len(bids),
        already_awarded=True,
    )


def award_job(
    session: Session,
    job_id: str,
    dispatcher: NotificationDispatcher | None = None,
) -> AwardResult:
    """
    입찰가 평균에 가장 가까운 입찰에 job을 낙찰합니다.

    이미 낙찰자가 있으면 다시 계산하지 않고 그대로 반환 (멱등성).
    job row를 먼저 잠그고 입찰 목록을 읽은 뒤, 조건부 업데이트 한 번으로 확정.
    동시에 여러 요청이 와도 모두 같은 낙찰자를 돌려받습니다.

    Raises:
        JobNotFound: job이 없음
        NoBids: 입찰이 하나도 없음
        StorageFailure: DB 오류. 아무것도 commit 되지 않음 (재시도 가능)
    """
    log = logger.bind(job_id=job_id)

    try:
        for _ in range(MAX_AWARD_ATTEMPTS):
            job = lock_job_for_award(session, job_id)
            if not job:
                session.rollback()
                raise JobNotFound(job_id)

            # 이미 낙찰됨 -> 재계산 없이 그대로 반환 (멱등성)
            if job.winning_bid_id is not None:
                log.info(f"Job already awarded to bid {job.winning_bid_id}")
                result = _existing_award(session, job)
                session.rollback()
                return result

            bids = list_bids_for_job(session, job_id)
            selection = select_winner(bids)
            if selection is None:
                session.rollback()
                raise NoBids(job_id)

            winner = selection.bid
            applied, current = conditional_award_update(
                session,
                job_id,
                winner.id,
                expected_status=job.status,
                expected_bid_count=len(bids),
            )

            if applied:
                session.commit()
                session.refresh(job)
                log.bind(bid_id=winner.id, business_id=winner.business_id).info(
                    f"Job awarded: {len(bids)} bid(s), "
                    f"amount={from_cents(winner.amount_cents)}, "
                    f"scaled_distance={selection.scaled_distance}"
                )
                notify_award(dispatcher, job, winner)
                return AwardResult(
                    job_id=job_id,
                    winning_bid_id=winner.id,
                    business_id=winner.business_id,
                    amount=from_cents(winner.amount_cents),
                    mean=mean_of_cents([b.amount_cents for b in bids]),
                    bid_count=len(bids),
                    already_awarded=False,
                )

            # CAS 실패: 다른 요청이 먼저 낙찰했거나, 상태/입찰 수가 바뀜
            session.rollback()
            if current is None:
                raise JobNotFound(job_id)
            if current.winning_bid_id is not None:
                log.info(f"Lost award race, job already awarded to bid {current.winning_bid_id}")
                result = _existing_award(session, current)
                session.rollback()
                return result

            log.warning("Job status or bid set changed during award, retrying")
    except SQLAlchemyError as e:
        session.rollback()
        log.error(f"Storage error while awarding job: {e}", exc_info=True)
        raise StorageFailure(f"Failed to award job {job_id}, please retry") from e

    raise StorageFailure(f"Job {job_id} changed concurrently while awarding, please retry")


def complete_job(session: Session, job_id: str, business_id: str) -> Job:
    """
    낙찰받은 업체가 작업 완료 처리합니다.
    이미 completed면 그대로 반환 (멱등성). 완료되어야 고객이 리뷰를 남길 수 있음.
    """
    log = logger.bind(job_id=job_id, business_id=business_id)

    try:
        job = get_job(session, job_id)

        if job.winning_bid_id is None:
            raise JobNotAwarded(job_id, job.status.value)

        winning_bid = get_bid_by_id(session, job.winning_bid_id)
        if winning_bid is None or winning_bid.business_id != business_id:
            raise NotWinningBusiness(job_id, business_id)

        if job.status == JobStatus.completed:
            return job

        applied, current = conditional_complete_update(session, job_id)
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        log.error(f"Storage error while completing job: {e}", exc_info=True)
        raise StorageFailure(f"Failed to complete job {job_id}, please retry") from e

    if applied:
        log.info("Job completed")
    return current
