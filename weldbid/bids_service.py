'''
weldbid.bids_service의 Docstring
입찰을 어떻게 처리할지 결정합니다 (비즈니스 로직).
예: 낙찰/완료된 job은 입찰 불가, 같은 업체 중복 입찰 불가, 첫 입찰이면 job을 bidding으로.
평균가 힌트도 서버에서 계산해서 내려줍니다. 클라이언트가 낙찰자를 정하지 않음.
'''

from dataclasses import dataclass
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from weldbid.bids_repo import (
    create_bid,
    get_bid_for_business,
    list_bids_by_business,
    list_bids_for_job,
)
from weldbid.errors import DuplicateBid, JobClosed, StorageFailure
from weldbid.jobs_repo import mark_job_bidding, reload_job
from weldbid.jobs_service import get_job
from weldbid.logging_config import get_structured_logger
from weldbid.models import BIDDABLE_STATUSES, Bid, Job, JobStatus
from weldbid.money import mean_of_cents, to_cents

logger = get_structured_logger(__name__)


@dataclass(frozen=True)
class BidSummary:
    job: Job
    bids: list[Bid]
    mean: Decimal | None

    @property
    def count(self) -> int:
        return len(self.bids)


def bid_outcome(bid: Bid, job: Job) -> str:
    if job.status in BIDDABLE_STATUSES:
        return "pending"
    if job.winning_bid_id == bid.id:
        return "accepted"
    return "rejected"


def submit_bid(
    session: Session,
    job_id: str,
    business_id: str,
    amount: Decimal | int | str,
    notes: str | None = None,
) -> Bid:
    """
    Raises:
        JobNotFound, InvalidAmount, JobClosed, DuplicateBid, StorageFailure
    """
    log = logger.bind(job_id=job_id, business_id=business_id)

    if not business_id or not business_id.strip():
        raise ValueError("business_id is required")
    amount_cents = to_cents(amount)

    try:
        job = get_job(session, job_id)
        if job.status not in BIDDABLE_STATUSES:
            raise JobClosed(job_id, job.status.value)

        if get_bid_for_business(session, job_id, business_id):
            raise DuplicateBid(job_id, business_id)

        # 낙찰 CAS와 같은 job row를 먼저 건드림. 그 사이 닫혔으면 0 row
        if not mark_job_bidding(session, job_id):
            session.rollback()
            current = reload_job(session, job_id)
            raise JobClosed(job_id, current.status.value if current else JobStatus.awarded.value)

        bid = create_bid(
            session,
            Bid(
                job_id=job_id,
                business_id=business_id,
                amount_cents=amount_cents,
                notes=notes or None,
            ),
        )
    except SQLAlchemyError as e:
        session.rollback()
        log.error(f"Storage error while submitting bid: {e}", exc_info=True)
        raise StorageFailure(f"Failed to submit bid for job {job_id}, please retry") from e

    log.bind(bid_id=bid.id).info(f"Bid submitted: amount_cents={bid.amount_cents}")
    return bid


def get_job_bids(session: Session, job_id: str) -> BidSummary:
    job = get_job(session, job_id)
    bids = list_bids_for_job(session, job_id)
    return BidSummary(job=job, bids=bids, mean=mean_of_cents([b.amount_cents for b in bids]))


def list_business_bids(session: Session, business_id: str) -> list[tuple[Bid, Job, str]]:
    return [
        (bid, job, bid_outcome(bid, job))
        for bid, job in list_bids_by_business(session, business_id)
    ]
