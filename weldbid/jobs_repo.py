'''
weldbid.jobs_repo의 Docstring
jobs 레포지토리 계층은 DB만 다룹니다.
HTTP를 모르며 상태 전이 규칙도 모릅니다. 가져와라/저장해라/조건부로 바꿔라만 합니다.
조건부 업데이트(compare-and-swap)는 commit 하지 않습니다. 트랜잭션 경계는 서비스가 정함.
'''

from datetime import datetime

from sqlalchemy import func, update
from sqlmodel import Session, select

from weldbid.models import Bid, Job, JobStatus, utcnow


def get_job_by_id(session: Session, job_id: str) -> Job | None:
    return session.get(Job, job_id)


def reload_job(session: Session, job_id: str) -> Job | None:
    # identity map에 남은 예전 값 말고 DB의 현재 값을 읽음
    statement = select(Job).where(Job.id == job_id).execution_options(populate_existing=True)
    return session.exec(statement).first()


def lock_job_for_award(session: Session, job_id: str) -> Job | None:
    """
    낙찰 계산 전에 job row를 잠그고(SELECT ... FOR UPDATE) 현재 값을 읽습니다.
    잠근 동안 들어오는 입찰은 mark_job_bidding에서 기다리게 됨.
    FOR UPDATE를 지원 안 하는 DB(SQLite)에서는 그냥 현재 값 읽기.
    """
    statement = (
        select(Job)
        .where(Job.id == job_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )
    return session.exec(statement).first()


def save_job(session: Session, job: Job) -> Job:
    session.add(job)
    session.commit()
    session.refresh(job)
    return job


def list_jobs_by_status(session: Session, statuses: tuple[JobStatus, ...]) -> list[Job]:
    statement = (
        select(Job)
        .where(Job.status.in_(statuses))
        .order_by(Job.created_at.desc())
    )
    return session.exec(statement).all()


def list_jobs_by_customer(session: Session, customer_id: str) -> list[Job]:
    statement = (
        select(Job)
        .where(Job.customer_id == customer_id)
        .order_by(Job.created_at.desc())
    )
    return session.exec(statement).all()


def list_jobs_won_by_business(session: Session, business_id: str) -> list[Job]:
    statement = (
        select(Job)
        .join(Bid, Bid.id == Job.winning_bid_id)
        .where(Bid.business_id == business_id)
        .order_by(Job.awarded_at.desc())
    )
    return session.exec(statement).all()


def conditional_award_update(
    session: Session,
    job_id: str,
    winning_bid_id: str,
    expected_status: JobStatus,
    expected_bid_count: int | None = None,
    awarded_at: datetime | None = None,
) -> tuple[bool, Job | None]:
    """
    status가 아직 expected_status일 때만 낙찰 필드를 채웁니다.
    expected_bid_count를 주면 입찰 수도 그대로일 때만 (계산 후 들어온 입찰이 있으면 0 row).
    영향받은 row 수가 1이면 applied. 반환하는 job은 DB의 현재 값.
    """
    conditions = [
        Job.id == job_id,
        Job.status == expected_status,
        Job.winning_bid_id.is_(None),
    ]
    if expected_bid_count is not None:
        bid_count = (
            select(func.count())
            .select_from(Bid)
            .where(Bid.job_id == job_id)
            .scalar_subquery()
        )
        conditions.append(bid_count == expected_bid_count)

    statement = (
        update(Job)
        .where(*conditions)
        .values(
            status=JobStatus.awarded,
            winning_bid_id=winning_bid_id,
            awarded_at=awarded_at or utcnow(),
        )
    )
    result = session.connection().execute(statement)
    applied = result.rowcount == 1
    return applied, reload_job(session, job_id)


def mark_job_bidding(session: Session, job_id: str) -> bool:
    """
    open/bidding 상태면 bidding으로 맞춥니다 (첫 입찰 전이).
    같은 job row를 건드려서 같은 트랜잭션의 입찰 insert가 낙찰 CAS와 직렬화됨.
    0 row면 이미 닫힌 job.
    """
    statement = (
        update(Job)
        .where(
            Job.id == job_id,
            Job.status.in_((JobStatus.open, JobStatus.bidding)),
        )
        .values(status=JobStatus.bidding)
    )
    result = session.connection().execute(statement)
    return result.rowcount == 1


def conditional_complete_update(session: Session, job_id: str) -> tuple[bool, Job | None]:
    statement = (
        update(Job)
        .where(Job.id == job_id, Job.status == JobStatus.awarded)
        .values(status=JobStatus.completed, completed_at=utcnow())
    )
    result = session.connection().execute(statement)
    return result.rowcount == 1, reload_job(session, job_id)
