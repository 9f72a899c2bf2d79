'''
weldbid.bids_repo의 Docstring
bids 레포지토리 계층은 DB만 다룹니다.
입찰은 한 번 만들어지면 수정되지 않습니다 (append-only).
(job_id, business_id) 유니크 제약 위반은 DuplicateBid로 바꿔서 올립니다.
'''

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from weldbid.errors import DuplicateBid
from weldbid.models import Bid, Job


def get_bid_by_id(session: Session, bid_id: str) -> Bid | None:
    return session.get(Bid, bid_id)


def list_bids_for_job(session: Session, job_id: str) -> list[Bid]:
    statement = (
        select(Bid)
        .where(Bid.job_id == job_id)
        .order_by(Bid.created_at.asc(), Bid.id.asc())
    )
    return session.exec(statement).all()


def get_bid_for_business(session: Session, job_id: str, business_id: str) -> Bid | None:
    statement = select(Bid).where(Bid.job_id == job_id, Bid.business_id == business_id)
    return session.exec(statement).first()


def list_bids_by_business(session: Session, business_id: str) -> list[tuple[Bid, Job]]:
    statement = (
        select(Bid, Job)
        .join(Job, Job.id == Bid.job_id)
        .where(Bid.business_id == business_id)
        .order_by(Bid.created_at.desc())
    )
    return session.exec(statement).all()


def create_bid(session: Session, bid: Bid) -> Bid:
    """입찰 insert + commit. 유니크 제약 위반이면 rollback 후 DuplicateBid."""
    session.add(bid)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        if "uq_bids_job_business" in str(e.orig) or "UNIQUE" in str(e.orig).upper():
            raise DuplicateBid(bid.job_id, bid.business_id) from e
        raise
    session.refresh(bid)
    return bid
