'''
weldbid.reviews_repo
reviews 레포지토리 계층은 DB만 다룹니다.
(job_id, customer_id) 유니크 제약 위반은 DuplicateReview로 바꿔서 올립니다.
'''

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from weldbid.errors import DuplicateReview
from weldbid.models import Review


def get_review_for_job(session: Session, job_id: str, customer_id: str) -> Review | None:
    statement = select(Review).where(Review.job_id == job_id, Review.customer_id == customer_id)
    return session.exec(statement).first()


def list_reviews_for_business(session: Session, business_id: str) -> list[Review]:
    statement = (
        select(Review)
        .where(Review.business_id == business_id)
        .order_by(Review.created_at.desc(), Review.id.desc())
    )
    return session.exec(statement).all()


def rating_stats_for_business(session: Session, business_id: str) -> tuple[int, int]:
    # (리뷰 수, 별점 합계)
    statement = select(func.count(), func.coalesce(func.sum(Review.rating), 0)).where(
        Review.business_id == business_id
    )
    count, total = session.exec(statement).one()
    return int(count), int(total)


def create_review(session: Session, review: Review) -> Review:
    session.add(review)
    try:
        session.commit()
    except IntegrityError as e:
        session.rollback()
        if "uq_reviews_job_customer" in str(e.orig) or "UNIQUE" in str(e.orig).upper():
            raise DuplicateReview(review.job_id, review.customer_id) from e
        raise
    session.refresh(review)
    return review
