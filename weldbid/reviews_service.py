'''
weldbid.reviews_service의 Docstring
완료된 job에 대한 고객 리뷰를 어떻게 처리할지 결정합니다 (비즈니스 로직).
예: completed job만 리뷰 가능, job을 올린 고객만, job당 한 번만, 별점은 1~5.
리뷰 대상 업체는 낙찰 입찰의 업체로 서버가 정함.
'''

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from weldbid.bids_repo import get_bid_by_id
from weldbid.errors import DuplicateReview, NotJobCustomer, ReviewNotAllowed, StorageFailure
from weldbid.jobs_service import get_job
from weldbid.logging_config import get_structured_logger
from weldbid.models import JobStatus, Review
from weldbid.reviews_repo import (
    create_review,
    get_review_for_job,
    list_reviews_for_business,
    rating_stats_for_business,
)

logger = get_structured_logger(__name__)

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class BusinessRating:
    business_id: str
    average_rating: Decimal | None
    review_count: int
    reviews: list[Review]


def _validate_rating(rating: int) -> None:
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValueError(f"rating은 {MIN_RATING}~{MAX_RATING} 사이여야 합니다.")


def submit_review(
    session: Session,
    job_id: str,
    customer_id: str,
    rating: int,
    comment: str | None = None,
) -> Review:
    """
    완료된 job에 고객 리뷰를 남깁니다. 대상 업체는 낙찰 입찰에서 가져옴.

    Raises:
        JobNotFound, NotJobCustomer, ReviewNotAllowed, DuplicateReview, StorageFailure
        ValueError: 별점 범위 밖
    """
    _validate_rating(rating)
    log = logger.bind(job_id=job_id, customer_id=customer_id)

    try:
        job = get_job(session, job_id)
        if job.customer_id != customer_id:
            raise NotJobCustomer(job_id, customer_id)

        if job.status != JobStatus.completed or job.winning_bid_id is None:
            raise ReviewNotAllowed(f"Job {job_id} is {job.status.value}, only completed jobs can be reviewed")

        if get_review_for_job(session, job_id, customer_id):
            raise DuplicateReview(job_id, customer_id)

        winning_bid = get_bid_by_id(session, job.winning_bid_id)
        review = create_review(
            session,
            Review(
                job_id=job_id,
                customer_id=customer_id,
                business_id=winning_bid.business_id,
                rating=rating,
                comment=comment or None,
            ),
        )
    except SQLAlchemyError as e:
        session.rollback()
        log.error(f"Storage error while submitting review: {e}", exc_info=True)
        raise StorageFailure(f"Failed to submit review for job {job_id}, please retry") from e

    log.bind(business_id=review.business_id).info(f"Review submitted: rating={rating}")
    return review


def get_business_rating(session: Session, business_id: str) -> BusinessRating:
    count, total = rating_stats_for_business(session, business_id)
    average = None
    if count:
        average = (Decimal(total) / Decimal(count)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)

    return BusinessRating(
        business_id=business_id,
        average_rating=average,
        review_count=count,
        reviews=list_reviews_for_business(session, business_id),
    )
