'''
weldbid.schemas
HTTP 요청/응답 모델. 금액은 Decimal 달러로 주고받고 DB의 센트 값은 노출하지 않습니다.
'''

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from weldbid.models import Bid, Job, Review
from weldbid.money import MAX_AMOUNT, from_cents


class JobCreateRequest(BaseModel):
    customer_id: str
    title: str
    description: str | None = None
    city: str | None = None
    state: str | None = None


class BidCreateRequest(BaseModel):
    business_id: str
    amount: Decimal = Field(gt=0, le=MAX_AMOUNT, max_digits=9, decimal_places=2)
    notes: str | None = None


class JobCompleteRequest(BaseModel):
    business_id: str


class ReviewCreateRequest(BaseModel):
    customer_id: str
    rating: int = Field(ge=1, le=5)
    comment: str | None = None


class BidResponse(BaseModel):
    id: str
    job_id: str
    business_id: str
    amount: Decimal
    notes: str | None
    created_at: datetime

    @classmethod
    def from_bid(cls, bid: Bid) -> "BidResponse":
        return cls(
            id=bid.id,
            job_id=bid.job_id,
            business_id=bid.business_id,
            amount=from_cents(bid.amount_cents),
            notes=bid.notes,
            created_at=bid.created_at,
        )


class JobBidsResponse(BaseModel):
    job_id: str
    status: str
    winning_bid_id: str | None
    count: int
    mean: Decimal | None
    bids: list[BidResponse]


class AwardResponse(BaseModel):
    job_id: str
    winning_bid_id: str
    business_id: str
    amount: Decimal
    mean: Decimal | None
    bid_count: int
    already_awarded: bool


class BusinessBidItem(BaseModel):
    bid: BidResponse
    job_id: str
    job_title: str
    job_status: str
    outcome: str


class JobResponse(BaseModel):
    id: str
    customer_id: str
    title: str
    description: str | None
    city: str | None
    state: str | None
    status: str
    winning_bid_id: str | None
    created_at: datetime
    awarded_at: datetime | None
    completed_at: datetime | None

    @classmethod
    def from_job(cls, job: Job) -> "JobResponse":
        return cls(
            id=job.id,
            customer_id=job.customer_id,
            title=job.title,
            description=job.description,
            city=job.city,
            state=job.state,
            status=getattr(job.status, "value", job.status),
            winning_bid_id=job.winning_bid_id,
            created_at=job.created_at,
            awarded_at=job.awarded_at,
            completed_at=job.completed_at,
        )


class ReviewResponse(BaseModel):
    id: int
    job_id: str
    customer_id: str
    business_id: str
    rating: int
    comment: str | None
    created_at: datetime

    @classmethod
    def from_review(cls, review: Review) -> "ReviewResponse":
        return cls(
            id=review.id,
            job_id=review.job_id,
            customer_id=review.customer_id,
            business_id=review.business_id,
            rating=review.rating,
            comment=review.comment,
            created_at=review.created_at,
        )


class BusinessReviewsResponse(BaseModel):
    business_id: str
    average_rating: Decimal | None
    review_count: int
    reviews: list[ReviewResponse]
