from fastapi import APIRouter, Depends
from sqlmodel import Session

from weldbid.bids_service import list_business_bids
from weldbid.db import get_session
from weldbid.jobs_service import list_won_jobs
from weldbid.reviews_service import get_business_rating
from weldbid.schemas import (
    BidResponse,
    BusinessBidItem,
    BusinessReviewsResponse,
    JobResponse,
    ReviewResponse,
)

router = APIRouter(prefix="/businesses", tags=["businesses"])


@router.get("/{business_id}/bids", response_model=list[BusinessBidItem])
def read_business_bids(business_id: str, session: Session = Depends(get_session)):
    return [
        BusinessBidItem(
            bid=BidResponse.from_bid(bid),
            job_id=job.id,
            job_title=job.title,
            job_status=job.status.value,
            outcome=outcome,
        )
        for bid, job, outcome in list_business_bids(session, business_id)
    ]


@router.get("/{business_id}/won-jobs", response_model=list[JobResponse])
def read_won_jobs(business_id: str, session: Session = Depends(get_session)):
    return [JobResponse.from_job(j) for j in list_won_jobs(session, business_id)]


@router.get("/{business_id}/reviews", response_model=BusinessReviewsResponse)
def read_business_reviews(business_id: str, session: Session = Depends(get_session)):
    rating = get_business_rating(session, business_id)
    return BusinessReviewsResponse(
        business_id=rating.business_id,
        average_rating=rating.average_rating,
        review_count=rating.review_count,
        reviews=[ReviewResponse.from_review(r) for r in rating.reviews],
    )
