from fastapi import APIRouter, Depends
from sqlmodel import Session

from weldbid.db import get_session
from weldbid.jobs_service import list_customer_jobs
from weldbid.notifications_repo import list_notifications_for_user
from weldbid.schemas import JobResponse

router = APIRouter(tags=["users"])


@router.get("/customers/{customer_id}/jobs", response_model=list[JobResponse])
def read_customer_jobs(customer_id: str, session: Session = Depends(get_session)):
    return [JobResponse.from_job(j) for j in list_customer_jobs(session, customer_id)]


@router.get("/users/{user_id}/notifications")
def read_notifications(user_id: str, session: Session = Depends(get_session)):
    return list_notifications_for_user(session, user_id)
