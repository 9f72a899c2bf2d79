from typing import Any, Optional
from datetime import datetime, timezone
from enum import Enum
import uuid

from sqlmodel import SQLModel, Field
from sqlalchemy import JSON, Column, DateTime, UniqueConstraint
from sqlalchemy import Enum as SAEnum


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_column(nullable: bool = False) -> Column:
    # 컬럼 타입을 직접 지정. sqlmodel 버전마다 datetime 기본 매핑이 달라서
    # (최신 버전은 tz 없는 값을 거부함) 여기서 timezone=True로 고정
    return Column(DateTime(timezone=True), nullable=nullable)


class JobStatus(str, Enum):
    open = "open"
    bidding = "bidding"
    awarded = "awarded"
    completed = "completed"


# 입찰 가능한 상태
BIDDABLE_STATUSES = (JobStatus.open, JobStatus.bidding)


class Job(SQLModel, table=True):
    __tablename__ = "jobs"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    customer_id: str = Field(nullable=False, index=True, max_length=64)

    title: str = Field(nullable=False, max_length=255)
    description: Optional[str] = Field(default=None)
    city: Optional[str] = Field(default=None, max_length=128)
    state: Optional[str] = Field(default=None, max_length=64)

    status: JobStatus = Field(
        default=JobStatus.open,
        sa_column=Column(
            SAEnum(
                JobStatus,
                name="job_status",
                values_callable=lambda e: [m.value for m in e],
            ),
            nullable=False,
            index=True,
        ),
    )

    # 한 번 정해지면 절대 안 바뀜
    winning_bid_id: Optional[str] = Field(default=None, max_length=32)

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
    awarded_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))
    completed_at: Optional[datetime] = Field(default=None, sa_column=timestamp_column(nullable=True))


class Bid(SQLModel, table=True):
    __tablename__ = "bids"
    # 한 업체는 한 job에 입찰 한 번만
    __table_args__ = (
        UniqueConstraint("job_id", "business_id", name="uq_bids_job_business"),
    )

    id: str = Field(default_factory=new_id, primary_key=True, max_length=32)
    job_id: str = Field(foreign_key="jobs.id", nullable=False, index=True, max_length=32)
    business_id: str = Field(nullable=False, index=True, max_length=64)

    amount_cents: int = Field(nullable=False, gt=0)
    notes: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())


class Notification(SQLModel, table=True):
    __tablename__ = "notifications"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: str = Field(nullable=False, index=True, max_length=64)
    title: str = Field(nullable=False, max_length=255)
    body: str = Field(nullable=False)
    data: Optional[dict[str, Any]] = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())


class Review(SQLModel, table=True):
    __tablename__ = "reviews"
    # 고객은 job 하나에 리뷰 한 번만
    __table_args__ = (
        UniqueConstraint("job_id", "customer_id", name="uq_reviews_job_customer"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    job_id: str = Field(foreign_key="jobs.id", nullable=False, index=True, max_length=32)
    customer_id: str = Field(nullable=False, max_length=64)
    business_id: str = Field(nullable=False, index=True, max_length=64)

    rating: int = Field(nullable=False, ge=1, le=5)
    comment: Optional[str] = Field(default=None)

    created_at: datetime = Field(default_factory=utcnow, sa_column=timestamp_column())
