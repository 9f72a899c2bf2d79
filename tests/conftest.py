"""
Pytest configuration and fixtures.

Tests run against SQLite through SQLModel: an in-memory database for most
tests, a file database where several connections must race each other.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("NOTIFICATIONS_BACKEND", "log")

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Session

from weldbid.db import get_session, init_db
from weldbid.jobs_router import get_dispatcher
from weldbid.main import app
from weldbid.models import Bid, Job, JobStatus
from weldbid.money import to_cents
from weldbid.notifications import NotificationDispatcher

BASE_TIME = datetime(2026, 1, 5, 9, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def file_engine(tmp_path):
    """Engine with real separate connections, for race tests."""
    engine = create_engine(
        f"sqlite:///{tmp_path / 'weldbid.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def dispatcher():
    return Mock(spec=NotificationDispatcher)


@pytest.fixture
def client(engine, dispatcher):
    def _get_session():
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    app.dependency_overrides[get_dispatcher] = lambda: dispatcher
    with TestClient(app) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture
def make_job():
    def _make_job(session, status=JobStatus.open, customer_id="cust-1", title="Gate hinge repair", **kwargs):
        job = Job(customer_id=customer_id, title=title, status=status, **kwargs)
        session.add(job)
        session.commit()
        session.refresh(job)
        return job

    return _make_job


@pytest.fixture
def make_bid():
    """Insert a bid directly with a controlled submission time (minutes after BASE_TIME)."""

    def _make_bid(session, job, business_id, amount, minute=0, bid_id=None):
        bid = Bid(
            job_id=job.id,
            business_id=business_id,
            amount_cents=to_cents(Decimal(str(amount))),
            created_at=BASE_TIME + timedelta(minutes=minute),
        )
        if bid_id is not None:
            bid.id = bid_id
        session.add(bid)
        if job.status == JobStatus.open:
            job.status = JobStatus.bidding
            session.add(job)
        session.commit()
        session.refresh(bid)
        return bid

    return _make_bid
