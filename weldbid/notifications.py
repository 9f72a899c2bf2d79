'''
weldbid.notifications
낙찰 알림. fire-and-forget 이라 알림이 실패해도 낙찰은 실패하지 않습니다.
'''

from abc import ABC, abstractmethod
from typing import Any, Optional
import logging

from sqlalchemy.engine import Engine
from sqlmodel import Session

from weldbid.models import Bid, Job, Notification
from weldbid.money import from_cents

logger = logging.getLogger(__name__)


class NotificationDispatcher(ABC):
    """
    사용자에게 알림을 보냅니다.

    실제 채널(DB 알림함, 로그, 푸시...)은 하위 클래스가 send()로 구현.
    """

    @abstractmethod
    def send(
        self,
        user_id: str,
        title: str,
        body: str,
        data: Optional[dict[str, Any]] = None,
    ) -> None:
        pass


class LoggingDispatcher(NotificationDispatcher):
    def send(self, user_id, title, body, data=None):
        logger.info(f"Notification to {user_id}: {title} - {body} {data or {}}")


class StoredNotificationDispatcher(NotificationDispatcher):
    """
    notifications 테이블(앱 내 알림함)에 저장합니다.

    자기 세션을 따로 씀. insert가 실패해도 호출한 쪽 트랜잭션은 안 건드림.
    """

    def __init__(self, engine: Engine):
        if engine is None:
            raise ValueError("Engine is required")
        self.engine = engine

    def send(self, user_id, title, body, data=None):
        with Session(self.engine) as session:
            session.add(Notification(user_id=user_id, title=title, body=body, data=data))
            session.commit()


def notify_award(dispatcher: NotificationDispatcher | None, job: Job, winning_bid: Bid) -> None:
    if dispatcher is None:
        return

    amount = f"${from_cents(winning_bid.amount_cents)}"
    data = {"type": "job_awarded", "job_id": job.id, "bid_id": winning_bid.id}

    messages = [
        (
            winning_bid.business_id,
            "You won the job!",
            f"Your bid of {amount} was selected for \"{job.title}\".",
        ),
        (
            job.customer_id,
            "Your job has been awarded",
            f"\"{job.title}\" was awarded for {amount}.",
        ),
    ]

    for user_id, title, body in messages:
        try:
            dispatcher.send(user_id, title, body, data)
        except Exception as e:
            logger.error(
                f"Failed to send award notification for job {job.id} to {user_id}: {e}",
                exc_info=True,
            )
