'''
weldbid.notifications_repo
notifications 테이블 조회만 합니다.
'''

from sqlmodel import Session, select

from weldbid.models import Notification


def list_notifications_for_user(session: Session, user_id: str) -> list[Notification]:
    statement = (
        select(Notification)
        .where(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc(), Notification.id.desc())
    )
    return session.exec(statement).all()
