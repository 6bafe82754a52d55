"""
알림(Notification) 저장소
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.orm import Session

from models.enums import NotificationChannel
from models.notification import Notification


class NotificationRepository:
    """알림 DB 연산"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, user_id: int, title: str, message: str, link: Optional[str] = None) -> Notification:
        notification = Notification(
            user_id=user_id,
            channel=NotificationChannel.IN_APP,
            title=title,
            message=message,
            link=link,
        )
        self.db.add(notification)
        self.db.flush()
        return notification

    def list_by_user(self, user_id: int, unread_only: bool = False) -> list[Notification]:
        query = self.db.query(Notification).filter(Notification.user_id == user_id)
        if unread_only:
            query = query.filter(Notification.read_at.is_(None))
        return query.order_by(Notification.created_at.desc(), Notification.id.desc()).all()

    def get_for_user(self, notification_id: int, user_id: int) -> Optional[Notification]:
        return (
            self.db.query(Notification)
            .filter(Notification.id == notification_id, Notification.user_id == user_id)
            .first()
        )

    def mark_read(self, notification: Notification) -> Notification:
        if notification.read_at is None:
            notification.read_at = datetime.now(timezone.utc)
        self.db.flush()
        return notification

    def mark_all_read(self, user_id: int) -> int:
        """읽지 않은 알림을 모두 읽음 처리하고 변경 건수를 반환"""
        return (
            self.db.query(Notification)
            .filter(Notification.user_id == user_id, Notification.read_at.is_(None))
            .update({Notification.read_at: datetime.now(timezone.utc)}, synchronize_session=False)
        )
