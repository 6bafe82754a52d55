"""
앱 내 알림 API 라우터
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from auth.dependencies import AuthContext, get_auth_context
from config.exception import NotFound
from database import get_db
from notification.repository import NotificationRepository
from schemas.notification import NotificationListResponse, NotificationReadAllResponse, NotificationResponse
from logs.logging_util import LoggerSingleton

logger = LoggerSingleton.get_logger(logger_name="notification")

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
def get_notifications(
    unread_only: bool = Query(False, alias="unreadOnly"),
    actor: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """내 알림 목록 (최신순)"""
    notifications = NotificationRepository(db).list_by_user(actor.user_id, unread_only)
    return NotificationListResponse(notifications=[NotificationResponse.model_validate(n) for n in notifications])


@router.post("/read-all", response_model=NotificationReadAllResponse)
def read_all_notifications(
    actor: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """모든 알림 읽음 처리"""
    updated = NotificationRepository(db).mark_all_read(actor.user_id)
    db.commit()
    logger.info(f"Notifications marked read: user_id={actor.user_id}, count={updated}")
    return NotificationReadAllResponse(updated=updated)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def read_notification(
    notification_id: int,
    actor: AuthContext = Depends(get_auth_context),
    db: Session = Depends(get_db),
):
    """알림 읽음 처리"""
    repo = NotificationRepository(db)
    notification = repo.get_for_user(notification_id, actor.user_id)
    if notification is None:
        raise NotFound("알림을 찾을 수 없습니다.", details={"notification_id": notification_id})

    repo.mark_read(notification)
    db.commit()
    db.refresh(notification)
    return NotificationResponse.model_validate(notification)
