"""
알림(Notification) 스키마
"""

import datetime
from typing import Optional

from models.enums import NotificationChannel
from schemas.base import CamelModel


class NotificationResponse(CamelModel):
    id: int
    user_id: int
    channel: NotificationChannel
    title: str
    message: str
    link: Optional[str] = None
    read_at: Optional[datetime.datetime] = None
    created_at: Optional[datetime.datetime] = None


class NotificationListResponse(CamelModel):
    notifications: list[NotificationResponse]


class NotificationReadAllResponse(CamelModel):
    updated: int
