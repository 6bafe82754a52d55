"""
테스트 공용 도우미 (sink 대역, 시간 구간, 인증 헤더)
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from auth.security import create_access_token
from models.enums import EvidenceStatus, EvidenceTargetType
from models.evidence import EvidenceRecord
from models.user import User


class RecordingNotificationSink:
    def __init__(self):
        self.sent = []

    def notify_in_app(self, user_id: int, title: str, message: str, link: Optional[str] = None) -> None:
        self.sent.append({"user_id": user_id, "title": title, "message": message, "link": link})

    def recipients(self) -> list[int]:
        return [item["user_id"] for item in self.sent]


class RecordingEvidenceSink:
    def __init__(self):
        self.records = []

    def record(self, target_type: EvidenceTargetType, target_id: int, summary: Optional[str] = None) -> EvidenceRecord:
        record = EvidenceRecord(
            id=len(self.records) + 1,
            target_type=target_type,
            target_id=target_id,
            summary=summary,
            status=EvidenceStatus.PENDING,
        )
        self.records.append(record)
        return record


class FailingSink:
    """모든 호출에서 예외를 던지는 sink"""

    def notify_in_app(self, *args, **kwargs):
        raise RuntimeError("notification backend down")

    def record(self, *args, **kwargs):
        raise RuntimeError("evidence backend down")


def future_window(hours_from_now: int = 24, length_minutes: int = 50) -> tuple[datetime, datetime]:
    start = datetime.now(timezone.utc).replace(microsecond=0) + timedelta(hours=hours_from_now)
    return start, start + timedelta(minutes=length_minutes)


def auth_headers(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


def refetch(db, model, pk):
    """다른 세션에서 바뀐 값을 다시 읽는다"""
    db.expire_all()
    return db.get(model, pk)
