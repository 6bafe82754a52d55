#####################################################
#                                                   #
#            상태 전이 후속 처리(알림/증적) 정의          #
#                                                   #
#####################################################

from typing import Callable, Optional, Protocol

from sqlalchemy.orm import Session

from evidence.repository import EvidenceRepository
from logs.logging_util import LoggerSingleton
from models.enums import EvidenceTargetType
from models.evidence import EvidenceRecord
from notification.repository import NotificationRepository

logger = LoggerSingleton.get_logger(logger_name="dispatcher")


class NotificationSink(Protocol):
    def notify_in_app(self, user_id: int, title: str, message: str, link: Optional[str] = None) -> None:
        ...


class EvidenceSink(Protocol):
    def record(self, target_type: EvidenceTargetType, target_id: int, summary: Optional[str] = None) -> EvidenceRecord:
        ...


class DatabaseNotificationSink:
    """별도 세션(별도 트랜잭션)으로 앱 내 알림 저장"""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def notify_in_app(self, user_id: int, title: str, message: str, link: Optional[str] = None) -> None:
        db = self.session_factory()
        try:
            NotificationRepository(db).create(user_id, title, message, link)
            db.commit()
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


class DatabaseEvidenceSink:
    """별도 세션으로 증적 자리표시자 저장. 세션에서 분리된 레코드를 반환한다."""

    def __init__(self, session_factory: Callable[[], Session]):
        self.session_factory = session_factory

    def record(self, target_type: EvidenceTargetType, target_id: int, summary: Optional[str] = None) -> EvidenceRecord:
        db = self.session_factory()
        try:
            record = EvidenceRepository(db).create(target_type, target_id, summary)
            db.commit()
            db.refresh(record)
            db.expunge(record)
            return record
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()


class SideEffectDispatcher:
    """
    커밋 이후 호출되는 후속 처리 창구.

    실패는 기록만 하고 호출자에게 전파하지 않는다. 이미 커밋된 상태 전이는 그대로 유지된다.
    """

    def __init__(self, notification_sink: NotificationSink, evidence_sink: EvidenceSink):
        self.notification_sink = notification_sink
        self.evidence_sink = evidence_sink

    def notify(self, user_id: int, title: str, message: str, link: Optional[str] = None) -> bool:
        try:
            self.notification_sink.notify_in_app(user_id, title, message, link)
        except Exception:
            logger.exception(f"In-app notification failed: user_id={user_id}, title={title}")
            return False
        logger.info(f"In-app notification sent: user_id={user_id}, title={title}")
        return True

    def record_evidence(
        self,
        target_type: EvidenceTargetType,
        target_id: int,
        summary: Optional[str] = None,
    ) -> Optional[EvidenceRecord]:
        try:
            record = self.evidence_sink.record(target_type, target_id, summary)
        except Exception:
            logger.exception(f"Evidence placeholder failed: target={target_type.value}:{target_id}")
            return None
        logger.info(f"Evidence placeholder recorded: target={target_type.value}:{target_id}")
        return record
