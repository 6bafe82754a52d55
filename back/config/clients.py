#####################################################
#                                                   #
#               클라이언트 의존성 정의                 #
#                                                   #
#####################################################

from typing import Callable, Optional
from sqlalchemy.orm import Session
from database import SessionLocal
from notification.dispatcher import (
    DatabaseEvidenceSink,
    DatabaseNotificationSink,
    EvidenceSink,
    NotificationSink,
    SideEffectDispatcher,
)

# 외부 협력자(알림/증적) 인스턴스를 담을 컨테이너 클래스
class ClientContainer:
    def __init__(self):
        self.notification_sink: Optional[NotificationSink] = None
        self.evidence_sink: Optional[EvidenceSink] = None
        self.dispatcher: Optional[SideEffectDispatcher] = None

# 클라이언트들을 초기화하는 함수
def initialize_clients(session_factory: Callable[[], Session] = SessionLocal) -> ClientContainer:
    container = ClientContainer()
    # 후속 처리는 요청 트랜잭션과 분리된 세션으로 기록
    container.notification_sink = DatabaseNotificationSink(session_factory)
    container.evidence_sink = DatabaseEvidenceSink(session_factory)
    container.dispatcher = SideEffectDispatcher(container.notification_sink, container.evidence_sink)
    return container
