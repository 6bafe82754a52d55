"""
증적(EvidenceRecord) 저장소 - 추가만 허용
"""

from typing import Optional

from sqlalchemy.orm import Session

from models.enums import EvidenceStatus, EvidenceTargetType
from models.evidence import EvidenceRecord


class EvidenceRepository:
    """증적 자리표시자 DB 연산"""

    def __init__(self, db: Session):
        self.db = db

    def create(self, target_type: EvidenceTargetType, target_id: int, summary: Optional[str] = None) -> EvidenceRecord:
        record = EvidenceRecord(
            target_type=target_type,
            target_id=target_id,
            summary=summary,
            status=EvidenceStatus.PENDING,
        )
        self.db.add(record)
        self.db.flush()
        return record

    def find_by_target(self, target_type: EvidenceTargetType, target_id: int) -> Optional[EvidenceRecord]:
        """대상의 가장 최근 증적"""
        return (
            self.db.query(EvidenceRecord)
            .filter(EvidenceRecord.target_type == target_type, EvidenceRecord.target_id == target_id)
            .order_by(EvidenceRecord.id.desc())
            .first()
        )
