"""
증적(EvidenceRecord) 모델 - 추가 전용 감사 기록
"""

from sqlalchemy import Column, Integer, Text, DateTime, Enum, Index
from sqlalchemy.sql import func
from database import Base
from models.enums import EvidenceTargetType, EvidenceStatus


class EvidenceRecord(Base):
    """업무 이벤트 발생을 표시하는 증적 자리표시자. 외부 검증 전까지 PENDING"""
    __tablename__ = "evidence_records"
    __table_args__ = (
        Index("idx_evidence_target", "target_type", "target_id"),
    )

    id = Column(Integer, primary_key=True, index=True)
    target_type = Column(Enum(EvidenceTargetType, name="evidence_target_type", native_enum=False, length=32), nullable=False)
    target_id = Column(Integer, nullable=False)
    summary = Column(Text, nullable=True)
    status = Column(
        Enum(EvidenceStatus, name="evidence_status", native_enum=False, length=16),
        nullable=False,
        default=EvidenceStatus.PENDING,
    )

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self):
        return f"<EvidenceRecord(id={self.id}, target={self.target_type}:{self.target_id})>"
