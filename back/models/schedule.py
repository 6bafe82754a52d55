"""
상담 가능 시간대(CounselorSchedule) 모델
"""

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Enum, CheckConstraint
from sqlalchemy.sql import func
from database import Base
from models.enums import ScheduleMode, ScheduleStatus


class CounselorSchedule(Base):
    """상담사가 공개한 예약 가능 시간대"""
    __tablename__ = "counselor_schedules"
    __table_args__ = (
        CheckConstraint("end_time > start_time", name="ck_schedule_time_range"),
    )

    id = Column(Integer, primary_key=True, index=True)
    counselor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    start_time = Column(DateTime(timezone=True), nullable=False)
    end_time = Column(DateTime(timezone=True), nullable=False)
    mode = Column(Enum(ScheduleMode, name="schedule_mode", native_enum=False, length=16), nullable=False, default=ScheduleMode.ONLINE)
    location = Column(String(255), nullable=True)
    status = Column(
        Enum(ScheduleStatus, name="schedule_status", native_enum=False, length=16),
        nullable=False,
        default=ScheduleStatus.AVAILABLE,
        index=True,
    )
    cancel_reason = Column(Text, nullable=True)  # 상담사 휴무 사유 또는 예약 취소 사유

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    def __repr__(self):
        return f"<CounselorSchedule(id={self.id}, counselor_id={self.counselor_id}, status={self.status})>"
