"""
상담 예약(Appointment) 모델
"""

from sqlalchemy import Column, Integer, Text, DateTime, ForeignKey, Enum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from database import Base
from models.enums import AppointmentStatus
from models.schedule import CounselorSchedule


class Appointment(Base):
    """상담 예약 모델 (예약 시도 1건당 1행)"""
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)  # 내담자 ID
    counselor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)  # 상담사 ID
    schedule_id = Column(Integer, ForeignKey("counselor_schedules.id"), nullable=False, index=True)
    status = Column(
        Enum(AppointmentStatus, name="appointment_status", native_enum=False, length=32),
        nullable=False,
        default=AppointmentStatus.BOOKED,
    )
    user_note = Column(Text, nullable=True)  # 내담자 요청사항
    counselor_note = Column(Text, nullable=True)  # 상담사 준비 메모
    cancel_reason = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    # 관계
    schedule = relationship(CounselorSchedule)

    def __repr__(self):
        return f"<Appointment(id={self.id}, schedule_id={self.schedule_id}, status={self.status})>"
