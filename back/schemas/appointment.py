"""
상담 예약(Appointment) 스키마
"""

import datetime
from typing import Optional

from pydantic import Field

from models.enums import AppointmentStatus, EvidenceStatus, EvidenceTargetType
from schemas.base import CamelModel
from schemas.schedule import ScheduleResponse


class AppointmentCreate(CamelModel):
    """예약 생성 스키마"""
    counselor_id: int = Field(..., description="상담사 ID")
    schedule_id: int = Field(..., description="시간대 ID")
    user_note: Optional[str] = Field(None, max_length=2000, description="내담자 요청사항")


class AppointmentCancel(CamelModel):
    """예약 취소 스키마"""
    reason: Optional[str] = Field(None, max_length=500)


class AppointmentNoteUpdate(CamelModel):
    """상담사 준비 메모 수정 스키마"""
    note: Optional[str] = Field(None, max_length=2000)


class AppointmentResponse(CamelModel):
    """예약 응답 스키마"""
    id: int
    user_id: int
    counselor_id: int
    schedule_id: int
    status: AppointmentStatus
    user_note: Optional[str] = None
    counselor_note: Optional[str] = None
    cancel_reason: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None
    cancelled_at: Optional[datetime.datetime] = None
    completed_at: Optional[datetime.datetime] = None
    schedule: Optional[ScheduleResponse] = None


class EvidenceResponse(CamelModel):
    """증적 자리표시자 응답"""
    id: int
    target_type: EvidenceTargetType
    target_id: int
    summary: Optional[str] = None
    status: EvidenceStatus
    created_at: Optional[datetime.datetime] = None


class BookingResponse(CamelModel):
    """예약 생성 응답 (증적 기록 실패 시 evidence는 null)"""
    appointment: AppointmentResponse
    evidence: Optional[EvidenceResponse] = None


class AppointmentEnvelope(CamelModel):
    appointment: AppointmentResponse


class AppointmentActionResponse(CamelModel):
    message: str
    appointment: AppointmentResponse


class AppointmentListResponse(CamelModel):
    """예약 목록 응답"""
    appointments: list[AppointmentResponse]


class EvidenceEnvelope(CamelModel):
    evidence: EvidenceResponse
