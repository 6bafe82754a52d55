"""
상담 예약 관리 API 라우터
"""

from fastapi import APIRouter, Depends, status
from appointment.service import BookingService
from auth.dependencies import AuthContext
from auth.guard import Capability, require_capability
from config.dependencies import get_booking_service
from models.appointment import Appointment
from schemas.appointment import (
    AppointmentActionResponse,
    AppointmentCancel,
    AppointmentCreate,
    AppointmentEnvelope,
    AppointmentListResponse,
    AppointmentNoteUpdate,
    AppointmentResponse,
    BookingResponse,
    EvidenceEnvelope,
    EvidenceResponse,
)
from logs.logging_util import LoggerSingleton

logger = LoggerSingleton.get_logger(logger_name="appointment")

router = APIRouter(prefix="/appointments", tags=["Appointments"])


def _to_response(appt: Appointment) -> AppointmentResponse:
    return AppointmentResponse.model_validate(appt)


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_appointment(
    data: AppointmentCreate,
    actor: AuthContext = Depends(require_capability(Capability.BOOK_APPOINTMENT)),
    service: BookingService = Depends(get_booking_service),
):
    """예약 신청 (내담자 전용)"""
    logger.info(f"POST /appointments: user_id={actor.user_id}, schedule_id={data.schedule_id}")
    result = service.book_appointment(actor.user_id, data.counselor_id, data.schedule_id, data.user_note)
    evidence = EvidenceResponse.model_validate(result.evidence) if result.evidence is not None else None
    return BookingResponse(appointment=_to_response(result.appointment), evidence=evidence)


@router.get("", response_model=AppointmentListResponse)
def get_appointments(
    actor: AuthContext = Depends(require_capability(Capability.VIEW_APPOINTMENTS)),
    service: BookingService = Depends(get_booking_service),
):
    """역할별 예약 목록 (내담자: 본인, 상담사: 담당, 관리자: 전체)"""
    appts = service.list_appointments(actor)
    return AppointmentListResponse(appointments=[_to_response(a) for a in appts])


@router.get("/{appointment_id}", response_model=AppointmentEnvelope)
def get_appointment(
    appointment_id: int,
    actor: AuthContext = Depends(require_capability(Capability.VIEW_APPOINTMENTS)),
    service: BookingService = Depends(get_booking_service),
):
    """예약 상세 조회"""
    return AppointmentEnvelope(appointment=_to_response(service.get_appointment(actor, appointment_id)))


@router.get("/{appointment_id}/evidence", response_model=EvidenceEnvelope)
def get_appointment_evidence(
    appointment_id: int,
    actor: AuthContext = Depends(require_capability(Capability.VIEW_APPOINTMENTS)),
    service: BookingService = Depends(get_booking_service),
):
    """예약 증적 조회"""
    record = service.get_appointment_evidence(actor, appointment_id)
    return EvidenceEnvelope(evidence=EvidenceResponse.model_validate(record))


@router.post("/{appointment_id}/cancel", response_model=AppointmentActionResponse)
def cancel_appointment(
    appointment_id: int,
    data: AppointmentCancel | None = None,
    actor: AuthContext = Depends(require_capability(Capability.CANCEL_APPOINTMENT)),
    service: BookingService = Depends(get_booking_service),
):
    """예약 취소 (내담자/상담사/관리자)"""
    reason = data.reason if data else None
    appt = service.cancel_appointment(appointment_id, actor, reason)
    return AppointmentActionResponse(message="예약이 취소되었습니다.", appointment=_to_response(appt))


@router.patch("/{appointment_id}/note", response_model=AppointmentActionResponse)
def update_appointment_note(
    appointment_id: int,
    data: AppointmentNoteUpdate,
    actor: AuthContext = Depends(require_capability(Capability.UPDATE_APPOINTMENT_NOTE)),
    service: BookingService = Depends(get_booking_service),
):
    """상담사 준비 메모 수정"""
    appt = service.update_counselor_note(appointment_id, actor.user_id, data.note)
    return AppointmentActionResponse(message="메모가 수정되었습니다.", appointment=_to_response(appt))


@router.post("/{appointment_id}/complete", response_model=AppointmentActionResponse)
def complete_appointment(
    appointment_id: int,
    actor: AuthContext = Depends(require_capability(Capability.COMPLETE_APPOINTMENT)),
    service: BookingService = Depends(get_booking_service),
):
    """상담 완료 처리 (상담사 전용)"""
    appt = service.complete_appointment(appointment_id, actor.user_id)
    return AppointmentActionResponse(message="상담이 완료 처리되었습니다.", appointment=_to_response(appt))
