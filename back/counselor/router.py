"""
상담사 시간대 관리 API 라우터
"""

from typing import Optional
from fastapi import APIRouter, Depends, Query, status
from appointment.service import BookingService
from auth.dependencies import AuthContext
from auth.guard import Capability, require_capability
from config.dependencies import get_booking_service
from models.enums import ScheduleStatus
from schemas.schedule import (
    ScheduleActionResponse,
    ScheduleCancel,
    ScheduleCreate,
    ScheduleEnvelope,
    ScheduleListResponse,
    ScheduleResponse,
)
from logs.logging_util import LoggerSingleton

logger = LoggerSingleton.get_logger(logger_name="counselor")

router = APIRouter(prefix="/counselors", tags=["Counselors"])


@router.post("/schedules", response_model=ScheduleEnvelope, status_code=status.HTTP_201_CREATED)
def create_schedule(
    data: ScheduleCreate,
    actor: AuthContext = Depends(require_capability(Capability.MANAGE_SCHEDULES)),
    service: BookingService = Depends(get_booking_service),
):
    """예약 가능 시간대 등록"""
    schedule = service.create_schedule(actor.user_id, data.start_time, data.end_time, data.mode, data.location)
    return ScheduleEnvelope(schedule=ScheduleResponse.model_validate(schedule))


@router.get("/schedules", response_model=ScheduleListResponse)
def list_my_schedules(
    schedule_status: Optional[ScheduleStatus] = Query(None, alias="status"),
    actor: AuthContext = Depends(require_capability(Capability.MANAGE_SCHEDULES)),
    service: BookingService = Depends(get_booking_service),
):
    """본인 시간대 목록 (상태 필터 선택)"""
    schedules = service.list_schedules(actor.user_id, schedule_status)
    return ScheduleListResponse(schedules=[ScheduleResponse.model_validate(s) for s in schedules])


@router.patch("/schedules/{schedule_id}/cancel", response_model=ScheduleActionResponse)
def cancel_schedule(
    schedule_id: int,
    data: ScheduleCancel | None = None,
    actor: AuthContext = Depends(require_capability(Capability.MANAGE_SCHEDULES)),
    service: BookingService = Depends(get_booking_service),
):
    """시간대 취소 (상담사 휴무)"""
    reason = data.reason if data else None
    schedule = service.cancel_schedule(schedule_id, actor.user_id, reason)
    return ScheduleActionResponse(message="시간대가 취소되었습니다.", schedule=ScheduleResponse.model_validate(schedule))


@router.get("/{counselor_id}/schedules", response_model=ScheduleListResponse)
def list_available_schedules(
    counselor_id: int,
    service: BookingService = Depends(get_booking_service),
):
    """내담자용 예약 가능 시간대 목록"""
    logger.info(f"Fetching available schedules: counselor_id={counselor_id}")
    schedules = service.list_available_schedules(counselor_id)
    return ScheduleListResponse(schedules=[ScheduleResponse.model_validate(s) for s in schedules])
