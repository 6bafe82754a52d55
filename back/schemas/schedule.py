"""
상담 가능 시간대(Schedule) 스키마
"""

import datetime
from typing import Optional

from pydantic import Field

from models.enums import ScheduleMode, ScheduleStatus
from schemas.base import CamelModel


class ScheduleCreate(CamelModel):
    """시간대 생성 스키마"""
    start_time: datetime.datetime = Field(..., description="시작 시각")
    end_time: datetime.datetime = Field(..., description="종료 시각")
    mode: ScheduleMode = Field(..., description="상담 방식 (ONLINE, OFFLINE)")
    location: Optional[str] = Field(None, max_length=255, description="오프라인 상담 장소")


class ScheduleCancel(CamelModel):
    """시간대 취소(휴무) 스키마"""
    reason: Optional[str] = Field(None, max_length=255)


class ScheduleResponse(CamelModel):
    """시간대 응답 스키마"""
    id: int
    counselor_id: int
    start_time: datetime.datetime
    end_time: datetime.datetime
    mode: ScheduleMode
    location: Optional[str] = None
    status: ScheduleStatus
    cancel_reason: Optional[str] = None
    created_at: Optional[datetime.datetime] = None
    updated_at: Optional[datetime.datetime] = None


class ScheduleEnvelope(CamelModel):
    schedule: ScheduleResponse


class ScheduleActionResponse(CamelModel):
    message: str
    schedule: ScheduleResponse


class ScheduleListResponse(CamelModel):
    """시간대 목록 응답"""
    schedules: list[ScheduleResponse]
