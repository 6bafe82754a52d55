"""
도메인 열거형 정의
"""

from enum import Enum


class Role(str, Enum):
    """사용자 역할"""
    USER = "USER"
    COUNSELOR = "COUNSELOR"
    ADMIN = "ADMIN"


class ScheduleMode(str, Enum):
    """상담 방식"""
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


class ScheduleStatus(str, Enum):
    """상담 가능 시간대(schedule) 상태"""
    AVAILABLE = "AVAILABLE"
    BOOKED = "BOOKED"
    CANCELLED = "CANCELLED"


class AppointmentStatus(str, Enum):
    """예약 상태"""
    BOOKED = "BOOKED"
    CANCELLED_BY_USER = "CANCELLED_BY_USER"
    CANCELLED_BY_COUNSELOR = "CANCELLED_BY_COUNSELOR"
    COMPLETED = "COMPLETED"


class EvidenceTargetType(str, Enum):
    APPOINTMENT = "APPOINTMENT"
    SCHEDULE = "SCHEDULE"


class EvidenceStatus(str, Enum):
    PENDING = "PENDING"
    RECORDED = "RECORDED"


class NotificationChannel(str, Enum):
    IN_APP = "IN_APP"


# 현재 상태 -> 이동 가능한 다음 상태
SCHEDULE_TRANSITIONS = {
    ScheduleStatus.AVAILABLE: {ScheduleStatus.BOOKED, ScheduleStatus.CANCELLED},
    ScheduleStatus.BOOKED: {ScheduleStatus.AVAILABLE, ScheduleStatus.CANCELLED},
    ScheduleStatus.CANCELLED: set(),
}

APPOINTMENT_TRANSITIONS = {
    AppointmentStatus.BOOKED: {
        AppointmentStatus.CANCELLED_BY_USER,
        AppointmentStatus.CANCELLED_BY_COUNSELOR,
        AppointmentStatus.COMPLETED,
    },
    AppointmentStatus.CANCELLED_BY_USER: set(),
    AppointmentStatus.CANCELLED_BY_COUNSELOR: set(),
    AppointmentStatus.COMPLETED: set(),
}

CANCELLED_APPOINTMENT_STATUSES = {
    AppointmentStatus.CANCELLED_BY_USER,
    AppointmentStatus.CANCELLED_BY_COUNSELOR,
}


def schedule_sources_for(target: ScheduleStatus) -> list[ScheduleStatus]:
    """target 상태로 이동할 수 있는 현재 상태 목록"""
    return [source for source, targets in SCHEDULE_TRANSITIONS.items() if target in targets]


def appointment_sources_for(target: AppointmentStatus) -> list[AppointmentStatus]:
    return [source for source, targets in APPOINTMENT_TRANSITIONS.items() if target in targets]
