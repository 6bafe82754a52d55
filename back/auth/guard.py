"""
역할 기반 접근 제어 (Access Guard)
"""

from enum import Enum

from fastapi import Depends

from auth.dependencies import AuthContext, get_auth_context
from config.exception import Forbidden
from models.appointment import Appointment
from models.enums import Role


class Capability(str, Enum):
    BOOK_APPOINTMENT = "BOOK_APPOINTMENT"
    CANCEL_APPOINTMENT = "CANCEL_APPOINTMENT"
    COMPLETE_APPOINTMENT = "COMPLETE_APPOINTMENT"
    UPDATE_APPOINTMENT_NOTE = "UPDATE_APPOINTMENT_NOTE"
    MANAGE_SCHEDULES = "MANAGE_SCHEDULES"
    VIEW_APPOINTMENTS = "VIEW_APPOINTMENTS"
    VIEW_ALL_APPOINTMENTS = "VIEW_ALL_APPOINTMENTS"


ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.USER: frozenset({
        Capability.BOOK_APPOINTMENT,
        Capability.CANCEL_APPOINTMENT,
        Capability.VIEW_APPOINTMENTS,
    }),
    Role.COUNSELOR: frozenset({
        Capability.CANCEL_APPOINTMENT,
        Capability.COMPLETE_APPOINTMENT,
        Capability.UPDATE_APPOINTMENT_NOTE,
        Capability.MANAGE_SCHEDULES,
        Capability.VIEW_APPOINTMENTS,
    }),
    Role.ADMIN: frozenset({
        Capability.CANCEL_APPOINTMENT,
        Capability.VIEW_APPOINTMENTS,
        Capability.VIEW_ALL_APPOINTMENTS,
    }),
}


def has_capability(role: Role, capability: Capability) -> bool:
    return capability in ROLE_CAPABILITIES.get(role, frozenset())


def ensure_capability(actor: AuthContext, capability: Capability) -> None:
    if not has_capability(actor.role, capability):
        raise Forbidden("권한이 부족합니다.", details={"role": actor.role.value, "capability": capability.value})


def require_capability(capability: Capability):
    """라우터에서 Depends로 사용하는 역할 검사. 통과하면 AuthContext를 반환한다."""

    def dependency(actor: AuthContext = Depends(get_auth_context)) -> AuthContext:
        ensure_capability(actor, capability)
        return actor

    return dependency


def can_view_appointment(actor: AuthContext, appointment: Appointment) -> bool:
    """예약 당사자(내담자/담당 상담사) 또는 관리자만 조회 가능"""
    if has_capability(actor.role, Capability.VIEW_ALL_APPOINTMENTS):
        return True
    if actor.role == Role.USER:
        return appointment.user_id == actor.user_id
    if actor.role == Role.COUNSELOR:
        return appointment.counselor_id == actor.user_id
    return False
