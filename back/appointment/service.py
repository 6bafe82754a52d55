"""
예약/시간대 상태 머신 (Booking Orchestrator)

시간대(schedule)와 예약(appointment)의 상태 전이는 모두 이 서비스를 거친다.
한 번의 전이에 속한 쓰기는 UnitOfWork 하나에서 함께 커밋되고,
알림/증적 같은 후속 처리는 커밋 이후 dispatcher로 넘긴다.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from appointment.unit_of_work import UnitOfWork
from auth.dependencies import AuthContext
from auth.guard import Capability, can_view_appointment, has_capability
from config.exception import Conflict, Forbidden, InvalidRange, InvalidState, Mismatch, NotFound
from evidence.repository import EvidenceRepository
from logs.logging_util import LoggerSingleton
from models.appointment import Appointment
from models.enums import AppointmentStatus, EvidenceTargetType, Role, ScheduleMode, ScheduleStatus
from models.evidence import EvidenceRecord
from models.schedule import CounselorSchedule
from notification.dispatcher import SideEffectDispatcher

logger = LoggerSingleton.get_logger(logger_name="booking")


@dataclass
class BookingResult:
    appointment: Appointment
    evidence: Optional[EvidenceRecord]


def _as_utc(value: datetime) -> datetime:
    """타임존 정보가 없는 값은 UTC로 간주"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class BookingService:
    """예약 상태 머신"""

    def __init__(self, uow: UnitOfWork, dispatcher: SideEffectDispatcher):
        self.uow = uow
        self.dispatcher = dispatcher

    # ------------------------------------------------------------------
    # 예약
    # ------------------------------------------------------------------
    def book_appointment(
        self,
        user_id: int,
        counselor_id: int,
        schedule_id: int,
        user_note: Optional[str] = None,
    ) -> BookingResult:
        """
        시간대를 선점하고 예약을 생성한다.

        Raises:
            AppException: NOT_FOUND, CONFLICT(이미 선점됨), MISMATCH(상담사 불일치)
        """
        logger.info(f"Booking appointment: user_id={user_id}, counselor_id={counselor_id}, schedule_id={schedule_id}")

        with self.uow as uow:
            schedule = uow.schedules.get(schedule_id)
            if schedule is None:
                raise NotFound("시간대를 찾을 수 없습니다.", details={"schedule_id": schedule_id})
            if schedule.status != ScheduleStatus.AVAILABLE:
                raise Conflict(
                    "이미 예약되었거나 예약할 수 없는 시간대입니다.",
                    details={"schedule_id": schedule_id, "status": schedule.status.value},
                )
            if schedule.counselor_id != counselor_id:
                raise Mismatch(details={"schedule_id": schedule_id, "counselor_id": counselor_id})

            # 조건부 UPDATE가 0행이면 다른 요청이 먼저 선점한 것
            if not uow.schedules.claim(schedule_id):
                raise Conflict("이미 예약되었거나 예약할 수 없는 시간대입니다.", details={"schedule_id": schedule_id})

            appointment = uow.appointments.create(
                user_id=user_id,
                counselor_id=counselor_id,
                schedule_id=schedule_id,
                status=AppointmentStatus.BOOKED,
                user_note=user_note,
            )
            appointment_id = appointment.id
            uow.commit()

        logger.info(f"Appointment booked: id={appointment_id}, schedule_id={schedule_id}")

        evidence = self.dispatcher.record_evidence(EvidenceTargetType.APPOINTMENT, appointment_id, "상담 예약 신청")
        self.dispatcher.notify(
            counselor_id,
            "새 예약 알림",
            "새로운 상담 예약이 접수되었습니다. 상세 내용을 확인해 주세요.",
            f"/counselor/appointments/{appointment_id}",
        )
        return BookingResult(appointment=appointment, evidence=evidence)

    def cancel_appointment(
        self,
        appointment_id: int,
        actor: AuthContext,
        reason: Optional[str] = None,
    ) -> Appointment:
        """
        예약 취소.

        - USER/ADMIN: CANCELLED_BY_USER, 시간대는 AVAILABLE로 반환
        - COUNSELOR: CANCELLED_BY_COUNSELOR, 시간대는 CANCELLED(휴무)
        """
        logger.info(f"Cancelling appointment: id={appointment_id}, actor={actor.user_id}, role={actor.role.value}")

        with self.uow as uow:
            appointment = uow.appointments.get(appointment_id)
            if appointment is None:
                raise NotFound("예약을 찾을 수 없습니다.", details={"appointment_id": appointment_id})
            if appointment.status != AppointmentStatus.BOOKED:
                raise InvalidState("현재 예약은 취소할 수 없습니다.", details={"status": appointment.status.value})
            if actor.role == Role.USER and appointment.user_id != actor.user_id:
                raise Forbidden("예약을 취소할 권한이 없습니다.")
            if actor.role == Role.COUNSELOR and appointment.counselor_id != actor.user_id:
                raise Forbidden("예약을 취소할 권한이 없습니다.")

            by_counselor = actor.role == Role.COUNSELOR
            user_id = appointment.user_id
            counselor_id = appointment.counselor_id
            schedule_id = appointment.schedule_id

            next_status = AppointmentStatus.CANCELLED_BY_COUNSELOR if by_counselor else AppointmentStatus.CANCELLED_BY_USER
            if not uow.appointments.set_status(appointment_id, next_status, reason):
                raise InvalidState("현재 예약은 취소할 수 없습니다.")

            if by_counselor:
                released = uow.schedules.set_status(
                    schedule_id, ScheduleStatus.CANCELLED, reason, expected=ScheduleStatus.BOOKED
                )
            else:
                released = uow.schedules.set_status(schedule_id, ScheduleStatus.AVAILABLE, None)
            if not released:
                # 시간대가 이미 BOOKED가 아니면 그대로 둔다
                current = uow.schedules.get(schedule_id)
                observed = current.status.value if current is not None else None
                logger.warning(
                    f"Schedule was not BOOKED while cancelling appointment: "
                    f"appointment_id={appointment_id}, schedule_id={schedule_id}, observed={observed}"
                )

            uow.commit()

        logger.info(f"Appointment cancelled: id={appointment_id}, status={next_status.value}")

        if by_counselor:
            self.dispatcher.notify(
                user_id,
                "예약 변경 알림",
                "상담사 사정으로 예약이 취소되었습니다. 다른 시간대를 선택해 주세요.",
                "/appointments",
            )
        else:
            self.dispatcher.notify(
                counselor_id,
                "예약 취소 알림",
                "내담자가 예약을 취소했습니다. 시간대 현황을 확인해 주세요.",
                f"/counselor/appointments/{appointment_id}",
            )
            if actor.role == Role.ADMIN:
                self.dispatcher.notify(
                    user_id,
                    "예약 취소 알림",
                    "관리자에 의해 예약이 취소되었습니다.",
                    f"/appointments/{appointment_id}",
                )
        return appointment

    def complete_appointment(self, appointment_id: int, counselor_id: int) -> Appointment:
        """상담 완료 처리. 시간대는 BOOKED로 남아 이력이 된다."""
        logger.info(f"Completing appointment: id={appointment_id}, counselor_id={counselor_id}")

        with self.uow as uow:
            appointment = uow.appointments.get(appointment_id)
            if appointment is None:
                raise NotFound("예약을 찾을 수 없습니다.", details={"appointment_id": appointment_id})
            if appointment.counselor_id != counselor_id:
                raise Forbidden("예약을 수정할 권한이 없습니다.")
            if appointment.status != AppointmentStatus.BOOKED:
                raise InvalidState("진행 중인 예약만 완료할 수 있습니다.", details={"status": appointment.status.value})

            user_id = appointment.user_id
            if not uow.appointments.set_status(appointment_id, AppointmentStatus.COMPLETED):
                raise InvalidState("진행 중인 예약만 완료할 수 있습니다.")
            uow.commit()

        logger.info(f"Appointment completed: id={appointment_id}")

        self.dispatcher.notify(
            user_id,
            "상담 완료",
            "이번 상담이 종료되었습니다. 만족도 피드백을 남겨 주세요.",
            f"/appointments/{appointment_id}",
        )
        return appointment

    def update_counselor_note(self, appointment_id: int, counselor_id: int, note: Optional[str] = None) -> Appointment:
        """상담사 준비 메모. 상태와 무관하게 수정 가능"""
        with self.uow as uow:
            appointment = uow.appointments.get(appointment_id)
            if appointment is None:
                raise NotFound("예약을 찾을 수 없습니다.", details={"appointment_id": appointment_id})
            if appointment.counselor_id != counselor_id:
                raise Forbidden("예약을 수정할 권한이 없습니다.")

            uow.appointments.set_counselor_note(appointment_id, note)
            uow.commit()

        logger.info(f"Counselor note updated: appointment_id={appointment_id}")
        return appointment

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------
    def list_appointments(self, actor: AuthContext) -> list[Appointment]:
        if has_capability(actor.role, Capability.VIEW_ALL_APPOINTMENTS):
            return self.uow.appointments.list_all()
        if actor.role == Role.COUNSELOR:
            return self.uow.appointments.list_by_counselor(actor.user_id)
        return self.uow.appointments.list_by_user(actor.user_id)

    def get_appointment(self, actor: AuthContext, appointment_id: int) -> Appointment:
        appointment = self.uow.appointments.get(appointment_id)
        if appointment is None:
            raise NotFound("예약을 찾을 수 없습니다.", details={"appointment_id": appointment_id})
        if not can_view_appointment(actor, appointment):
            raise Forbidden("예약을 조회할 권한이 없습니다.")
        return appointment

    def get_appointment_evidence(self, actor: AuthContext, appointment_id: int) -> EvidenceRecord:
        self.get_appointment(actor, appointment_id)
        record = EvidenceRepository(self.uow.session).find_by_target(EvidenceTargetType.APPOINTMENT, appointment_id)
        if record is None:
            raise NotFound("증적 기록을 찾을 수 없습니다.", details={"appointment_id": appointment_id})
        return record

    def list_schedules(self, counselor_id: int, status: Optional[ScheduleStatus] = None) -> list[CounselorSchedule]:
        return self.uow.schedules.list_by_counselor(counselor_id, status)

    def list_available_schedules(self, counselor_id: int) -> list[CounselorSchedule]:
        return self.uow.schedules.list_available(counselor_id)

    # ------------------------------------------------------------------
    # 시간대
    # ------------------------------------------------------------------
    def create_schedule(
        self,
        counselor_id: int,
        start_time: datetime,
        end_time: datetime,
        mode: ScheduleMode,
        location: Optional[str] = None,
    ) -> CounselorSchedule:
        start_time = _as_utc(start_time)
        end_time = _as_utc(end_time)
        logger.info(f"Creating schedule: counselor_id={counselor_id}, start={start_time.isoformat()}, end={end_time.isoformat()}")

        with self.uow as uow:
            # 역전된 구간은 저장소에서 INVALID_RANGE로 거절
            if start_time < end_time <= datetime.now(timezone.utc):
                raise InvalidRange("이미 지난 시간대는 등록할 수 없습니다.", code="SCHEDULE_EXPIRED")
            schedule = uow.schedules.create(counselor_id, start_time, end_time, mode, location)
            schedule_id = schedule.id
            uow.commit()

        logger.info(f"Schedule created: id={schedule_id}")
        return schedule

    def cancel_schedule(self, schedule_id: int, counselor_id: int, reason: Optional[str] = None) -> CounselorSchedule:
        """
        상담사 휴무 처리. 이미 예약된 시간대라면 해당 예약도 CANCELLED_BY_COUNSELOR로 함께 전이한다.
        """
        logger.info(f"Cancelling schedule: id={schedule_id}, counselor_id={counselor_id}")
        cascaded: Optional[tuple[int, int]] = None

        with self.uow as uow:
            schedule = uow.schedules.get(schedule_id)
            if schedule is None:
                raise NotFound("시간대를 찾을 수 없습니다.", details={"schedule_id": schedule_id})
            if schedule.counselor_id != counselor_id:
                raise Forbidden("본인의 시간대만 취소할 수 있습니다.")
            if schedule.status == ScheduleStatus.CANCELLED:
                raise InvalidState("이미 취소된 시간대입니다.")

            observed = schedule.status
            active = None
            if observed == ScheduleStatus.BOOKED:
                active = uow.appointments.find_active_by_schedule(schedule_id)
                # 완료된 상담의 시간대는 이력으로 BOOKED 유지
                if active is None:
                    raise InvalidState(
                        "완료된 상담의 시간대는 취소할 수 없습니다.",
                        details={"schedule_id": schedule_id, "status": observed.value},
                    )

            if not uow.schedules.set_status(schedule_id, ScheduleStatus.CANCELLED, reason, expected=observed):
                raise Conflict("시간대 상태가 변경되었습니다. 다시 시도해 주세요.", details={"schedule_id": schedule_id})

            if active is not None:
                if not uow.appointments.set_status(active.id, AppointmentStatus.CANCELLED_BY_COUNSELOR, reason):
                    raise Conflict("예약 상태가 변경되었습니다. 다시 시도해 주세요.", details={"appointment_id": active.id})
                cascaded = (active.id, active.user_id)

            uow.commit()

        logger.info(f"Schedule cancelled: id={schedule_id}, cascaded_appointment={cascaded[0] if cascaded else None}")

        if cascaded is not None:
            self.dispatcher.notify(
                cascaded[1],
                "예약 변경 알림",
                "상담사 사정으로 예약이 취소되었습니다. 다른 시간대를 선택해 주세요.",
                "/appointments",
            )
        return schedule
