"""
상담 예약(Appointment) 저장소
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from models.appointment import Appointment
from models.enums import AppointmentStatus, CANCELLED_APPOINTMENT_STATUSES, appointment_sources_for


class AppointmentRepository:
    """예약 DB 연산. commit은 UnitOfWork에서만 수행한다."""

    def __init__(self, db: Session):
        self.db = db

    def create(self, **fields) -> Appointment:
        appointment = Appointment(**fields)
        self.db.add(appointment)
        self.db.flush()
        return appointment

    def get(self, appointment_id: int) -> Optional[Appointment]:
        return self.db.query(Appointment).filter(Appointment.id == appointment_id).first()

    def _newest_first(self, query):
        return query.order_by(Appointment.created_at.desc(), Appointment.id.desc()).all()

    def list_by_user(self, user_id: int) -> list[Appointment]:
        return self._newest_first(self.db.query(Appointment).filter(Appointment.user_id == user_id))

    def list_by_counselor(self, counselor_id: int) -> list[Appointment]:
        return self._newest_first(self.db.query(Appointment).filter(Appointment.counselor_id == counselor_id))

    def list_all(self) -> list[Appointment]:
        return self._newest_first(self.db.query(Appointment))

    def find_active_by_schedule(self, schedule_id: int) -> Optional[Appointment]:
        """해당 시간대를 점유 중인 BOOKED 예약"""
        return (
            self.db.query(Appointment)
            .filter(
                Appointment.schedule_id == schedule_id,
                Appointment.status == AppointmentStatus.BOOKED,
            )
            .first()
        )

    def set_status(
        self,
        appointment_id: int,
        status: AppointmentStatus,
        cancel_reason: Optional[str] = None,
    ) -> bool:
        """
        조건부 상태 전이. 취소 상태는 cancelled_at, 완료는 completed_at을 현재 시각으로 기록한다.

        Returns:
            bool: 실제로 한 행이 바뀌었는지 여부 (이미 종료 상태면 False)
        """
        now = datetime.now(timezone.utc)
        cancelled_at = now if status in CANCELLED_APPOINTMENT_STATUSES else None
        completed_at = now if status == AppointmentStatus.COMPLETED else None

        result = self.db.execute(
            update(Appointment)
            .where(
                Appointment.id == appointment_id,
                Appointment.status.in_(appointment_sources_for(status)),
            )
            .values(
                status=status,
                cancel_reason=cancel_reason,
                cancelled_at=cancelled_at,
                completed_at=completed_at,
                updated_at=func.now(),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def set_counselor_note(self, appointment_id: int, note: Optional[str]) -> None:
        self.db.execute(
            update(Appointment)
            .where(Appointment.id == appointment_id)
            .values(counselor_note=note, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
