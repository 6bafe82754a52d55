"""
예약/시간대 쓰기를 하나의 트랜잭션으로 묶는 Unit of Work
"""

from sqlalchemy.orm import Session

from appointment.repository import AppointmentRepository
from counselor.repository import ScheduleRepository


class UnitOfWork:
    """
    요청 세션 하나를 감싸는 트랜잭션 경계.

    with 블록 안에서 예외가 나면 rollback 되고, commit은 명시적으로 호출해야 한다.
    """

    def __init__(self, session: Session):
        self.session = session
        self.schedules = ScheduleRepository(session)
        self.appointments = AppointmentRepository(session)

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            self.rollback()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()
