"""
상담 가능 시간대(Schedule) 저장소
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import update
from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from config.exception import InvalidRange
from models.enums import ScheduleMode, ScheduleStatus, schedule_sources_for
from models.schedule import CounselorSchedule


class ScheduleRepository:
    """시간대 DB 연산. commit은 UnitOfWork에서만 수행한다."""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        counselor_id: int,
        start_time: datetime,
        end_time: datetime,
        mode: ScheduleMode,
        location: Optional[str] = None,
    ) -> CounselorSchedule:
        if end_time <= start_time:
            raise InvalidRange(details={"start_time": start_time.isoformat(), "end_time": end_time.isoformat()})

        schedule = CounselorSchedule(
            counselor_id=counselor_id,
            start_time=start_time,
            end_time=end_time,
            mode=mode,
            location=location,
            status=ScheduleStatus.AVAILABLE,
        )
        self.db.add(schedule)
        self.db.flush()
        return schedule

    def get(self, schedule_id: int) -> Optional[CounselorSchedule]:
        return self.db.query(CounselorSchedule).filter(CounselorSchedule.id == schedule_id).first()

    def list_by_counselor(self, counselor_id: int, status: Optional[ScheduleStatus] = None) -> list[CounselorSchedule]:
        query = self.db.query(CounselorSchedule).filter(CounselorSchedule.counselor_id == counselor_id)
        if status is not None:
            query = query.filter(CounselorSchedule.status == status)
        return query.order_by(CounselorSchedule.start_time.asc(), CounselorSchedule.id.asc()).all()

    def list_available(self, counselor_id: int) -> list[CounselorSchedule]:
        return self.list_by_counselor(counselor_id, ScheduleStatus.AVAILABLE)

    def set_status(
        self,
        schedule_id: int,
        status: ScheduleStatus,
        cancel_reason: Optional[str] = None,
        expected: Optional[ScheduleStatus] = None,
    ) -> bool:
        """
        허용된 이전 상태에 있는 행만 갱신하는 조건부 UPDATE

        Args:
            expected: 지정하면 현재 상태가 이 값일 때만 갱신

        Returns:
            bool: 실제로 한 행이 바뀌었는지 여부
        """
        sources = schedule_sources_for(status)
        if expected is not None:
            sources = [source for source in sources if source == expected]
        if not sources:
            return False

        result = self.db.execute(
            update(CounselorSchedule)
            .where(
                CounselorSchedule.id == schedule_id,
                CounselorSchedule.status.in_(sources),
            )
            .values(status=status, cancel_reason=cancel_reason, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def claim(self, schedule_id: int) -> bool:
        """AVAILABLE 시간대를 BOOKED로 선점"""
        return self.set_status(schedule_id, ScheduleStatus.BOOKED)
