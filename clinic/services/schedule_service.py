from sqlalchemy.orm import Session
from datetime import time
from typing import List, Optional
import logging

from ..core.exceptions import ValidationError
from ..models.schedule import ScheduleSlot, DAY_NAMES
from ..models.user import User
from ..schemas.schedule import ScheduleSlotIn, ScheduleSlotResponse
from .user_directory import UserDirectory

logger = logging.getLogger(__name__)

def parse_day_of_week(day: str) -> int:
    """Map MONDAY..SUNDAY (any case) to 0..6."""
    try:
        return DAY_NAMES.index(day.strip().upper())
    except (AttributeError, ValueError):
        raise ValidationError(f"Invalid day of week: {day}")

class ScheduleService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserDirectory(db)

    def set_weekly_schedule(self, email: str, slots: Optional[List[ScheduleSlotIn]]) -> List[ScheduleSlotResponse]:
        """Replace the employee's whole week. An empty list clears it."""
        employee = self.users.get_employee(email)
        new_slots = self._build_week(employee, slots or [])

        self.db.query(ScheduleSlot).filter(
            ScheduleSlot.employee_id == employee.id
        ).delete(synchronize_session=False)
        # Old rows must be gone before the unique (employee, day) rows go in
        self.db.flush()
        self.db.add_all(new_slots)
        self.db.commit()

        logger.info(f"Weekly schedule set for {employee.email}: {len(new_slots)} day(s)")
        return self.get_weekly_schedule(email)

    def set_day_schedule(self, email: str, day: str, start_time: time, end_time: time) -> ScheduleSlotResponse:
        employee = self.users.get_employee(email)
        day_index = parse_day_of_week(day)
        self._validate_times(DAY_NAMES[day_index], start_time, end_time)

        slot = self._find_slot(employee, day_index)
        if slot:
            slot.start_time = start_time
            slot.end_time = end_time
        else:
            slot = ScheduleSlot(
                employee_id=employee.id,
                day_of_week=day_index,
                start_time=start_time,
                end_time=end_time,
            )
            self.db.add(slot)

        self.db.commit()
        logger.info(f"Schedule for {employee.email} on {DAY_NAMES[day_index]} set to {start_time}-{end_time}")
        return self._to_response(slot)

    def delete_weekly_schedule(self, email: str) -> int:
        employee = self.users.get_employee(email)
        deleted = self.db.query(ScheduleSlot).filter(
            ScheduleSlot.employee_id == employee.id
        ).delete(synchronize_session=False)
        self.db.commit()

        logger.info(f"Deleted {deleted} schedule slot(s) for {employee.email}")
        return deleted

    def delete_day_schedule(self, email: str, day: str) -> bool:
        employee = self.users.get_employee(email)
        slot = self._find_slot(employee, parse_day_of_week(day))
        if not slot:
            return False

        self.db.delete(slot)
        self.db.commit()
        logger.info(f"Deleted schedule slot for {employee.email} on {slot.day_name}")
        return True

    def get_weekly_schedule(self, email: str) -> List[ScheduleSlotResponse]:
        employee = self.users.get_employee(email)
        slots = self.db.query(ScheduleSlot).filter(
            ScheduleSlot.employee_id == employee.id
        ).order_by(ScheduleSlot.day_of_week).all()
        return [self._to_response(slot) for slot in slots]

    def slots_for_employee(self, employee: User) -> List[ScheduleSlot]:
        return self.db.query(ScheduleSlot).filter(
            ScheduleSlot.employee_id == employee.id
        ).all()

    def _find_slot(self, employee: User, day_index: int) -> Optional[ScheduleSlot]:
        return self.db.query(ScheduleSlot).filter(
            ScheduleSlot.employee_id == employee.id,
            ScheduleSlot.day_of_week == day_index
        ).first()

    def _build_week(self, employee: User, slots: List[ScheduleSlotIn]) -> List[ScheduleSlot]:
        seen = set()
        built = []
        for slot in slots:
            day_index = parse_day_of_week(slot.day_of_week)
            if day_index in seen:
                raise ValidationError(f"Only one shift allowed per day: {DAY_NAMES[day_index]}")
            seen.add(day_index)

            self._validate_times(DAY_NAMES[day_index], slot.start_time, slot.end_time)
            built.append(ScheduleSlot(
                employee_id=employee.id,
                day_of_week=day_index,
                start_time=slot.start_time,
                end_time=slot.end_time,
            ))
        return built

    @staticmethod
    def _validate_times(day_name: str, start_time: time, end_time: time):
        if start_time is None or end_time is None:
            raise ValidationError(f"Start and end time are required for {day_name}")
        if end_time <= start_time:
            raise ValidationError(f"End time must be after start time for day: {day_name}")

    @staticmethod
    def _to_response(slot: ScheduleSlot) -> ScheduleSlotResponse:
        return ScheduleSlotResponse(
            day_of_week=slot.day_name,
            start_time=slot.start_time,
            end_time=slot.end_time,
        )
