from sqlalchemy.orm import Session
from datetime import date, datetime, timedelta
from typing import Callable, List, Optional
import logging

from ..core.config import settings
from ..core.exceptions import NotFoundError, StateError, TimeOffOverlapError, ValidationError
from ..models.time_off import TimeOff, TimeOffStatus
from ..models.user import User
from ..scheduling.availability import blocking_statuses, is_on_time_off, naive_local
from ..scheduling.overlap import has_conflict
from .user_directory import UserDirectory

logger = logging.getLogger(__name__)

# Statuses that count when checking a new request for overlaps
ACTIVE_STATUSES = (TimeOffStatus.PENDING, TimeOffStatus.APPROVED)

class TimeOffService:
    def __init__(self, db: Session, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.users = UserDirectory(db)
        self.clock = clock or datetime.now

    def create_time_off(
        self,
        employee_email: str,
        start_datetime: Optional[datetime],
        end_datetime: Optional[datetime],
        reason: Optional[str] = None
    ) -> TimeOff:
        """Record a new PENDING time off request."""
        start_datetime, end_datetime = naive_local(start_datetime), naive_local(end_datetime)
        reason = self._validate_request(start_datetime, end_datetime, reason)
        employee = self.users.get_employee(employee_email)

        self._check_overlap(employee, start_datetime, end_datetime)

        time_off = TimeOff(
            employee_id=employee.id,
            start_datetime=start_datetime,
            end_datetime=end_datetime,
            reason=reason,
            status=TimeOffStatus.PENDING,
        )
        self.db.add(time_off)
        self.db.commit()
        self.db.refresh(time_off)

        logger.info(f"Time off request {time_off.id} created for {employee.email} with status PENDING")
        return time_off

    def update_time_off(
        self,
        time_off_id: int,
        start_datetime: Optional[datetime],
        end_datetime: Optional[datetime],
        reason: Optional[str] = None
    ) -> TimeOff:
        start_datetime, end_datetime = naive_local(start_datetime), naive_local(end_datetime)
        reason = self._validate_request(start_datetime, end_datetime, reason)
        time_off = self.get_time_off(time_off_id)

        if time_off.status != TimeOffStatus.PENDING:
            raise StateError("Cannot update time off request that has been processed")

        self._check_overlap(time_off.employee, start_datetime, end_datetime, exclude_id=time_off.id)

        time_off.start_datetime = start_datetime
        time_off.end_datetime = end_datetime
        time_off.reason = reason
        self.db.commit()
        self.db.refresh(time_off)

        logger.info(f"Time off {time_off_id} updated")
        return time_off

    def update_time_off_status(
        self,
        time_off_id: int,
        status: TimeOffStatus,
        approval_notes: Optional[str],
        approver_email: str
    ) -> TimeOff:
        """Approve or decline a pending request. Both outcomes are final."""
        if status == TimeOffStatus.PENDING:
            raise ValidationError("Cannot update status to PENDING")
        if status not in (TimeOffStatus.APPROVED, TimeOffStatus.DECLINED):
            raise ValidationError("Status must be APPROVED or DECLINED")

        time_off = self.get_time_off(time_off_id)
        if time_off.status.is_final:
            raise StateError("Time off request has already been processed")

        time_off.status = status
        time_off.approved_by = approver_email
        time_off.approval_notes = approval_notes
        self.db.commit()
        self.db.refresh(time_off)

        logger.info(f"Time off {time_off_id} {status.value.lower()} by {approver_email}")
        return time_off

    def delete_time_off(self, time_off_id: int):
        time_off = self.get_time_off(time_off_id)

        if time_off.status == TimeOffStatus.APPROVED:
            raise StateError("Cannot delete approved time off requests")

        self.db.delete(time_off)
        self.db.commit()
        logger.info(f"Time off {time_off_id} deleted")

    def get_time_off(self, time_off_id: int) -> TimeOff:
        time_off = self.db.query(TimeOff).filter(TimeOff.id == time_off_id).first()
        if not time_off:
            raise NotFoundError(f"Time off not found with ID: {time_off_id}")
        return time_off

    # Queries

    def get_employee_time_offs(self, employee_email: str) -> List[TimeOff]:
        employee = self.users.get_employee(employee_email)
        return self.db.query(TimeOff).filter(
            TimeOff.employee_id == employee.id
        ).order_by(TimeOff.start_datetime.desc()).all()

    def get_employee_time_offs_by_status(self, employee_email: str, status: TimeOffStatus) -> List[TimeOff]:
        employee = self.users.get_employee(employee_email)
        return self.db.query(TimeOff).filter(
            TimeOff.employee_id == employee.id,
            TimeOff.status == status
        ).order_by(TimeOff.start_datetime.asc()).all()

    def get_employee_time_offs_in_range(
        self,
        employee_email: str,
        start_datetime: datetime,
        end_datetime: datetime
    ) -> List[TimeOff]:
        start_datetime, end_datetime = naive_local(start_datetime), naive_local(end_datetime)
        if start_datetime > end_datetime:
            raise ValidationError("Start date time cannot be after end date time")

        employee = self.users.get_employee(employee_email)
        return self.time_offs_in_range(employee, start_datetime, end_datetime)

    def time_offs_in_range(self, employee: User, start_datetime: datetime, end_datetime: datetime) -> List[TimeOff]:
        """Every time off (any status) touching [start, end], oldest first."""
        return self.db.query(TimeOff).filter(
            TimeOff.employee_id == employee.id,
            TimeOff.start_datetime <= end_datetime,
            TimeOff.end_datetime >= start_datetime
        ).order_by(TimeOff.start_datetime.asc()).all()

    def has_time_off_on(self, employee_email: str, at: datetime) -> bool:
        employee = self.users.get_employee(employee_email)
        return self.is_blocked_on(employee, naive_local(at).date())

    def is_blocked_on(self, employee: User, day: date) -> bool:
        day_start = datetime.combine(day, datetime.min.time())
        candidates = self.time_offs_in_range(employee, day_start, day_start + timedelta(days=1))
        return is_on_time_off(candidates, day, self.blocking_statuses())

    def get_all_active_time_offs(self) -> List[TimeOff]:
        """Approved time off that is ongoing right now."""
        now = self.clock()
        return self.db.query(TimeOff).filter(
            TimeOff.status == TimeOffStatus.APPROVED,
            TimeOff.start_datetime <= now,
            TimeOff.end_datetime >= now
        ).order_by(TimeOff.start_datetime.asc()).all()

    def get_pending_time_offs(self) -> List[TimeOff]:
        return self.get_time_offs_by_status(TimeOffStatus.PENDING)

    def get_time_offs_by_status(self, status: TimeOffStatus) -> List[TimeOff]:
        return self.db.query(TimeOff).filter(
            TimeOff.status == status
        ).order_by(TimeOff.start_datetime.asc()).all()

    @staticmethod
    def blocking_statuses():
        return blocking_statuses(settings.TIME_OFF_PENDING_BLOCKS_BOOKING)

    # Helpers

    def _validate_request(
        self,
        start_datetime: Optional[datetime],
        end_datetime: Optional[datetime],
        reason: Optional[str]
    ) -> Optional[str]:
        if start_datetime is None:
            raise ValidationError("Start date time is required")
        if end_datetime is None:
            raise ValidationError("End date time is required")
        if start_datetime >= end_datetime:
            raise ValidationError("Start date time must be before end date time")

        earliest = self.clock() - timedelta(days=settings.TIME_OFF_PAST_GRACE_DAYS)
        if start_datetime < earliest:
            raise ValidationError("Cannot create time off for past dates")

        if reason is not None and not reason.strip():
            return None
        return reason

    def _check_overlap(
        self,
        employee: User,
        start_datetime: datetime,
        end_datetime: datetime,
        exclude_id: Optional[int] = None
    ):
        existing = self.db.query(TimeOff).filter(
            TimeOff.employee_id == employee.id,
            TimeOff.status.in_(ACTIVE_STATUSES),
            TimeOff.start_datetime <= end_datetime,
            TimeOff.end_datetime >= start_datetime
        ).all()

        if has_conflict(existing, start_datetime, end_datetime, exclude_id):
            raise TimeOffOverlapError()
