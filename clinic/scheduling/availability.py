"""
Availability Resolver

Answers "is this employee working / free?" from snapshots of:
- Weekly schedule slots (one per weekday)
- Time off periods (blocking by calendar date)
- Existing appointments (only open ones conflict)

Nothing here touches the database; services load the snapshots and pass them in.
"""

from datetime import date, datetime, timedelta
from typing import Any, FrozenSet, Iterable, List, Optional

from ..models.time_off import TimeOffStatus
from .overlap import intervals_overlap

APPROVED_ONLY = frozenset({TimeOffStatus.APPROVED})


def naive_local(moment: Optional[datetime]) -> Optional[datetime]:
    """
    Converts an offset-aware datetime to naive local wall time.

    Stored datetimes and the service clock are naive local time; naive input
    is returned unchanged.
    """
    if moment is None or moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


def blocking_statuses(include_pending: bool = False) -> FrozenSet[TimeOffStatus]:
    """
    Time off statuses that suppress an employee's availability.

    Args:
        include_pending: also treat requests still awaiting approval as blocking

    Returns:
        frozenset of TimeOffStatus
    """
    if include_pending:
        return frozenset({TimeOffStatus.APPROVED, TimeOffStatus.PENDING})
    return APPROVED_ONLY


def slot_for_day(schedule_slots: Iterable[Any], day: date) -> Optional[Any]:
    """Returns the schedule slot for the weekday of `day`, or None."""
    weekday = day.weekday()
    for slot in schedule_slots:
        if slot.day_of_week == weekday:
            return slot
    return None


def is_on_time_off(
    time_offs: Iterable[Any],
    day: date,
    statuses: FrozenSet[TimeOffStatus] = APPROVED_ONLY
) -> bool:
    """
    True if any time off with a blocking status covers `day`.

    Coverage is by calendar date: a period from Monday 15:00 to Wednesday 09:00
    blocks Monday, Tuesday and Wednesday entirely.
    """
    for time_off in time_offs:
        if time_off.status not in statuses:
            continue
        if time_off.start_datetime.date() <= day <= time_off.end_datetime.date():
            return True
    return False


def is_working(
    schedule_slots: Iterable[Any],
    time_offs: Iterable[Any],
    at: datetime,
    statuses: FrozenSet[TimeOffStatus] = APPROVED_ONLY
) -> bool:
    """
    Checks whether an employee is on shift at a given instant.

    Args:
        schedule_slots: the employee's weekly schedule
        time_offs: the employee's time off periods
        at: instant to test
        statuses: time off statuses that block work

    Returns:
        bool: a slot exists for at.weekday(), slot.start <= at.time() <= slot.end,
        and no blocking time off covers at.date()
    """
    slot = slot_for_day(schedule_slots, at.date())
    if slot is None:
        return False

    if not (slot.start_time <= at.time() <= slot.end_time):
        return False

    return not is_on_time_off(time_offs, at.date(), statuses)


def open_appointments(appointments: Iterable[Any]) -> List[Any]:
    """Appointments that still occupy the doctor's time (not done)."""
    return [appointment for appointment in appointments if not appointment.is_done]


def is_free(appointments: Iterable[Any], start: datetime, end: datetime) -> bool:
    """True if no open appointment overlaps [start, end)."""
    return not any(
        intervals_overlap(appointment.start_datetime, appointment.end_datetime, start, end)
        for appointment in open_appointments(appointments)
    )


def is_available(
    schedule_slots: Iterable[Any],
    time_offs: Iterable[Any],
    appointments: Iterable[Any],
    start: datetime,
    duration_minutes: int,
    statuses: FrozenSet[TimeOffStatus] = APPROVED_ONLY
) -> bool:
    """
    Checks whether a booking of `duration_minutes` starting at `start` fits.

    Args:
        schedule_slots: the doctor's weekly schedule
        time_offs: the doctor's time off periods
        appointments: the doctor's appointments (done ones are ignored)
        start: requested start
        duration_minutes: requested length
        statuses: time off statuses that block work

    Returns:
        bool: the doctor works at `start`, the booking ends no later than the
        shift does, and no open appointment overlaps [start, start + duration)
    """
    if duration_minutes <= 0:
        return False

    schedule_slots = list(schedule_slots)
    if not is_working(schedule_slots, time_offs, start, statuses):
        return False

    end = start + timedelta(minutes=duration_minutes)
    slot = slot_for_day(schedule_slots, start.date())
    shift_end = datetime.combine(start.date(), slot.end_time)
    if end > shift_end:
        return False

    return is_free(appointments, start, end)
