"""
Slot Generation

Enumerates bookable windows of a fixed length inside one day's shift.
"""

from datetime import date, datetime, timedelta
from typing import Any, FrozenSet, Iterable, List, NamedTuple

from ..models.time_off import TimeOffStatus
from .availability import APPROVED_ONLY, is_free, is_on_time_off, slot_for_day


class TimeSlot(NamedTuple):
    start: datetime
    end: datetime
    duration_minutes: int


def available_slots(
    schedule_slots: Iterable[Any],
    time_offs: Iterable[Any],
    appointments: Iterable[Any],
    day: date,
    duration_minutes: int,
    step_minutes: int = 30,
    statuses: FrozenSet[TimeOffStatus] = APPROVED_ONLY
) -> List[TimeSlot]:
    """
    Lists free windows of `duration_minutes` on `day`.

    Args:
        schedule_slots: the doctor's weekly schedule
        time_offs: the doctor's time off periods
        appointments: the doctor's appointments on that day
        day: date to enumerate
        duration_minutes: window length
        step_minutes: distance between consecutive window starts
        statuses: time off statuses that block the whole day

    Returns:
        list[TimeSlot]: chronological, non-conflicting windows whose end is at
        or before the shift end. Empty if the doctor does not work that day or
        is on time off.

    Algorithm:
        1. Find the schedule slot for day.weekday()
        2. Bail out on blocking time off
        3. Walk window starts from shift start in step_minutes increments
           while start + duration <= shift end
        4. Keep windows with no open appointment overlap
    """
    if duration_minutes <= 0 or step_minutes <= 0:
        return []

    slot = slot_for_day(schedule_slots, day)
    if slot is None:
        return []

    if is_on_time_off(time_offs, day, statuses):
        return []

    appointments = list(appointments)
    duration = timedelta(minutes=duration_minutes)
    step = timedelta(minutes=step_minutes)
    shift_end = datetime.combine(day, slot.end_time)

    slots = []
    current = datetime.combine(day, slot.start_time)

    while current + duration <= shift_end:
        window_end = current + duration
        if is_free(appointments, current, window_end):
            slots.append(TimeSlot(current, window_end, duration_minutes))
        current += step

    return slots
