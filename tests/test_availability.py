from datetime import date, datetime, time

from clinic.models import Appointment, ScheduleSlot, TimeOff, TimeOffStatus
from clinic.scheduling.availability import (
    blocking_statuses, is_available, is_on_time_off, is_working
)
from clinic.scheduling.overlap import find_conflicts, intervals_overlap
from clinic.scheduling.slots import available_slots

MONDAY = date(2030, 1, 7)
TUESDAY = date(2030, 1, 8)

def monday_shift(start=time(9, 0), end=time(17, 0)):
    return [ScheduleSlot(id=1, employee_id=1, day_of_week=0, start_time=start, end_time=end)]

def booking(start, minutes=30, is_done=False, id=None):
    return Appointment(id=id, doctor_id=1, patient_id=2, start_datetime=start, duration_minutes=minutes, is_done=is_done)

def time_off(start, end, status=TimeOffStatus.APPROVED, id=None):
    return TimeOff(id=id, employee_id=1, start_datetime=start, end_datetime=end, status=status)

class TestOverlap:

    def test_touching_intervals_do_not_overlap(self):
        assert not intervals_overlap(
            datetime(2030, 1, 7, 10), datetime(2030, 1, 7, 11),
            datetime(2030, 1, 7, 11), datetime(2030, 1, 7, 12)
        )

    def test_partial_overlap(self):
        assert intervals_overlap(
            datetime(2030, 1, 7, 10), datetime(2030, 1, 7, 11),
            datetime(2030, 1, 7, 10, 30), datetime(2030, 1, 7, 12)
        )

    def test_find_conflicts_excludes_own_record(self):
        records = [time_off(datetime(2030, 1, 7), datetime(2030, 1, 9), id=5)]
        assert find_conflicts(records, datetime(2030, 1, 8), datetime(2030, 1, 10), exclude_id=5) == []
        assert len(find_conflicts(records, datetime(2030, 1, 8), datetime(2030, 1, 10))) == 1

class TestIsWorking:

    def test_inside_shift(self):
        assert is_working(monday_shift(), [], datetime(2030, 1, 7, 10, 0))

    def test_shift_bounds_are_inclusive(self):
        assert is_working(monday_shift(), [], datetime(2030, 1, 7, 9, 0))
        assert is_working(monday_shift(), [], datetime(2030, 1, 7, 17, 0))

    def test_outside_shift(self):
        assert not is_working(monday_shift(), [], datetime(2030, 1, 7, 8, 59))
        assert not is_working(monday_shift(), [], datetime(2030, 1, 7, 17, 1))

    def test_no_slot_for_weekday(self):
        assert not is_working(monday_shift(), [], datetime(2030, 1, 8, 10, 0))

    def test_approved_time_off_blocks_whole_day(self):
        time_offs = [time_off(datetime(2030, 1, 7, 15, 0), datetime(2030, 1, 7, 16, 0))]
        assert not is_working(monday_shift(), time_offs, datetime(2030, 1, 7, 9, 0))

    def test_pending_time_off_blocks_only_when_configured(self):
        time_offs = [time_off(datetime(2030, 1, 7, 0, 0), datetime(2030, 1, 7, 23, 0), TimeOffStatus.PENDING)]
        at = datetime(2030, 1, 7, 10, 0)
        assert is_working(monday_shift(), time_offs, at)
        assert not is_working(monday_shift(), time_offs, at, blocking_statuses(include_pending=True))

    def test_declined_time_off_never_blocks(self):
        time_offs = [time_off(datetime(2030, 1, 7), datetime(2030, 1, 8), TimeOffStatus.DECLINED)]
        assert is_working(monday_shift(), time_offs, datetime(2030, 1, 7, 10, 0), blocking_statuses(True))

class TestTimeOffCoverage:

    def test_multi_day_period_covers_every_calendar_date(self):
        period = [time_off(datetime(2030, 1, 7, 15, 0), datetime(2030, 1, 9, 9, 0))]
        assert is_on_time_off(period, date(2030, 1, 7))
        assert is_on_time_off(period, date(2030, 1, 8))
        assert is_on_time_off(period, date(2030, 1, 9))
        assert not is_on_time_off(period, date(2030, 1, 10))

class TestIsAvailable:

    def test_free_slot(self):
        assert is_available(monday_shift(), [], [], datetime(2030, 1, 7, 10, 0), 30)

    def test_overlapping_open_appointment(self):
        existing = [booking(datetime(2030, 1, 7, 10, 0), 30)]
        assert not is_available(monday_shift(), [], existing, datetime(2030, 1, 7, 10, 15), 30)

    def test_back_to_back_is_allowed(self):
        existing = [booking(datetime(2030, 1, 7, 10, 0), 30)]
        assert is_available(monday_shift(), [], existing, datetime(2030, 1, 7, 10, 30), 30)
        assert is_available(monday_shift(), [], existing, datetime(2030, 1, 7, 9, 30), 30)

    def test_done_appointments_do_not_block(self):
        existing = [booking(datetime(2030, 1, 7, 10, 0), 60, is_done=True)]
        assert is_available(monday_shift(), [], existing, datetime(2030, 1, 7, 10, 0), 30)

    def test_booking_must_end_within_shift(self):
        assert is_available(monday_shift(), [], [], datetime(2030, 1, 7, 16, 30), 30)
        assert not is_available(monday_shift(), [], [], datetime(2030, 1, 7, 16, 45), 30)

    def test_non_positive_duration(self):
        assert not is_available(monday_shift(), [], [], datetime(2030, 1, 7, 10, 0), 0)

    def test_not_working(self):
        assert not is_available(monday_shift(), [], [], datetime(2030, 1, 8, 10, 0), 30)

class TestAvailableSlots:

    def test_full_free_day(self):
        slots = available_slots(monday_shift(), [], [], MONDAY, 30)
        assert len(slots) == 16
        assert slots[0].start == datetime(2030, 1, 7, 9, 0)
        assert slots[-1].end == datetime(2030, 1, 7, 17, 0)

    def test_slots_are_chronological_and_conflict_free(self):
        existing = [booking(datetime(2030, 1, 7, 10, 0), 60)]
        slots = available_slots(monday_shift(), [], existing, MONDAY, 30)
        starts = [slot.start for slot in slots]
        assert starts == sorted(starts)
        assert datetime(2030, 1, 7, 10, 0) not in starts
        assert datetime(2030, 1, 7, 10, 30) not in starts
        assert datetime(2030, 1, 7, 11, 0) in starts
        assert len(slots) == 14

    def test_off_grid_appointment_blocks_neighbouring_windows(self):
        existing = [booking(datetime(2030, 1, 7, 10, 15), 30)]
        starts = [slot.start for slot in available_slots(monday_shift(), [], existing, MONDAY, 30)]
        assert datetime(2030, 1, 7, 10, 0) not in starts
        assert datetime(2030, 1, 7, 10, 30) not in starts
        assert datetime(2030, 1, 7, 11, 0) in starts

    def test_long_duration_stays_inside_shift(self):
        slots = available_slots(monday_shift(), [], [], MONDAY, 120)
        assert slots[-1].start == datetime(2030, 1, 7, 15, 0)
        assert all(slot.end <= datetime(2030, 1, 7, 17, 0) for slot in slots)

    def test_empty_when_not_working_or_on_time_off(self):
        assert available_slots(monday_shift(), [], [], TUESDAY, 30) == []
        period = [time_off(datetime(2030, 1, 6, 12, 0), datetime(2030, 1, 7, 8, 0))]
        assert available_slots(monday_shift(), period, [], MONDAY, 30) == []

    def test_empty_for_non_positive_duration(self):
        assert available_slots(monday_shift(), [], [], MONDAY, 0) == []
