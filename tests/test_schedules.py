import pytest
from datetime import time

from clinic.core.exceptions import NotFoundError, ValidationError
from clinic.core.security import UserKind
from clinic.models import ScheduleSlot
from clinic.schemas.schedule import ScheduleSlotIn
from clinic.services.schedule_service import ScheduleService, parse_day_of_week

from .conftest import make_user

@pytest.fixture
def receptionist(db):
    return make_user(db, "desk@clinic.com", UserKind.RECEPTIONIST, "Rita", "Desk")

@pytest.fixture
def service(db):
    return ScheduleService(db)

def slot(day, start=time(9, 0), end=time(17, 0)):
    return ScheduleSlotIn(day_of_week=day, start_time=start, end_time=end)

class TestParseDay:

    @pytest.mark.parametrize("day,expected", [("MONDAY", 0), ("sunday", 6), (" Wednesday ", 2)])
    def test_valid(self, day, expected):
        assert parse_day_of_week(day) == expected

    def test_invalid(self):
        with pytest.raises(ValidationError):
            parse_day_of_week("FUNDAY")

class TestWeeklySchedule:

    def test_set_weekly_schedule_is_ordered(self, service, receptionist):
        week = service.set_weekly_schedule(receptionist.email, [slot("FRIDAY"), slot("monday", time(8, 0), time(12, 0))])
        assert [s.day_of_week for s in week] == ["MONDAY", "FRIDAY"]
        assert week[0].start_time == time(8, 0)

    def test_set_weekly_schedule_replaces(self, service, db, receptionist):
        service.set_weekly_schedule(receptionist.email, [slot("MONDAY"), slot("TUESDAY")])
        week = service.set_weekly_schedule(receptionist.email, [slot("SATURDAY")])

        assert [s.day_of_week for s in week] == ["SATURDAY"]
        assert db.query(ScheduleSlot).count() == 1

    def test_empty_list_clears(self, service, receptionist):
        service.set_weekly_schedule(receptionist.email, [slot("MONDAY")])
        assert service.set_weekly_schedule(receptionist.email, []) == []

    def test_end_before_start_rejected(self, service, db, receptionist):
        service.set_weekly_schedule(receptionist.email, [slot("MONDAY")])
        with pytest.raises(ValidationError):
            service.set_weekly_schedule(receptionist.email, [slot("TUESDAY", time(17, 0), time(9, 0))])
        # The previous week is untouched
        assert len(service.get_weekly_schedule(receptionist.email)) == 1

    def test_duplicate_day_rejected(self, service, receptionist):
        with pytest.raises(ValidationError):
            service.set_weekly_schedule(receptionist.email, [slot("MONDAY"), slot("monday")])

    def test_patients_have_no_schedule(self, service, db):
        make_user(db, "patient@clinic.com", UserKind.PATIENT)
        with pytest.raises(ValidationError):
            service.get_weekly_schedule("patient@clinic.com")

    def test_unknown_employee(self, service):
        with pytest.raises(NotFoundError):
            service.get_weekly_schedule("ghost@clinic.com")

    def test_delete_weekly_schedule(self, service, receptionist):
        service.set_weekly_schedule(receptionist.email, [slot("MONDAY"), slot("TUESDAY")])
        assert service.delete_weekly_schedule(receptionist.email) == 2
        assert service.get_weekly_schedule(receptionist.email) == []

class TestDaySchedule:

    def test_upsert(self, service, receptionist):
        service.set_day_schedule(receptionist.email, "TUESDAY", time(9, 0), time(12, 0))
        updated = service.set_day_schedule(receptionist.email, "tuesday", time(13, 0), time(18, 0))

        assert updated.day_of_week == "TUESDAY"
        week = service.get_weekly_schedule(receptionist.email)
        assert len(week) == 1
        assert week[0].start_time == time(13, 0)

    def test_invalid_times(self, service, receptionist):
        with pytest.raises(ValidationError):
            service.set_day_schedule(receptionist.email, "TUESDAY", time(12, 0), time(12, 0))

    def test_delete_day(self, service, receptionist):
        service.set_weekly_schedule(receptionist.email, [slot("MONDAY"), slot("TUESDAY")])
        assert service.delete_day_schedule(receptionist.email, "MONDAY") is True
        assert service.delete_day_schedule(receptionist.email, "MONDAY") is False
        assert [s.day_of_week for s in service.get_weekly_schedule(receptionist.email)] == ["TUESDAY"]
