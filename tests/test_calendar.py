import pytest
from datetime import date, datetime, time

from clinic.core.exceptions import ValidationError
from clinic.core.security import UserKind
from clinic.models import TimeOffStatus
from clinic.services.calendar_service import CalendarService

from .conftest import add_appointment, add_shift, add_time_off, make_user

MONDAY = date(2030, 1, 7)

@pytest.fixture
def service(db):
    return CalendarService(db)

class TestAvailableSlots:

    def test_free_day(self, service, doctor):
        slots = service.get_available_slots(doctor.email, MONDAY, 30)
        assert len(slots) == 16
        assert slots[0].start_time == datetime(2030, 1, 7, 9, 0)

    def test_booked_windows_removed(self, service, db, doctor, patient):
        add_appointment(db, doctor, patient, datetime(2030, 1, 7, 10, 15), 30)
        starts = [s.start_time for s in service.get_available_slots(doctor.email, MONDAY, 30)]
        assert datetime(2030, 1, 7, 10, 0) not in starts
        assert datetime(2030, 1, 7, 10, 30) not in starts

    def test_time_off_empties_day(self, service, db, doctor):
        add_time_off(db, doctor, datetime(2030, 1, 7, 12), datetime(2030, 1, 7, 13), TimeOffStatus.APPROVED)
        assert service.get_available_slots(doctor.email, MONDAY, 30) == []

    def test_invalid_duration(self, service, doctor):
        with pytest.raises(ValidationError):
            service.get_available_slots(doctor.email, MONDAY, 0)

class TestCalendars:

    def test_doctor_calendar(self, service, db, doctor, patient):
        add_appointment(db, doctor, patient, datetime(2030, 1, 7, 10, 0))
        add_appointment(db, doctor, patient, datetime(2030, 2, 4, 10, 0), is_done=True)
        add_time_off(db, doctor, datetime(2030, 1, 8, 9), datetime(2030, 1, 9, 17), TimeOffStatus.PENDING)

        view = service.get_doctor_calendar(doctor.email, date(2030, 1, 1), date(2030, 1, 31))
        assert view.doctor_name == "Gregory House"
        assert len(view.appointments) == 1
        assert view.appointments[0].patient.email == patient.email
        assert [s.day_of_week for s in view.weekly_schedule] == ["MONDAY"]
        assert len(view.time_offs) == 1

    def test_patient_calendar(self, service, db, doctor, patient):
        add_appointment(db, doctor, patient, datetime(2030, 1, 7, 10, 0))
        view = service.get_patient_calendar(patient.email, date(2030, 1, 7), date(2030, 1, 7))
        assert len(view.appointments) == 1

    def test_reversed_range(self, service, doctor):
        with pytest.raises(ValidationError):
            service.get_doctor_calendar(doctor.email, date(2030, 1, 31), date(2030, 1, 1))

class TestAvailableDoctors:

    def test_flags_each_bookable_employee(self, service, db, doctor, patient):
        busy = make_user(db, "busy@clinic.com", UserKind.EMPLOYEE, "Busy", "Bee")
        add_shift(db, busy, 0)
        add_appointment(db, busy, patient, datetime(2030, 1, 7, 10, 0), 60)
        make_user(db, "nurse@clinic.com", UserKind.NURSE, "Not", "Bookable")

        result = {d.email: d.available for d in service.get_available_doctors(MONDAY, time(10, 0), 30)}
        assert result == {"doctor@clinic.com": True, "busy@clinic.com": False}

    def test_outside_shift(self, service, doctor):
        result = service.get_available_doctors(MONDAY, time(18, 0), 30)
        assert [d.available for d in result] == [False]
