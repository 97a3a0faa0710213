from sqlalchemy.orm import Session
from datetime import date, datetime, time, timedelta
from typing import List
import logging

from ..core.config import settings
from ..core.exceptions import ValidationError
from ..models.appointment import Appointment
from ..models.user import User
from ..core.security import BOOKABLE_KINDS
from ..scheduling.availability import is_available, naive_local
from ..scheduling.slots import available_slots
from ..schemas.appointment import AppointmentResponse
from ..schemas.calendar import (
    AvailableSlotResponse, DoctorAvailability, DoctorCalendarView, PatientCalendarView
)
from ..schemas.time_off import TimeOffResponse
from .appointment_service import AppointmentService
from .schedule_service import ScheduleService
from .time_off_service import TimeOffService
from .user_directory import UserDirectory

logger = logging.getLogger(__name__)

class CalendarService:
    """Read-only views over schedules, time off and appointments."""

    def __init__(self, db: Session):
        self.db = db
        self.users = UserDirectory(db)
        self.schedules = ScheduleService(db)
        self.time_offs = TimeOffService(db)
        self.appointments = AppointmentService(db)

    def get_available_slots(self, doctor_email: str, day: date, duration_minutes: int) -> List[AvailableSlotResponse]:
        if duration_minutes is None or duration_minutes <= 0:
            raise ValidationError("Duration must be a positive number of minutes")

        doctor = self.users.get_doctor(doctor_email)
        day_start, day_end = self._day_bounds(day)

        slots = available_slots(
            self.schedules.slots_for_employee(doctor),
            self.time_offs.time_offs_in_range(doctor, day_start, day_end),
            self._appointments_touching(doctor, day_start, day_end),
            day,
            duration_minutes,
            step_minutes=settings.SLOT_STEP_MINUTES,
            statuses=self.time_offs.blocking_statuses(),
        )

        logger.info(f"{len(slots)} slot(s) of {duration_minutes}m free for {doctor.email} on {day}")
        return [
            AvailableSlotResponse(start_time=slot.start, end_time=slot.end, duration_minutes=slot.duration_minutes)
            for slot in slots
        ]

    def get_doctor_calendar(self, doctor_email: str, start_date: date, end_date: date) -> DoctorCalendarView:
        self._validate_range(start_date, end_date)
        doctor = self.users.get_doctor(doctor_email)

        range_start = datetime.combine(start_date, time.min)
        range_end = datetime.combine(end_date, time.max)

        appointments = self.appointments.appointments_in_range(doctor, range_start, range_end)
        time_offs = self.time_offs.time_offs_in_range(doctor, range_start, range_end)

        return DoctorCalendarView(
            doctor_name=doctor.display_name,
            doctor_email=doctor.email,
            start_date=start_date,
            end_date=end_date,
            appointments=[AppointmentResponse.model_validate(a) for a in appointments],
            weekly_schedule=self.schedules.get_weekly_schedule(doctor.email),
            time_offs=[TimeOffResponse.from_entity(t) for t in time_offs],
        )

    def get_patient_calendar(self, patient_email: str, start_date: date, end_date: date) -> PatientCalendarView:
        self._validate_range(start_date, end_date)
        patient = self.users.get_patient(patient_email)

        appointments = self.db.query(Appointment).filter(
            Appointment.patient_id == patient.id,
            Appointment.start_datetime >= datetime.combine(start_date, time.min),
            Appointment.start_datetime <= datetime.combine(end_date, time.max)
        ).order_by(Appointment.start_datetime).all()

        return PatientCalendarView(
            patient_email=patient.email,
            start_date=start_date,
            end_date=end_date,
            appointments=[AppointmentResponse.model_validate(a) for a in appointments],
        )

    def get_available_doctors(self, day: date, start_time: time, duration_minutes: int) -> List[DoctorAvailability]:
        """Every active bookable employee, flagged with whether the window fits."""
        if duration_minutes is None or duration_minutes <= 0:
            raise ValidationError("Duration must be a positive number of minutes")

        start = naive_local(datetime.combine(day, start_time))
        day_start, day_end = self._day_bounds(day)
        statuses = self.time_offs.blocking_statuses()

        doctors = self.db.query(User).filter(
            User.kind.in_(BOOKABLE_KINDS),
            User.is_active.is_(True)
        ).order_by(User.last_name, User.first_name).all()

        result = []
        for doctor in doctors:
            available = is_available(
                self.schedules.slots_for_employee(doctor),
                self.time_offs.time_offs_in_range(doctor, day_start, day_end),
                self._appointments_touching(doctor, day_start, day_end),
                start,
                duration_minutes,
                statuses,
            )
            result.append(DoctorAvailability(
                doctor_id=doctor.id,
                first_name=doctor.first_name,
                last_name=doctor.last_name,
                email=doctor.email,
                specialization=doctor.employee_profile.specialization if doctor.employee_profile else None,
                available=available,
            ))
        return result

    def _appointments_touching(self, doctor: User, start: datetime, end: datetime) -> List[Appointment]:
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor.id,
            Appointment.is_done.is_(False),
            Appointment.start_datetime < end,
            Appointment.end_datetime > start
        ).all()

    @staticmethod
    def _day_bounds(day: date):
        day_start = datetime.combine(day, time.min)
        return day_start, day_start + timedelta(days=1)

    @staticmethod
    def _validate_range(start_date: date, end_date: date):
        if start_date is None or end_date is None:
            raise ValidationError("Start and end date are required")
        if start_date > end_date:
            raise ValidationError("Start date cannot be after end date")
