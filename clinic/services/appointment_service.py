from sqlalchemy.orm import Session
from datetime import date, datetime, time, timedelta
from typing import Callable, List, Optional
import calendar
import logging

from ..core.config import settings
from ..core.exceptions import (
    ConflictError, LocalDateTimeError, NotFoundError, StateError, ValidationError
)
from ..models.appointment import Appointment, AppointmentStatus
from ..models.user import User
from ..scheduling.availability import is_available, is_working, naive_local
from ..schemas.treatment import TreatmentDetails
from .schedule_service import ScheduleService
from .time_off_service import TimeOffService
from .treatment_service import TreatmentService
from .user_directory import UserDirectory

logger = logging.getLogger(__name__)

def add_months(moment: datetime, months: int) -> datetime:
    """Calendar month arithmetic, clamping the day to the target month's length."""
    month_index = moment.month - 1 + months
    year = moment.year + month_index // 12
    month = month_index % 12 + 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)

class AppointmentService:
    def __init__(self, db: Session, clock: Optional[Callable[[], datetime]] = None):
        self.db = db
        self.users = UserDirectory(db)
        self.treatments = TreatmentService(db)
        self.schedules = ScheduleService(db)
        self.time_offs = TimeOffService(db, clock)
        self.clock = clock or datetime.now

    def schedule_appointment(
        self,
        doctor_email: str,
        patient_email: str,
        start_datetime: Optional[datetime],
        duration_minutes: int,
        reason: Optional[str] = None
    ) -> Appointment:
        """Book an open appointment after every rule has been checked."""
        if start_datetime is None:
            raise ValidationError("Appointment date and time must not be null")
        start_datetime = naive_local(start_datetime)
        self._validate_duration(duration_minutes)
        self._validate_booking_window(start_datetime)

        doctor = self.users.get_doctor(doctor_email)
        patient = self.users.get_patient(patient_email)

        # Serialise concurrent bookings touching the same doctor or patient
        self._lock_users(doctor, patient)

        if self.patient_has_open_appointment(patient):
            logger.warning(f"Rejected booking: {patient.email} already has an open appointment")
            raise ConflictError(f"Patient with email {patient.email} already has an open appointment")

        day_start = datetime.combine(start_datetime.date(), time.min)
        slots = self.schedules.slots_for_employee(doctor)
        time_offs = self.time_offs.time_offs_in_range(doctor, day_start, day_start + timedelta(days=1))
        statuses = self.time_offs.blocking_statuses()

        if not is_working(slots, time_offs, start_datetime, statuses):
            logger.warning(f"Rejected booking: {doctor.email} is not working on {start_datetime}")
            raise ConflictError(f"Doctor is not working on {start_datetime}")

        appointments = self._open_appointments_on(doctor, start_datetime.date())
        if not is_available(slots, time_offs, appointments, start_datetime, duration_minutes, statuses):
            logger.warning(f"Rejected booking: {doctor.email} is not available at {start_datetime}")
            raise ConflictError("Doctor is not available at the requested time")

        appointment = Appointment(
            doctor_id=doctor.id,
            patient_id=patient.id,
            start_datetime=start_datetime,
            duration_minutes=duration_minutes,
            status=AppointmentStatus.OPEN,
            is_done=False,
            reason=reason,
        )
        self.db.add(appointment)
        self.db.commit()
        self.db.refresh(appointment)

        logger.info(
            f"Appointment {appointment.id} scheduled: doctor={doctor.email} "
            f"patient={patient.email} start={start_datetime} duration={duration_minutes}m"
        )
        return appointment

    def cancel_appointment(self, appointment_id: int):
        """Hard delete. Completed appointments follow ALLOW_CANCEL_COMPLETED_APPOINTMENTS."""
        appointment = self.get_appointment(appointment_id)

        if appointment.is_done and not settings.ALLOW_CANCEL_COMPLETED_APPOINTMENTS:
            raise StateError("Completed appointments cannot be cancelled")

        self.db.delete(appointment)
        self.db.commit()
        logger.info(f"Appointment {appointment_id} cancelled")

    def complete_appointment(
        self,
        appointment_id: int,
        treatments: Optional[List[TreatmentDetails]],
        file_paths: Optional[List[str]] = None,
        visit_notes: Optional[str] = None
    ) -> Appointment:
        """Attach treatments and mark the appointment done, all or nothing."""
        appointment = self.get_appointment(appointment_id)

        if appointment.is_done:
            raise StateError("Appointment has already been completed")

        try:
            created = self.treatments.create_treatments_for_appointment(appointment, treatments)

            appointment.status = AppointmentStatus.DONE
            appointment.is_done = True
            appointment.visit_notes = visit_notes
            appointment.file_paths = list(file_paths or [])
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        self.db.refresh(appointment)
        logger.info(f"Appointment {appointment_id} completed with {len(created)} treatment(s)")
        return appointment

    def get_appointment(self, appointment_id: int) -> Appointment:
        appointment = self.db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            raise NotFoundError(f"Appointment not found with ID: {appointment_id}")
        return appointment

    def patient_has_open_appointment(self, patient: User) -> bool:
        return self.db.query(Appointment.id).filter(
            Appointment.patient_id == patient.id,
            Appointment.is_done.is_(False)
        ).first() is not None

    # Queries

    def list_appointments(self) -> List[Appointment]:
        return self.db.query(Appointment).order_by(Appointment.start_datetime).all()

    def appointments_for_patient(self, email: str) -> List[Appointment]:
        patient = self.users.get_patient(email)
        return self.db.query(Appointment).filter(
            Appointment.patient_id == patient.id
        ).order_by(Appointment.start_datetime).all()

    def appointments_for_doctor(self, email: str) -> List[Appointment]:
        doctor = self.users.get_doctor(email)
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor.id
        ).order_by(Appointment.start_datetime).all()

    def search_appointments(
        self,
        patient_email: Optional[str] = None,
        doctor_email: Optional[str] = None,
        status: Optional[AppointmentStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> List[Appointment]:
        query = self.db.query(Appointment)

        if patient_email and patient_email.strip():
            patient = self.users.get_patient(patient_email)
            query = query.filter(Appointment.patient_id == patient.id)

        if doctor_email and doctor_email.strip():
            doctor = self.users.get_doctor(doctor_email)
            query = query.filter(Appointment.doctor_id == doctor.id)

        if status is not None:
            query = query.filter(Appointment.status == status)

        if start_date is not None:
            query = query.filter(Appointment.start_datetime >= datetime.combine(start_date, time.min))

        if end_date is not None:
            query = query.filter(Appointment.start_datetime <= datetime.combine(end_date, time.max))

        return query.order_by(Appointment.start_datetime).all()

    def appointments_in_range(self, doctor: User, start: datetime, end: datetime) -> List[Appointment]:
        """Doctor's appointments (any status) starting within [start, end]."""
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor.id,
            Appointment.start_datetime >= start,
            Appointment.start_datetime <= end
        ).order_by(Appointment.start_datetime).all()

    # Helpers

    def _validate_duration(self, duration_minutes: int):
        low = settings.APPOINTMENT_MIN_DURATION_MINUTES
        high = settings.APPOINTMENT_MAX_DURATION_MINUTES
        if duration_minutes is None or not (low <= duration_minutes <= high):
            raise ValidationError(f"Appointment duration must be between {low} and {high} minutes")

    def _validate_booking_window(self, start_datetime: datetime):
        now = self.clock()

        earliest = now + timedelta(hours=settings.APPOINTMENT_MIN_HOURS_IN_ADVANCE)
        if start_datetime <= earliest:
            raise LocalDateTimeError(
                f"Cannot schedule appointment less than {settings.APPOINTMENT_MIN_HOURS_IN_ADVANCE} hours in advance"
            )

        latest = add_months(now, settings.APPOINTMENT_MAX_MONTHS_IN_ADVANCE)
        if start_datetime > latest:
            raise LocalDateTimeError(
                f"Cannot schedule appointment more than {settings.APPOINTMENT_MAX_MONTHS_IN_ADVANCE} months in advance"
            )

    def _lock_users(self, *users: User):
        ids = sorted(user.id for user in users)
        self.db.query(User).filter(User.id.in_(ids)).order_by(User.id).with_for_update().all()

    def _open_appointments_on(self, doctor: User, day: date) -> List[Appointment]:
        """Open appointments that could overlap anything on `day`, including ones spilling over midnight."""
        day_start = datetime.combine(day, time.min)
        day_end = day_start + timedelta(days=1)
        return self.db.query(Appointment).filter(
            Appointment.doctor_id == doctor.id,
            Appointment.is_done.is_(False),
            Appointment.start_datetime < day_end,
            Appointment.end_datetime > day_start
        ).all()
