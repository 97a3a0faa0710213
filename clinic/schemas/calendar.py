from pydantic import BaseModel
from datetime import date, datetime
from typing import List, Optional

from .appointment import AppointmentResponse
from .schedule import ScheduleSlotResponse
from .time_off import TimeOffResponse

class AvailableSlotResponse(BaseModel):
    start_time: datetime
    end_time: datetime
    duration_minutes: int

class DoctorCalendarView(BaseModel):
    doctor_name: str
    doctor_email: str
    start_date: date
    end_date: date
    appointments: List[AppointmentResponse]
    weekly_schedule: List[ScheduleSlotResponse]
    time_offs: List[TimeOffResponse]

class PatientCalendarView(BaseModel):
    patient_email: str
    start_date: date
    end_date: date
    appointments: List[AppointmentResponse]

class DoctorAvailability(BaseModel):
    doctor_id: int
    first_name: str
    last_name: str
    email: str
    specialization: Optional[str] = None
    available: bool
