from pydantic import BaseModel, EmailStr, Field
from datetime import date, datetime
from typing import List, Optional

from ..models.appointment import AppointmentStatus
from .treatment import TreatmentDetails
from .user import UserSummary

class AppointmentRequest(BaseModel):
    doctor_email: EmailStr
    patient_email: EmailStr
    # Range and presence are enforced by the scheduler so every caller gets the same errors
    duration_minutes: int
    date_time: Optional[datetime] = None
    reason: Optional[str] = None

class CompleteAppointmentRequest(BaseModel):
    treatments: Optional[List[TreatmentDetails]] = None
    file_paths: List[str] = Field(default_factory=list)
    visit_notes: Optional[str] = None

class AppointmentSearch(BaseModel):
    patient_email: Optional[EmailStr] = None
    doctor_email: Optional[EmailStr] = None
    status: Optional[AppointmentStatus] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None

class AppointmentResponse(BaseModel):
    id: int
    doctor: UserSummary
    patient: UserSummary
    start_datetime: datetime
    end_datetime: datetime
    duration_minutes: int
    status: AppointmentStatus
    is_done: bool
    reason: Optional[str] = None
    visit_notes: Optional[str] = None
    file_paths: Optional[List[str]] = None

    class Config:
        from_attributes = True
