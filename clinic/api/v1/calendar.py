from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date, time
from typing import List

from ...core.database import get_db
from ...core.security import Permission
from ...api.deps import require_permission
from ...services.calendar_service import CalendarService
from ...schemas.calendar import (
    AvailableSlotResponse, DoctorAvailability, DoctorCalendarView, PatientCalendarView
)
from ...models.user import User

router = APIRouter(prefix="/calendar", tags=["Calendar"])

@router.get("/available-slots", response_model=List[AvailableSlotResponse])
async def get_available_slots(
    doctor_email: str,
    day: date,
    duration_minutes: int = Query(30),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.CALENDAR_VIEW))
):
    """Free windows of the given length in a doctor's shift."""
    return CalendarService(db).get_available_slots(doctor_email, day, duration_minutes)

@router.get("/doctor", response_model=DoctorCalendarView)
async def get_doctor_calendar(
    doctor_email: str,
    start_date: date,
    end_date: date,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.CALENDAR_VIEW))
):
    return CalendarService(db).get_doctor_calendar(doctor_email, start_date, end_date)

@router.get("/patient", response_model=PatientCalendarView)
async def get_patient_calendar(
    patient_email: str,
    start_date: date,
    end_date: date,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.CALENDAR_VIEW))
):
    return CalendarService(db).get_patient_calendar(patient_email, start_date, end_date)

@router.get("/available-doctors", response_model=List[DoctorAvailability])
async def get_available_doctors(
    day: date,
    start_time: time,
    duration_minutes: int = Query(30),
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.CALENDAR_VIEW))
):
    """Every bookable doctor with an availability flag for the window."""
    return CalendarService(db).get_available_doctors(day, start_time, duration_minutes)
