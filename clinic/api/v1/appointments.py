from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...core.security import Permission
from ...api.deps import require_permission, rate_limit_check
from ...services.appointment_service import AppointmentService
from ...schemas.appointment import (
    AppointmentRequest, AppointmentResponse, AppointmentSearch, CompleteAppointmentRequest
)
from ...models.user import User

router = APIRouter(prefix="/appointments", tags=["Appointments"])

@router.post("/schedule", response_model=AppointmentResponse, status_code=status.HTTP_201_CREATED)
async def schedule_appointment(
    request: AppointmentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.APPOINTMENT_SCHEDULE)),
    _: None = Depends(rate_limit_check)
):
    """Book an appointment with a doctor."""
    service = AppointmentService(db)
    appointment = service.schedule_appointment(
        request.doctor_email,
        request.patient_email,
        request.date_time,
        request.duration_minutes,
        request.reason
    )
    return AppointmentResponse.model_validate(appointment)

@router.post("/{appointment_id}/cancel")
async def cancel_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.APPOINTMENT_CANCEL))
):
    """Cancel (delete) an appointment."""
    AppointmentService(db).cancel_appointment(appointment_id)
    return {"message": "Appointment cancelled successfully"}

@router.patch("/{appointment_id}/complete", response_model=AppointmentResponse)
async def complete_appointment(
    appointment_id: int,
    request: CompleteAppointmentRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.APPOINTMENT_COMPLETE))
):
    """Mark an appointment done and record its treatments."""
    service = AppointmentService(db)
    appointment = service.complete_appointment(
        appointment_id,
        request.treatments,
        request.file_paths,
        request.visit_notes
    )
    return AppointmentResponse.model_validate(appointment)

@router.get("", response_model=List[AppointmentResponse])
async def list_appointments(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.APPOINTMENT_VIEW))
):
    appointments = AppointmentService(db).list_appointments()
    return [AppointmentResponse.model_validate(a) for a in appointments]

@router.post("/search", response_model=List[AppointmentResponse])
async def search_appointments(
    criteria: AppointmentSearch,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.APPOINTMENT_VIEW))
):
    """Search appointments by participant, status and date range."""
    appointments = AppointmentService(db).search_appointments(
        patient_email=criteria.patient_email,
        doctor_email=criteria.doctor_email,
        status=criteria.status,
        start_date=criteria.start_date,
        end_date=criteria.end_date
    )
    return [AppointmentResponse.model_validate(a) for a in appointments]

@router.get("/patient/{email}", response_model=List[AppointmentResponse])
async def get_patient_appointments(
    email: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.APPOINTMENT_VIEW))
):
    appointments = AppointmentService(db).appointments_for_patient(email)
    return [AppointmentResponse.model_validate(a) for a in appointments]

@router.get("/doctor/{email}", response_model=List[AppointmentResponse])
async def get_doctor_appointments(
    email: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.APPOINTMENT_VIEW))
):
    appointments = AppointmentService(db).appointments_for_doctor(email)
    return [AppointmentResponse.model_validate(a) for a in appointments]

@router.get("/{appointment_id}", response_model=AppointmentResponse)
async def get_appointment(
    appointment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.APPOINTMENT_VIEW))
):
    return AppointmentResponse.model_validate(AppointmentService(db).get_appointment(appointment_id))
