from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...core.security import Permission
from ...api.deps import require_permission
from ...services.treatment_service import TreatmentService
from ...schemas.treatment import TreatmentFilter, TreatmentResponse, TreatmentUpdate
from ...models.user import User

router = APIRouter(prefix="/treatments", tags=["Treatments"])

@router.post("/filter", response_model=List[TreatmentResponse])
async def filter_treatments(
    criteria: TreatmentFilter,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TREATMENT_VIEW))
):
    """Search treatments; an empty filter returns the last 30 days of completed visits."""
    treatments = TreatmentService(db).filter_treatments(criteria)
    return [TreatmentResponse.model_validate(t) for t in treatments]

@router.get("/patient/{email}", response_model=List[TreatmentResponse])
async def get_patient_treatments(
    email: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TREATMENT_VIEW))
):
    treatments = TreatmentService(db).treatments_for_patient(email)
    return [TreatmentResponse.model_validate(t) for t in treatments]

@router.get("/doctor/{email}", response_model=List[TreatmentResponse])
async def get_doctor_treatments(
    email: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TREATMENT_VIEW))
):
    treatments = TreatmentService(db).treatments_for_doctor(email)
    return [TreatmentResponse.model_validate(t) for t in treatments]

@router.get("/{treatment_id}", response_model=TreatmentResponse)
async def get_treatment(
    treatment_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TREATMENT_VIEW))
):
    return TreatmentResponse.model_validate(TreatmentService(db).get_treatment(treatment_id))

@router.patch("/{treatment_id}", response_model=TreatmentResponse)
async def update_treatment(
    treatment_id: int,
    update: TreatmentUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TREATMENT_MANAGE))
):
    """Update notes, payment or installment plan."""
    return TreatmentResponse.model_validate(TreatmentService(db).update_treatment(treatment_id, update))
