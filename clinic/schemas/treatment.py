from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import List, Optional

class PrescriptionDetails(BaseModel):
    name: str = Field(..., min_length=1)
    dosage: str = Field(..., min_length=1)
    duration: str = Field(..., min_length=1)
    frequency: str = Field(..., min_length=1)
    instructions: Optional[str] = None

class TreatmentDetails(BaseModel):
    """One treatment produced by completing an appointment."""
    description: Optional[str] = None
    cost: float = Field(..., gt=0)
    amount_paid: float = Field(0, ge=0)
    installment_period_in_months: int = Field(0, ge=0)
    prescriptions: List[PrescriptionDetails] = Field(default_factory=list)

class TreatmentUpdate(BaseModel):
    notes: Optional[str] = None
    amount_paid: Optional[float] = Field(None, ge=0)
    installment_period_in_months: Optional[int] = Field(None, ge=0)

    def has_any_update(self) -> bool:
        return any(
            value is not None
            for value in (self.notes, self.amount_paid, self.installment_period_in_months)
        )

class TreatmentFilter(BaseModel):
    doctor_email: Optional[str] = None
    patient_email: Optional[str] = None
    from_date: Optional[date] = None
    to_date: Optional[date] = None
    notes: Optional[str] = None
    prescription_name: Optional[str] = None

    def has_filters(self) -> bool:
        return any(value for value in self.model_dump().values())

class PrescriptionResponse(BaseModel):
    id: int
    name: str
    dosage: str
    duration: str
    frequency: str
    instructions: Optional[str] = None

    class Config:
        from_attributes = True

class TreatmentResponse(BaseModel):
    id: int
    appointment_id: int
    doctor_id: int
    patient_id: int
    description: Optional[str] = None
    notes: Optional[str] = None
    cost: float
    amount_paid: float
    installment_period_in_months: int
    remaining_balance: float
    treatment_date: Optional[datetime] = None
    prescriptions: List[PrescriptionResponse] = []

    class Config:
        from_attributes = True
