from sqlalchemy.orm import Session, selectinload
from datetime import datetime, time, timedelta
from typing import List, Optional
import logging

from ..core.exceptions import NotFoundError, ValidationError
from ..models.appointment import Appointment, AppointmentStatus
from ..models.treatment import Prescription, Treatment
from ..models.user import User
from ..schemas.treatment import TreatmentDetails, TreatmentFilter, TreatmentUpdate
from .user_directory import UserDirectory

logger = logging.getLogger(__name__)

class TreatmentService:
    def __init__(self, db: Session):
        self.db = db
        self.users = UserDirectory(db)

    def create_treatments_for_appointment(
        self,
        appointment: Appointment,
        details: Optional[List[TreatmentDetails]]
    ) -> List[Treatment]:
        """
        Add treatments and their prescriptions for a completed appointment.

        Only flushes; the caller owns the transaction so that a failure leaves
        nothing behind.
        """
        if not details:
            raise ValidationError("Treatments list must not be null or empty")

        for detail in details:
            if detail.amount_paid > detail.cost:
                raise ValidationError("Amount paid cannot exceed total cost")

        treatments = []
        for detail in details:
            treatment = Treatment(
                appointment_id=appointment.id,
                doctor_id=appointment.doctor_id,
                patient_id=appointment.patient_id,
                description=detail.description,
                cost=detail.cost,
                amount_paid=detail.amount_paid,
                installment_period_in_months=detail.installment_period_in_months,
                remaining_balance=detail.cost - detail.amount_paid,
            )
            treatment.prescriptions = [
                Prescription(
                    name=prescription.name,
                    dosage=prescription.dosage,
                    duration=prescription.duration,
                    frequency=prescription.frequency,
                    instructions=prescription.instructions,
                )
                for prescription in detail.prescriptions
            ]
            self.db.add(treatment)
            treatments.append(treatment)

        self.db.flush()
        return treatments

    def update_treatment(self, treatment_id: int, update: TreatmentUpdate) -> Treatment:
        if not update.has_any_update():
            raise ValidationError("No updates provided")

        treatment = self.get_treatment(treatment_id)

        if update.notes is not None:
            treatment.notes = update.notes

        if update.amount_paid is not None:
            if update.amount_paid > treatment.cost:
                raise ValidationError("Amount paid cannot exceed total cost")
            treatment.amount_paid = update.amount_paid
            treatment.remaining_balance = treatment.cost - update.amount_paid

        if update.installment_period_in_months is not None:
            treatment.installment_period_in_months = update.installment_period_in_months

        self.db.commit()
        self.db.refresh(treatment)
        logger.info(f"Treatment {treatment_id} updated")
        return treatment

    def get_treatment(self, treatment_id: int) -> Treatment:
        treatment = self.db.query(Treatment).filter(Treatment.id == treatment_id).first()
        if not treatment:
            raise NotFoundError(f"Treatment not found with ID: {treatment_id}")
        return treatment

    def treatments_for_patient(self, email: str) -> List[Treatment]:
        patient = self.users.get_patient(email)
        return self._query().filter(Treatment.patient_id == patient.id).all()

    def treatments_for_doctor(self, email: str) -> List[Treatment]:
        doctor = self.users.get_doctor(email)
        return self._query().filter(Treatment.doctor_id == doctor.id).all()

    def filter_treatments(self, criteria: TreatmentFilter, now: Optional[datetime] = None) -> List[Treatment]:
        """Search treatments; without criteria, the last 30 days of completed visits."""
        query = self._query()

        if not criteria.has_filters():
            since = (now or datetime.now()) - timedelta(days=30)
            return query.join(Treatment.appointment).filter(
                Appointment.status == AppointmentStatus.DONE,
                Appointment.start_datetime > since
            ).all()

        if criteria.from_date and criteria.to_date and criteria.from_date > criteria.to_date:
            raise ValidationError("From date cannot be after to date")

        if criteria.doctor_email:
            doctor: User = self.users.get_doctor(criteria.doctor_email)
            query = query.filter(Treatment.doctor_id == doctor.id)

        if criteria.patient_email:
            patient: User = self.users.get_patient(criteria.patient_email)
            query = query.filter(Treatment.patient_id == patient.id)

        if criteria.from_date:
            query = query.filter(Treatment.treatment_date >= datetime.combine(criteria.from_date, time.min))

        if criteria.to_date:
            query = query.filter(Treatment.treatment_date <= datetime.combine(criteria.to_date, time.max))

        treatments = query.all()

        if criteria.notes and criteria.notes.strip():
            keyword = criteria.notes.strip().lower()
            treatments = [t for t in treatments if t.notes and keyword in t.notes.lower()]

        if criteria.prescription_name and criteria.prescription_name.strip():
            keyword = criteria.prescription_name.strip().lower()
            treatments = [
                t for t in treatments
                if any(keyword in p.name.lower() for p in t.prescriptions)
            ]

        return treatments

    def _query(self):
        return self.db.query(Treatment).options(
            selectinload(Treatment.prescriptions)
        ).order_by(Treatment.treatment_date.desc(), Treatment.id.desc())
