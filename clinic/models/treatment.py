from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Float, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class Treatment(Base):
    __tablename__ = "treatments"

    id = Column(Integer, primary_key=True, index=True)
    appointment_id = Column(Integer, ForeignKey("appointments.id"), nullable=False, index=True)
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    # Billing
    cost = Column(Float, nullable=False)
    amount_paid = Column(Float, nullable=False, default=0)
    installment_period_in_months = Column(Integer, nullable=False, default=0)
    remaining_balance = Column(Float, nullable=False)

    treatment_date = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    appointment = relationship("Appointment", back_populates="treatments")
    doctor = relationship("User", foreign_keys=[doctor_id])
    patient = relationship("User", foreign_keys=[patient_id])
    prescriptions = relationship(
        "Prescription", back_populates="treatment", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Treatment(id={self.id}, appointment_id={self.appointment_id}, cost={self.cost})>"

class Prescription(Base):
    __tablename__ = "prescriptions"

    id = Column(Integer, primary_key=True, index=True)
    treatment_id = Column(Integer, ForeignKey("treatments.id"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    dosage = Column(String(100), nullable=False)
    duration = Column(String(100), nullable=False)
    frequency = Column(String(100), nullable=False)
    instructions = Column(Text, nullable=True)

    treatment = relationship("Treatment", back_populates="prescriptions")

    def __repr__(self):
        return f"<Prescription(id={self.id}, name='{self.name}')>"
