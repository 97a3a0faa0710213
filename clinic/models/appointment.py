from sqlalchemy import Column, Integer, ForeignKey, DateTime, Boolean, Text, JSON, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from datetime import timedelta
import enum

from ..core.database import Base

class AppointmentStatus(str, enum.Enum):
    OPEN = "open"
    DONE = "done"

class Appointment(Base):
    __tablename__ = "appointments"

    id = Column(Integer, primary_key=True, index=True)

    # Participants
    doctor_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    patient_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    # Appointment details
    start_datetime = Column(DateTime, nullable=False, index=True)
    duration_minutes = Column(Integer, nullable=False)
    # Stored for range queries, always start_datetime + duration_minutes
    end_datetime = Column(DateTime, nullable=False)
    status = Column(SQLEnum(AppointmentStatus), nullable=False, default=AppointmentStatus.OPEN)
    is_done = Column(Boolean, nullable=False, default=False)
    reason = Column(Text, nullable=True)

    # Completion
    visit_notes = Column(Text, nullable=True)
    file_paths = Column(JSON, nullable=True)

    # Tracking
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    doctor = relationship("User", foreign_keys=[doctor_id])
    patient = relationship("User", foreign_keys=[patient_id])
    treatments = relationship(
        "Treatment", back_populates="appointment", cascade="all, delete-orphan"
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        if self.end_datetime is None and self.start_datetime is not None and self.duration_minutes is not None:
            self.end_datetime = self.start_datetime + timedelta(minutes=self.duration_minutes)

    def __repr__(self):
        return f"<Appointment(id={self.id}, patient_id={self.patient_id}, doctor_id={self.doctor_id}, start='{self.start_datetime}')>"
