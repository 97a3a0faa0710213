from sqlalchemy import Column, Integer, String, DateTime, Boolean, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base
from ..core.security import UserKind, EMPLOYEE_KINDS, BOOKABLE_KINDS

class User(Base):
    """Directory entry for any clinic user; kind-specific data lives in profiles."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    kind = Column(SQLEnum(UserKind), nullable=False, index=True)
    is_active = Column(Boolean, default=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    patient_profile = relationship("PatientProfile", back_populates="user", uselist=False)
    employee_profile = relationship("EmployeeProfile", back_populates="user", uselist=False)
    schedule_slots = relationship(
        "ScheduleSlot", back_populates="employee", cascade="all, delete-orphan"
    )
    time_offs = relationship("TimeOff", back_populates="employee", cascade="all, delete-orphan")

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @property
    def is_employee_kind(self) -> bool:
        return self.kind in EMPLOYEE_KINDS

    @property
    def is_doctor_kind(self) -> bool:
        return self.kind in BOOKABLE_KINDS

    @property
    def is_patient_kind(self) -> bool:
        return self.kind == UserKind.PATIENT

    @property
    def is_admin_kind(self) -> bool:
        return self.kind == UserKind.ADMIN

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', kind='{self.kind}')>"
