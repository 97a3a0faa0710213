from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Text
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from ..core.database import Base

class EmployeeProfile(Base):
    __tablename__ = "employee_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)

    # Professional information
    specialization = Column(String(100), nullable=True)
    license_number = Column(String(50), nullable=True, unique=True)
    qualification = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    employment_status = Column(String(30), nullable=True)

    # Contact information
    phone_number = Column(String(20), nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    # Relationships
    user = relationship("User", back_populates="employee_profile")

    def __repr__(self):
        return f"<EmployeeProfile(id={self.id}, user_id={self.user_id}, specialization='{self.specialization}')>"
