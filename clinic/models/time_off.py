from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, Enum as SQLEnum
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
import enum

from ..core.database import Base

class TimeOffStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    DECLINED = "DECLINED"

    @property
    def is_final(self) -> bool:
        return self in (TimeOffStatus.APPROVED, TimeOffStatus.DECLINED)

class TimeOff(Base):
    __tablename__ = "time_offs"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    start_datetime = Column(DateTime, nullable=False, index=True)
    end_datetime = Column(DateTime, nullable=False)
    reason = Column(String(255), nullable=True)
    status = Column(SQLEnum(TimeOffStatus), nullable=False, default=TimeOffStatus.PENDING)

    # Approval
    approved_by = Column(String(255), nullable=True)
    approval_notes = Column(String(500), nullable=True)

    # Timestamps
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    employee = relationship("User", back_populates="time_offs")

    def __repr__(self):
        return f"<TimeOff(id={self.id}, employee_id={self.employee_id}, status='{self.status}')>"
