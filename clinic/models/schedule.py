from sqlalchemy import Column, Integer, ForeignKey, Time, CheckConstraint, UniqueConstraint
from sqlalchemy.orm import relationship

from ..core.database import Base

DAY_NAMES = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")

class ScheduleSlot(Base):
    """Recurring weekly working interval for one employee on one weekday."""
    __tablename__ = "schedule_slots"
    __table_args__ = (
        UniqueConstraint("employee_id", "day_of_week", name="uq_schedule_employee_day"),
        CheckConstraint("end_time > start_time", name="ck_schedule_end_after_start"),
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_schedule_day_of_week"),
    )

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    day_of_week = Column(Integer, nullable=False)  # 0-6 (Monday-Sunday), same as date.weekday()
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    employee = relationship("User", back_populates="schedule_slots")

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]

    def __repr__(self):
        return f"<ScheduleSlot(employee_id={self.employee_id}, day='{self.day_name}', {self.start_time}-{self.end_time})>"
