from pydantic import BaseModel
from datetime import datetime
from typing import Optional

from ..models.time_off import TimeOffStatus

class TimeOffRequest(BaseModel):
    start_datetime: Optional[datetime] = None
    end_datetime: Optional[datetime] = None
    reason: Optional[str] = None

class TimeOffCreate(TimeOffRequest):
    employee_email: str

class TimeOffApproval(BaseModel):
    status: TimeOffStatus
    approval_notes: Optional[str] = None

class TimeOffResponse(BaseModel):
    id: int
    employee_email: str
    employee_name: str
    start_datetime: datetime
    end_datetime: datetime
    reason: Optional[str] = None
    status: TimeOffStatus
    approved_by: Optional[str] = None
    approval_notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, time_off) -> "TimeOffResponse":
        return cls(
            id=time_off.id,
            employee_email=time_off.employee.email,
            employee_name=time_off.employee.display_name,
            start_datetime=time_off.start_datetime,
            end_datetime=time_off.end_datetime,
            reason=time_off.reason,
            status=time_off.status,
            approved_by=time_off.approved_by,
            approval_notes=time_off.approval_notes,
            created_at=time_off.created_at,
            updated_at=time_off.updated_at,
        )
