from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from datetime import datetime
from typing import List, Optional

from ...core.database import get_db
from ...core.security import Permission
from ...api.deps import require_permission
from ...services.time_off_service import TimeOffService
from ...schemas.time_off import TimeOffApproval, TimeOffCreate, TimeOffRequest, TimeOffResponse
from ...models.time_off import TimeOffStatus
from ...models.user import User

router = APIRouter(prefix="/time-offs", tags=["Time Off"])

def _responses(time_offs) -> List[TimeOffResponse]:
    return [TimeOffResponse.from_entity(t) for t in time_offs]

@router.post("", response_model=TimeOffResponse, status_code=status.HTTP_201_CREATED)
async def create_time_off(
    request: TimeOffCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TIME_OFF_REQUEST))
):
    """Submit a time off request; it starts PENDING."""
    time_off = TimeOffService(db).create_time_off(
        request.employee_email,
        request.start_datetime,
        request.end_datetime,
        request.reason
    )
    return TimeOffResponse.from_entity(time_off)

@router.put("/{time_off_id}", response_model=TimeOffResponse)
async def update_time_off(
    time_off_id: int,
    request: TimeOffRequest,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TIME_OFF_REQUEST))
):
    time_off = TimeOffService(db).update_time_off(
        time_off_id,
        request.start_datetime,
        request.end_datetime,
        request.reason
    )
    return TimeOffResponse.from_entity(time_off)

@router.put("/{time_off_id}/status", response_model=TimeOffResponse)
async def update_time_off_status(
    time_off_id: int,
    approval: TimeOffApproval,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TIME_OFF_APPROVE))
):
    """Approve or decline a pending request."""
    time_off = TimeOffService(db).update_time_off_status(
        time_off_id,
        approval.status,
        approval.approval_notes,
        current_user.email
    )
    return TimeOffResponse.from_entity(time_off)

@router.delete("/{time_off_id}")
async def delete_time_off(
    time_off_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TIME_OFF_REQUEST))
):
    TimeOffService(db).delete_time_off(time_off_id)
    return {"message": "Time off request deleted"}

@router.get("/pending", response_model=List[TimeOffResponse])
async def get_pending_time_offs(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TIME_OFF_VIEW))
):
    return _responses(TimeOffService(db).get_pending_time_offs())

@router.get("/active", response_model=List[TimeOffResponse])
async def get_active_time_offs(
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TIME_OFF_VIEW))
):
    return _responses(TimeOffService(db).get_all_active_time_offs())

@router.get("/status/{time_off_status}", response_model=List[TimeOffResponse])
async def get_time_offs_by_status(
    time_off_status: TimeOffStatus,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TIME_OFF_VIEW))
):
    return _responses(TimeOffService(db).get_time_offs_by_status(time_off_status))

@router.get("/employee/{email}", response_model=List[TimeOffResponse])
async def get_employee_time_offs(
    email: str,
    time_off_status: Optional[TimeOffStatus] = Query(None, alias="status"),
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TIME_OFF_VIEW))
):
    """An employee's time off, optionally narrowed by status or by range."""
    service = TimeOffService(db)
    if start is not None and end is not None:
        return _responses(service.get_employee_time_offs_in_range(email, start, end))
    if time_off_status is not None:
        return _responses(service.get_employee_time_offs_by_status(email, time_off_status))
    return _responses(service.get_employee_time_offs(email))

@router.get("/employee/{email}/check")
async def has_time_off_on(
    email: str,
    at: datetime,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TIME_OFF_VIEW))
):
    return {"employee_email": email, "at": at, "has_time_off": TimeOffService(db).has_time_off_on(email, at)}

@router.get("/{time_off_id}", response_model=TimeOffResponse)
async def get_time_off(
    time_off_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.TIME_OFF_VIEW))
):
    return TimeOffResponse.from_entity(TimeOffService(db).get_time_off(time_off_id))
