from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...core.exceptions import NotFoundError
from ...core.security import Permission
from ...api.deps import require_permission
from ...services.schedule_service import ScheduleService
from ...schemas.schedule import DayScheduleIn, ScheduleSlotResponse, WeeklyScheduleIn
from ...models.user import User

router = APIRouter(prefix="/schedules", tags=["Schedules"])

@router.get("/{email}", response_model=List[ScheduleSlotResponse])
async def get_weekly_schedule(
    email: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.SCHEDULE_VIEW))
):
    return ScheduleService(db).get_weekly_schedule(email)

@router.put("/{email}", response_model=List[ScheduleSlotResponse])
async def set_weekly_schedule(
    email: str,
    schedule: WeeklyScheduleIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.SCHEDULE_MANAGE))
):
    """Replace an employee's whole week."""
    return ScheduleService(db).set_weekly_schedule(email, schedule.slots)

@router.delete("/{email}")
async def delete_weekly_schedule(
    email: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.SCHEDULE_MANAGE))
):
    deleted = ScheduleService(db).delete_weekly_schedule(email)
    return {"message": "Weekly schedule deleted", "deleted": deleted}

@router.put("/{email}/{day}", response_model=ScheduleSlotResponse)
async def set_day_schedule(
    email: str,
    day: str,
    shift: DayScheduleIn,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.SCHEDULE_MANAGE))
):
    return ScheduleService(db).set_day_schedule(email, day, shift.start_time, shift.end_time)

@router.delete("/{email}/{day}")
async def delete_day_schedule(
    email: str,
    day: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_permission(Permission.SCHEDULE_MANAGE))
):
    if not ScheduleService(db).delete_day_schedule(email, day):
        raise NotFoundError(f"No schedule found for {email} on {day}")
    return {"message": "Day schedule deleted"}
