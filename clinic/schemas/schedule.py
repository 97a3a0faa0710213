from pydantic import BaseModel
from datetime import time
from typing import List

class ScheduleSlotIn(BaseModel):
    day_of_week: str  # MONDAY..SUNDAY, case-insensitive
    start_time: time
    end_time: time

class DayScheduleIn(BaseModel):
    start_time: time
    end_time: time

class WeeklyScheduleIn(BaseModel):
    slots: List[ScheduleSlotIn] = []

class ScheduleSlotResponse(BaseModel):
    day_of_week: str
    start_time: time
    end_time: time
