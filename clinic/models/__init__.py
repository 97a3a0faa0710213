from .user import User
from .employee import EmployeeProfile
from .patient import PatientProfile
from .schedule import ScheduleSlot
from .time_off import TimeOff, TimeOffStatus
from .appointment import Appointment, AppointmentStatus
from .treatment import Treatment, Prescription

__all__ = [
    "User",
    "EmployeeProfile",
    "PatientProfile",
    "ScheduleSlot",
    "TimeOff",
    "TimeOffStatus",
    "Appointment",
    "AppointmentStatus",
    "Treatment",
    "Prescription",
]
