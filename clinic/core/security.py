from datetime import datetime, timedelta
from typing import Dict, FrozenSet, Iterable, Optional
from jose import JWTError, jwt
from fastapi import HTTPException, status
from fastapi.security import HTTPBearer
from pydantic import BaseModel
from enum import Enum

from .config import settings

# JWT Security
security = HTTPBearer()

class UserKind(str, Enum):
    ADMIN = "admin"
    DOCTOR = "doctor"
    NURSE = "nurse"
    RECEPTIONIST = "receptionist"
    LAB_TECHNICIAN = "lab_technician"
    EMPLOYEE = "employee"
    PATIENT = "patient"

EMPLOYEE_KINDS = frozenset({
    UserKind.DOCTOR,
    UserKind.NURSE,
    UserKind.RECEPTIONIST,
    UserKind.LAB_TECHNICIAN,
    UserKind.EMPLOYEE,
})

# Kinds that can be booked for appointments
BOOKABLE_KINDS = frozenset({UserKind.DOCTOR, UserKind.EMPLOYEE})

class Permission(str, Enum):
    APPOINTMENT_SCHEDULE = "appointment:schedule"
    APPOINTMENT_CANCEL = "appointment:cancel"
    APPOINTMENT_COMPLETE = "appointment:complete"
    APPOINTMENT_VIEW = "appointment:view"
    CALENDAR_VIEW = "calendar:view"
    SCHEDULE_VIEW = "schedule:view"
    SCHEDULE_MANAGE = "schedule:manage"
    TIME_OFF_REQUEST = "time_off:request"
    TIME_OFF_APPROVE = "time_off:approve"
    TIME_OFF_VIEW = "time_off:view"
    TREATMENT_VIEW = "treatment:view"
    TREATMENT_MANAGE = "treatment:manage"

class TokenPayload(BaseModel):
    sub: Optional[int] = None
    email: Optional[str] = None
    kind: Optional[str] = None
    exp: Optional[int] = None
    token_type: Optional[str] = None  # "access" or "refresh"

class PermissionTable:
    """Versioned mapping of user kinds to granted permissions."""

    def __init__(self, version: str, grants: Dict[UserKind, Iterable[Permission]]):
        self.version = version
        self._grants: Dict[UserKind, FrozenSet[Permission]] = {
            kind: frozenset(perms) for kind, perms in grants.items()
        }

    def permissions_for(self, kind: UserKind) -> FrozenSet[Permission]:
        return self._grants.get(UserKind(kind), frozenset())

    def has_permission(self, user, permission: Permission) -> bool:
        if user is None or not user.is_active:
            return False
        return permission in self.permissions_for(user.kind)

_STAFF_BASE = {
    Permission.APPOINTMENT_VIEW,
    Permission.CALENDAR_VIEW,
    Permission.SCHEDULE_VIEW,
    Permission.TIME_OFF_REQUEST,
    Permission.TIME_OFF_VIEW,
}

DEFAULT_PERMISSION_TABLE = PermissionTable(
    version="2024.1",
    grants={
        UserKind.ADMIN: set(Permission),
        UserKind.DOCTOR: _STAFF_BASE | {
            Permission.APPOINTMENT_SCHEDULE,
            Permission.APPOINTMENT_CANCEL,
            Permission.APPOINTMENT_COMPLETE,
            Permission.TREATMENT_VIEW,
            Permission.TREATMENT_MANAGE,
        },
        UserKind.RECEPTIONIST: _STAFF_BASE | {
            Permission.APPOINTMENT_SCHEDULE,
            Permission.APPOINTMENT_CANCEL,
            Permission.TREATMENT_VIEW,
        },
        UserKind.NURSE: _STAFF_BASE | {Permission.TREATMENT_VIEW},
        UserKind.LAB_TECHNICIAN: _STAFF_BASE,
        UserKind.EMPLOYEE: _STAFF_BASE,
        UserKind.PATIENT: {
            Permission.APPOINTMENT_SCHEDULE,
            Permission.APPOINTMENT_VIEW,
            Permission.CALENDAR_VIEW,
            Permission.TREATMENT_VIEW,
        },
    },
)

# JWT utilities
def create_access_token(
    data: dict,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT access token (used by tooling and tests)."""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(
            minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    to_encode.update({
        "exp": expire,
        "token_type": "access"
    })

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )

def verify_token(token: str) -> Optional[TokenPayload]:
    """Verify and decode JWT token."""
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )

        return TokenPayload(**payload)

    except JWTError:
        return None

# Security exceptions
class AuthenticationError(HTTPException):
    def __init__(self, detail: str = "Could not validate credentials"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

class AuthorizationError(HTTPException):
    def __init__(self, detail: str = "Not enough permissions"):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=detail,
        )
