from sqlalchemy import func
from sqlalchemy.orm import Session
from typing import Optional

from ..core.exceptions import NotFoundError, ValidationError
from ..models.user import User

class UserDirectory:
    """Resolves users by email and checks they are of the expected kind."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_email(self, email: Optional[str]) -> Optional[User]:
        if not email:
            return None
        return self.db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    def resolve_user(self, email: Optional[str], label: str = "User") -> User:
        if not email:
            raise ValidationError(f"{label} email must not be null")

        user = self.find_by_email(email)
        if not user:
            raise NotFoundError(f"{label} not found with email: {email}")
        return user

    def get_employee(self, email: Optional[str]) -> User:
        user = self.resolve_user(email, "Employee")
        if not user.is_employee_kind:
            raise ValidationError(f"User with email {email} is not an employee")
        return user

    def get_doctor(self, email: Optional[str]) -> User:
        user = self.resolve_user(email, "Doctor")
        if not user.is_doctor_kind:
            raise ValidationError(f"User with email {email} is not a doctor or employee")
        return user

    def get_patient(self, email: Optional[str]) -> User:
        user = self.resolve_user(email, "Patient")
        if not user.is_patient_kind:
            raise ValidationError(f"User with email {email} is not a patient")
        return user
