from pydantic import BaseModel
from typing import List

from ..core.security import UserKind

class UserSummary(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    kind: UserKind

    class Config:
        from_attributes = True

class CurrentUserResponse(UserSummary):
    is_active: bool = True
    permissions: List[str] = []
    permission_table_version: str
