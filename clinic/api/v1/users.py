from fastapi import APIRouter, Depends

from ...core.security import PermissionTable
from ...api.deps import get_current_user, get_permission_table
from ...schemas.user import CurrentUserResponse
from ...models.user import User

router = APIRouter(prefix="/users", tags=["Users"])

@router.get("/me", response_model=CurrentUserResponse)
async def get_current_user_info(
    current_user: User = Depends(get_current_user),
    table: PermissionTable = Depends(get_permission_table)
):
    """Get current user information and what they may do."""
    return CurrentUserResponse(
        id=current_user.id,
        email=current_user.email,
        first_name=current_user.first_name,
        last_name=current_user.last_name,
        kind=current_user.kind,
        is_active=current_user.is_active,
        permissions=sorted(p.value for p in table.permissions_for(current_user.kind)),
        permission_table_version=table.version,
    )
