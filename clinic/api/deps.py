from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import logging

from ..core.config import settings
from ..core.database import get_db, get_redis
from ..core.security import (
    security, verify_token, AuthenticationError,
    AuthorizationError, Permission, PermissionTable,
    DEFAULT_PERMISSION_TABLE, TokenPayload
)
from ..models.user import User

logger = logging.getLogger(__name__)

async def get_current_user_token(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> TokenPayload:
    """Extract and verify JWT token from Authorization header."""
    token = credentials.credentials

    token_payload = verify_token(token)
    if not token_payload:
        raise AuthenticationError("Invalid or expired token")

    if token_payload.token_type != "access":
        raise AuthenticationError("Invalid token type")

    return token_payload

async def get_current_user(
    token_payload: TokenPayload = Depends(get_current_user_token),
    db: Session = Depends(get_db)
) -> User:
    """Get current authenticated user from database."""
    if not token_payload.sub:
        raise AuthenticationError("Invalid token payload")

    user = db.query(User).filter(User.id == token_payload.sub).first()
    if not user:
        raise AuthenticationError("User not found")

    if not user.is_active:
        raise AuthenticationError("User account is deactivated")

    return user

def get_permission_table() -> PermissionTable:
    """Active permission table; overridable per deployment or test."""
    return DEFAULT_PERMISSION_TABLE

# Permission-based access control dependencies
def require_permission(permission: Permission):
    """Create a dependency that requires the caller's kind to be granted `permission`."""
    async def permission_checker(
        current_user: User = Depends(get_current_user),
        table: PermissionTable = Depends(get_permission_table)
    ) -> User:
        if not table.has_permission(current_user, permission):
            logger.warning(
                f"Denied {permission.value} to {current_user.email} ({current_user.kind.value}) "
                f"under permission table {table.version}"
            )
            raise AuthorizationError(f"Access denied. Required permission: {permission.value}")
        return current_user

    return permission_checker

# Rate limiting dependency
async def rate_limit_check(
    request: Request,
    redis_client = Depends(get_redis)
) -> None:
    """Fixed-window rate limiting for booking mutations, keyed by client IP."""
    client_ip = request.client.host if request.client else "unknown"
    key = f"rate_limit:{client_ip}"

    current_requests = redis_client.get(key)
    if current_requests is None:
        redis_client.setex(key, settings.RATE_LIMIT_WINDOW_SECONDS, 1)
    else:
        if int(current_requests) >= settings.RATE_LIMIT_REQUESTS:
            raise HTTPException(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                detail="Too many requests. Please try again later."
            )
        redis_client.incr(key)
