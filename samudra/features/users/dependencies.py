"""
FastAPI dependencies for authentication and authorization.
"""
from typing import Annotated, Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from samudra.core.errors import ForbiddenError, UnauthorizedError
from samudra.features.users.auth import verify_jwt_token
from samudra.features.users.schemas import CurrentUser
from samudra.utils import get_logger


log = get_logger(__name__)
security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)]
) -> CurrentUser:
    """
    Get the current authenticated user from the bearer token.
    
    Usage:
        @router.get("/me")
        async def get_me(user: CurrentUser = Depends(get_current_user)):
            return user
    """
    if credentials is None:
        raise UnauthorizedError("Authentication required")

    payload = verify_jwt_token(credentials.credentials)
    user_id = payload.get("id")
    if not user_id:
        raise UnauthorizedError("Invalid token payload")

    return CurrentUser(
        id=str(user_id),
        username=payload.get("username"),
        permissions=payload.get("permissions") or [],
    )


def require_permissions(*codes: str):
    """
    FastAPI dependency requiring every listed permission code.

    Holders of the ``ALL`` code pass every check.
    
    Usage:
        @router.post("/roles")
        async def create_role(
            user: CurrentUser = Depends(require_permissions("ROLE_CREATE"))
        ):
            ...
    """
    required = [code.upper() for code in codes]

    async def permission_dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)]
    ) -> CurrentUser:
        if not current_user.has_permissions(required):
            log.warning(
                "Permission denied: user=%s required=%s held=%s",
                current_user.id, required, current_user.permissions,
            )
            raise ForbiddenError("You do not have permission to perform this action")
        return current_user

    return permission_dependency


def get_authorization_header(request) -> str:
    """
    Extract authorization header for rate limiting.
    Used with slowapi Limiter.
    """
    auth = request.headers.get("Authorization", "")
    return auth or "anonymous"
