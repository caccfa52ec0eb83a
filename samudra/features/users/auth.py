"""
JWT verification for bearer tokens issued by the ERP authentication service.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional
import jwt

from samudra.core import config
from samudra.core.errors import UnauthorizedError


def verify_jwt_token(token: str) -> dict:
    """
    Verify a bearer token and return its payload.
    
    Raises:
        UnauthorizedError: If the token is invalid or expired
    """
    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise UnauthorizedError(f"Invalid token: {str(e)}")


def create_access_token(
    user_id: str,
    username: Optional[str] = None,
    permissions: Optional[List[str]] = None,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """Issue a signed token carrying the claims read by get_current_user."""
    payload = {
        "id": user_id,
        "username": username,
        "permissions": permissions or [],
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)
