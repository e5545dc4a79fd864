"""
Authentication Utility - JWT handling.

Provides:
- JWT token creation/verification
- FastAPI dependency resolving the account id of the current request

Token issuance (login/registration) lives outside this service; the profile
asset endpoints only need to know which account is calling.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from hirehub.core.config import get_settings
from hirehub.core.errors import Unauthorized

# Bearer token extractor (missing header is reported as Unauthorized below)
bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    settings = get_settings()
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    settings = get_settings()
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


async def get_current_account_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """
    FastAPI dependency - Get the account id of the authenticated caller.

    Usage:
        @router.get("/protected")
        async def route(account_id: str = Depends(get_current_account_id)):
            ...
    """
    if credentials is None:
        raise Unauthorized("Invalid or expired token")

    payload = decode_token(credentials.credentials)
    if not payload:
        raise Unauthorized("Invalid or expired token")

    account_id = payload.get("sub")
    if not account_id:
        raise Unauthorized("Invalid or expired token")

    return str(account_id)
