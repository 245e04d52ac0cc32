import logging
from datetime import timedelta
from typing import Any, Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from jose import jwt as jose_jwt
from sqlalchemy.orm import Session

from .config import AUTH_ENABLED, JWT_ALGORITHM, SECRET_KEY
from .models import UserRole, utc_now

logger = logging.getLogger(__name__)

# auto_error=False so a missing header is reported as 401, not 403
security = HTTPBearer(auto_error=False)


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a signed access token for a user

    Args:
        user_id: Value stored in the "sub" claim
        expires_delta: Token lifetime (default 1 hour)
    """
    expire = utc_now() + (expires_delta or timedelta(hours=1))
    return jose_jwt.encode({"sub": user_id, "exp": expire}, SECRET_KEY, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict[str, Any]]:
    """Decode a token, returning None if invalid or expired"""
    try:
        return jose_jwt.decode(token, SECRET_KEY, algorithms=[JWT_ALGORITHM])
    except JWTError as e:
        logger.warning(f"JWT verification failed: {e}")
        return None


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    """
    Resolve the calling user's id from the bearer token.
    Returns None when auth is disabled (development/testing only).
    """
    if not AUTH_ENABLED:
        return None

    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid session")

    return payload["sub"]


def is_admin(db: Session, user_id: str) -> bool:
    """Check the role directory for an admin assignment"""
    return (
        db.query(UserRole).filter(UserRole.user_id == user_id, UserRole.role == "admin").first()
        is not None
    )
