"""JWT authentication and role checks."""
import hmac
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from loguru import logger

from membership.settings import settings

ROLE_ADMIN = "admin"
ROLE_STAFF = "staff"

bearer_scheme = HTTPBearer(auto_error=False)


def authenticate_user(username: str, password: str) -> Optional[str]:
    """Return the role of the matching built-in account, or None."""
    accounts = (
        (settings.admin_user, settings.admin_pass, ROLE_ADMIN),
        (settings.staff_user, settings.staff_pass, ROLE_STAFF),
    )
    for account_user, account_pass, role in accounts:
        if hmac.compare_digest(username, account_user) and hmac.compare_digest(
            password, account_pass
        ):
            return role
    return None


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed JWT."""
    to_encode = data.copy()
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_access_token_expire_minutes)
    to_encode["exp"] = datetime.now(timezone.utc) + expires_delta
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> Optional[dict]:
    """Decode a JWT; None when invalid or expired."""
    try:
        return jwt.decode(
            token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """Resolve the bearer token into {"username", "role"}."""
    payload = verify_token(credentials.credentials) if credentials else None
    if not payload or not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"username": payload["sub"], "role": payload.get("role")}


def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    """Admin role required."""
    if current_user.get("role") != ROLE_ADMIN:
        logger.warning("Admin access denied for {}", current_user.get("username"))
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required"
        )
    return current_user


def require_admin_or_staff(current_user: dict = Depends(get_current_user)) -> dict:
    """Staff or admin role required."""
    if current_user.get("role") not in (ROLE_ADMIN, ROLE_STAFF):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Staff or admin access required",
        )
    return current_user
