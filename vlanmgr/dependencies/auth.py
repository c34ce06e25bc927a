"""
FastAPI dependency resolving the calling operator from a Bearer token.

With ``VLANMGR_AUTH_ENABLED=false`` every request is attributed to
``anonymous`` and no token is required.
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer

from vlanmgr.config import settings
from vlanmgr.services.auth import verify_token

ANONYMOUS = "anonymous"

# auto_error=False so the disabled-auth case can run without a header
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> str:
    """Return the authenticated username or raise HTTP 401."""
    if not settings.auth_enabled:
        return ANONYMOUS
    username = verify_token(token) if token else None
    if username is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return username
