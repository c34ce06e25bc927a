"""
Authentication service: credential checks + JWT issue/verification.

Flow
────
1. An operator calls POST /auth/token with username + password (OAuth2 form).
2. The credentials are checked against the configured users (settings.demo_users).
3. On success a signed JWT access token is returned.
4. Every /vlan request must then send  Authorization: Bearer <token>.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from vlanmgr.config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def issue_token(subject: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a JWT whose 'sub' claim is *subject*."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.jwt_expire_minutes)
    )
    claims = {"sub": subject, "exp": expire}
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_token(token: str) -> Optional[str]:
    """Return the token's subject, or None if it is invalid or expired."""
    try:
        claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None
    return claims.get("sub")


def check_credentials(username: str, password: str) -> bool:
    """Accept plain-text passwords or bcrypt hashes from the user list."""
    stored = settings.get_demo_users().get(username)
    if not stored:
        return False
    if stored.startswith("$2b$"):
        return pwd_context.verify(password, stored)
    return stored == password
