"""
Auth router: exposes the /auth/token login endpoint.

Uses the OAuth2 "password" grant (RFC 6749 §4.3): the client sends
  Content-Type: application/x-www-form-urlencoded
  username=<user>&password=<pass>

and receives a bearer token for the /vlan endpoints.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from pydantic import BaseModel

from vlanmgr.config import settings
from vlanmgr.services import auth

router = APIRouter(prefix="/auth", tags=["Authentication"])


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # seconds


@router.post(
    "/token",
    response_model=TokenResponse,
    summary="Obtain a JWT access token",
)
def login(form_data: OAuth2PasswordRequestForm = Depends()) -> TokenResponse:
    if not auth.check_credentials(form_data.username, form_data.password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return TokenResponse(
        access_token=auth.issue_token(subject=form_data.username),
        expires_in=settings.jwt_expire_minutes * 60,
    )
