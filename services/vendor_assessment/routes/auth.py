"""
Auth Routes
===========

Reviewer login and token refresh.

Version: 0.1.0
"""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from shared.auth import TokenPair, authenticate_reviewer, create_token_pair, decode_token
from shared.logging import get_logger


logger = get_logger(__name__)

router = APIRouter()


class LoginRequest(BaseModel):
    """Reviewer credentials."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class RefreshRequest(BaseModel):
    """Refresh token issued at login."""

    refresh_token: str = Field(..., min_length=1)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/token", response_model=TokenPair)
async def login(credentials: LoginRequest) -> TokenPair:
    """
    Exchange reviewer credentials for a bearer token pair.
    """
    if not authenticate_reviewer(credentials.username, credentials.password):
        raise _unauthorized("Invalid credentials")

    logger.info("reviewer_logged_in", username=credentials.username)
    return create_token_pair({"sub": credentials.username, "roles": ["admin"]})


@router.post("/refresh", response_model=TokenPair)
async def refresh(request: RefreshRequest) -> TokenPair:
    """
    Exchange a refresh token for a new token pair.

    Access tokens are refused here.
    """
    token_data = decode_token(request.refresh_token, verify_type="refresh")
    if token_data is None:
        raise _unauthorized("Invalid or expired refresh token")

    logger.info("reviewer_token_refreshed", username=token_data.sub)
    return create_token_pair({"sub": token_data.sub, "roles": token_data.roles})
