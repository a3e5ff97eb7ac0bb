"""
Authentication API: register, login, refresh, logout.
"""

from dataclasses import asdict

from fastapi import APIRouter, Depends

from sessiongate.api.deps import get_auth_service
from sessiongate.api.errors import failure_response
from sessiongate.api.responses import success_response
from sessiongate.api.schemas import (
    LoginRequest,
    LoginResponse,
    RefreshResponse,
    RegisterRequest,
    RegisterResponse,
    TokenRequest,
)
from sessiongate.auth.service import AuthenticationService

router = APIRouter(prefix="/api/v1/authentication", tags=["authentication"])


@router.post("/register")
def register(body: RegisterRequest, service: AuthenticationService = Depends(get_auth_service)):
    """Create an account; no credential is issued."""
    result = service.register(body.username, body.password, body.role)
    if not result.ok:
        return failure_response(result)
    data = RegisterResponse(**asdict(result.value))
    return success_response("Successfully registering a new user", data.model_dump())


@router.post("/login")
def login(body: LoginRequest, service: AuthenticationService = Depends(get_auth_service)):
    """Username + password login; returns an access token and a refresh token."""
    result = service.login(body.username, body.password)
    if not result.ok:
        return failure_response(result)
    data = LoginResponse(
        access_token=result.value.access_token,
        refresh_token=result.value.refresh_token,
        user_id=result.value.account_id,
    )
    return success_response("Successfully login", data.model_dump())


@router.post("/refresh")
def refresh(body: TokenRequest, service: AuthenticationService = Depends(get_auth_service)):
    """Mint a new access token from a refresh token."""
    result = service.refresh(body.token)
    if not result.ok:
        return failure_response(result)
    data = RefreshResponse(access_token=result.value.access_token)
    return success_response("New token generated", data.model_dump())


@router.post("/logout")
def logout(body: TokenRequest, service: AuthenticationService = Depends(get_auth_service)):
    """Revoke a refresh token."""
    result = service.logout(body.token)
    if not result.ok:
        return failure_response(result)
    return success_response(result.value.message)
