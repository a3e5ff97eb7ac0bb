"""
FastAPI dependencies: the session service and downstream authorization checks.
"""

from fastapi import HTTPException, Request

from sessiongate.auth.factory import build_auth_service
from sessiongate.auth.middleware import AuthContext, RequestAuthState
from sessiongate.auth.roles import Capability
from sessiongate.auth.service import AuthenticationService


def get_auth_service() -> AuthenticationService:
    """Dependency: session orchestrator bound to the application database."""
    return build_auth_service()


def get_auth_state(request: Request) -> RequestAuthState:
    state = getattr(request.state, "auth", None)
    return state if isinstance(state, RequestAuthState) else RequestAuthState()


def get_current_identity(request: Request) -> AuthContext:
    """Dependency: require an authenticated identity."""
    state = get_auth_state(request)
    if state.identity is None:
        raise HTTPException(
            status_code=403,
            detail="Access Denied",
            headers={"access_denied_reason": "authentication_required"},
        )
    return state.identity


def require_capability(capability: Capability):
    """Dependency factory: require an identity whose roles grant *capability*."""

    def _dependency(request: Request) -> AuthContext:
        identity = get_current_identity(request)
        if not identity.has(capability):
            raise HTTPException(
                status_code=403,
                detail="Access Denied",
                headers={"access_denied_reason": "not_authorized"},
            )
        return identity

    return _dependency
