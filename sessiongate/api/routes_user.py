"""
Role-gated endpoints: any signed-in user, and administrators only.
"""

from fastapi import APIRouter, Depends

from sessiongate.api.deps import require_capability
from sessiongate.api.responses import success_response
from sessiongate.auth.middleware import AuthContext
from sessiongate.auth.roles import Capability

router = APIRouter(prefix="/api/v1/user", tags=["user"])
admin_router = APIRouter(prefix="/api/v1/admin", tags=["admin"])


@router.post("/user")
def say_hello(identity: AuthContext = Depends(require_capability(Capability.USER_ACCESS))):
    return success_response("Hello from User Controller!", {"username": identity.username})


@admin_router.post("/test")
def admin_whoami(identity: AuthContext = Depends(require_capability(Capability.ADMIN_ACCESS))):
    """Return the calling administrator's account id."""
    return success_response("OK", {"id": identity.account_id})
