# Auth: credential codec, renewal credential policy, session orchestration, request verification
from sessiongate.auth.results import AuthFailure, Err, MalformedCredentialError, Ok, Result
from sessiongate.auth.roles import Capability, Role
from sessiongate.auth.password import BcryptPasswordHasher, hash_password, verify_password
from sessiongate.auth.tokens import TokenCodec
from sessiongate.auth.refresh_store import RefreshTokenStore
from sessiongate.auth.service import (
    AccountSummary,
    AuthenticationService,
    LoginResult,
    LogoutResult,
    RefreshResult,
)
from sessiongate.auth.middleware import (
    AuthContext,
    AuthenticationMiddleware,
    RequestAuthenticator,
    RequestAuthState,
)
from sessiongate.auth.factory import build_auth_service, build_request_authenticator

__all__ = [
    "AuthFailure",
    "Err",
    "MalformedCredentialError",
    "Ok",
    "Result",
    "Capability",
    "Role",
    "BcryptPasswordHasher",
    "hash_password",
    "verify_password",
    "TokenCodec",
    "RefreshTokenStore",
    "AccountSummary",
    "AuthenticationService",
    "LoginResult",
    "LogoutResult",
    "RefreshResult",
    "AuthContext",
    "AuthenticationMiddleware",
    "RequestAuthenticator",
    "RequestAuthState",
    "build_auth_service",
    "build_request_authenticator",
]
