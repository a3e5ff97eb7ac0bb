"""
Per-request credential verification.

``RequestAuthenticator`` turns an ``Authorization`` header into an
``AuthContext`` (or a failure); ``AuthenticationMiddleware`` runs it before
route dispatch and stores the outcome on ``request.state.auth``.

An access credential is accepted only while its account still holds an
unexpired renewal credential, so logout also stops verification of access
credentials issued earlier in that session. Apart from a renewal credential
presented as an access credential (rejected with 401 on the spot), failures
never short-circuit the request: authorization is decided downstream.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, FrozenSet, Optional, Tuple

from starlette.concurrency import run_in_threadpool
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from sessiongate.auth.refresh_store import RefreshTokenStore
from sessiongate.auth.results import AuthFailure, Err, MalformedCredentialError, Ok, Result
from sessiongate.auth.roles import Capability, Role
from sessiongate.auth.service import AccountStore
from sessiongate.auth.tokens import TokenCodec
from sessiongate.log import get_logger
from sessiongate.observability import metrics

logger = get_logger(__name__)

BEARER_PREFIX = "Bearer "


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        return None
    return authorization[len(BEARER_PREFIX):].strip() or None


@dataclass(frozen=True)
class AuthContext:
    """The authenticated identity of one request."""

    account_id: str
    username: str
    roles: Tuple[Role, ...]

    @property
    def role(self) -> Optional[Role]:
        return self.roles[0] if self.roles else None

    @property
    def capabilities(self) -> FrozenSet[Capability]:
        caps: set = set()
        for role in self.roles:
            caps |= role.capabilities
        return frozenset(caps)

    def has(self, capability: Capability) -> bool:
        return capability in self.capabilities


@dataclass
class RequestAuthState:
    identity: Optional[AuthContext] = None
    failure: Optional[Err] = field(default=None)

    @property
    def authenticated(self) -> bool:
        return self.identity is not None


def _parse_roles(claims) -> Tuple[Role, ...]:
    roles = []
    for value in claims:
        try:
            roles.append(Role.parse(value))
        except ValueError:
            logger.warning("ignoring unknown role claim %r", value)
    return tuple(roles)


class RequestAuthenticator:
    def __init__(self, codec: TokenCodec, accounts: AccountStore, refresh_tokens: RefreshTokenStore):
        self.codec = codec
        self.accounts = accounts
        self.refresh_tokens = refresh_tokens

    def authenticate(
        self,
        authorization: Optional[str],
        current: Optional[AuthContext] = None,
    ) -> Result[Optional[AuthContext]]:
        """Resolve the identity carried by *authorization*.

        Returns ``Ok(None)`` for anonymous requests, ``Ok(current)`` when an
        identity was already established, ``Ok(AuthContext)`` on success and
        ``Err`` otherwise.
        """
        token = extract_bearer_token(authorization)
        if token is None:
            return Ok(None)

        try:
            if self.codec.is_renewal_token(token):
                return Err(AuthFailure.RENEWAL_TOKEN_REJECTED, "Refresh token cannot be used as access token")
            account_id = self.codec.subject_of(token)
        except MalformedCredentialError:
            return Err(AuthFailure.MALFORMED_CREDENTIAL, "Malformed token")

        if current is not None:
            return Ok(current)

        account = self.accounts.find_by_id(account_id)
        if account is None:
            return Err(AuthFailure.UNKNOWN_ACCOUNT, "Unknown account")

        if not self.codec.is_token_valid(token, account.id) or not account.is_usable:
            return Err(AuthFailure.ACCESS_TOKEN_INVALID, "Access token expired or invalid")

        if self.refresh_tokens.find_live_by_account(account.id) is None:
            return Err(AuthFailure.REFRESH_TOKEN_NOT_FOUND, "Session has ended")

        return Ok(AuthContext(
            account_id=account.id,
            username=account.username,
            roles=_parse_roles(self.codec.roles_of(token)),
        ))


class AuthenticationMiddleware(BaseHTTPMiddleware):
    """Establishes ``request.state.auth`` before route dispatch."""

    def __init__(self, app, authenticator_factory: Optional[Callable[[], RequestAuthenticator]] = None):
        super().__init__(app)
        if authenticator_factory is None:
            from sessiongate.auth.factory import build_request_authenticator
            authenticator_factory = build_request_authenticator
        self._authenticator_factory = authenticator_factory

    async def dispatch(self, request: Request, call_next):
        existing = getattr(request.state, "auth", None)
        current = existing.identity if isinstance(existing, RequestAuthState) else None

        authenticator = self._authenticator_factory()
        result = await run_in_threadpool(
            authenticator.authenticate, request.headers.get("Authorization"), current
        )

        if result.ok:
            state = RequestAuthState(identity=result.value)
            outcome = "authenticated" if result.value is not None else "anonymous"
        else:
            state = RequestAuthState(failure=result)
            outcome = result.failure.value
            logger.info("request credential rejected on %s: %s", request.url.path, outcome)
        metrics.request_auth_total.labels(outcome=outcome).inc()

        if not result.ok and result.failure is AuthFailure.RENEWAL_TOKEN_REJECTED:
            from sessiongate.api.responses import error_response
            return error_response("Unauthorized", 401)

        request.state.auth = state
        return await call_next(request)
