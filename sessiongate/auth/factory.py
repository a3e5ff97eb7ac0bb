"""
Composition root for the session core.

Wires the codec, the durable stores and the password primitive together and
hands out only the service facade and the request authenticator.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.engine import Engine

from sessiongate.auth.middleware import RequestAuthenticator
from sessiongate.auth.password import BcryptPasswordHasher
from sessiongate.auth.refresh_store import RefreshTokenStore
from sessiongate.auth.service import AuthenticationService
from sessiongate.auth.tokens import Clock, TokenCodec, utcnow
from sessiongate.db.repositories import RefreshTokenRepository, SqlAccountStore


def build_auth_service(
    engine: Optional[Engine] = None,
    *,
    codec: Optional[TokenCodec] = None,
    hasher: Optional[BcryptPasswordHasher] = None,
    clock: Clock = utcnow,
) -> AuthenticationService:
    """Build the orchestrator over the SQL stores. *engine* defaults to the app engine."""
    return AuthenticationService(
        accounts=SqlAccountStore(engine),
        refresh_tokens=RefreshTokenStore(RefreshTokenRepository(engine), clock=clock),
        codec=codec or TokenCodec.from_settings(clock=clock),
        hasher=hasher or BcryptPasswordHasher(),
    )


def build_request_authenticator(
    engine: Optional[Engine] = None,
    *,
    codec: Optional[TokenCodec] = None,
    clock: Clock = utcnow,
) -> RequestAuthenticator:
    return RequestAuthenticator(
        codec=codec or TokenCodec.from_settings(clock=clock),
        accounts=SqlAccountStore(engine),
        refresh_tokens=RefreshTokenStore(RefreshTokenRepository(engine), clock=clock),
    )
