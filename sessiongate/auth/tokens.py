"""JWT-based credential issuance and verification.

Access and renewal credentials share one HS256 signing key and one encoding.
They differ only in lifetime and in the ``refresh`` claim, which is present
(and true) on renewal credentials alone.

Decoding checks the signature and the presence of ``sub``/``iat``/``exp``.
Expiry is a separate predicate evaluated against the codec's clock, so an
expired but otherwise intact token still decodes.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Iterable, List, Optional

import jwt

from sessiongate.auth.results import MalformedCredentialError

Clock = Callable[[], datetime]

REFRESH_CLAIM = "refresh"
ROLES_CLAIM = "roles"

_DECODE_OPTIONS = {
    "verify_signature": True,
    "verify_exp": False,
    "verify_iat": False,
    "verify_nbf": False,
    "require": ["sub", "iat", "exp"],
}


def utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


class TokenCodec:
    """Stateless signer/verifier for access and renewal credentials."""

    def __init__(
        self,
        secret_key: str,
        *,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=24),
        refresh_ttl: timedelta = timedelta(days=7),
        clock: Clock = utcnow,
    ):
        if not secret_key:
            raise ValueError("secret_key is required")
        self._secret = secret_key
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.clock = clock

    @classmethod
    def from_settings(cls, clock: Clock = utcnow) -> "TokenCodec":
        from config.settings import settings

        return cls(
            settings.auth.secret_key,
            algorithm=settings.auth.algorithm,
            access_ttl=timedelta(minutes=settings.auth.access_token_expire_minutes),
            refresh_ttl=timedelta(days=settings.auth.refresh_token_expire_days),
            clock=clock,
        )

    # ------------------------------------------------------------------
    # Issuance
    # ------------------------------------------------------------------

    def _encode(self, subject: str, claims: Dict[str, Any], ttl: timedelta) -> str:
        now = self.clock()
        payload = dict(claims)
        payload.update({
            "sub": subject,
            "iat": now,
            "exp": now + ttl,
            "jti": uuid.uuid4().hex,
        })
        return jwt.encode(payload, self._secret, algorithm=self.algorithm)

    def issue_access(self, account_id: str, roles: Iterable[str]) -> str:
        """Sign a short-lived access credential for *account_id* carrying *roles*."""
        return self._encode(account_id, {ROLES_CLAIM: [str(r) for r in roles]}, self.access_ttl)

    def issue_renewal(self, account_id: str, extra_claims: Optional[Dict[str, Any]] = None) -> str:
        """Sign a long-lived renewal credential; always carries ``refresh: true``."""
        claims = dict(extra_claims or {})
        claims[REFRESH_CLAIM] = True
        return self._encode(account_id, claims, self.refresh_ttl)

    # ------------------------------------------------------------------
    # Verification
    # ------------------------------------------------------------------

    def decode(self, token: str) -> Dict[str, Any]:
        """Verify the signature and return the claims.

        Raises:
            MalformedCredentialError: bad signature, corrupt encoding or a
                missing ``sub``/``iat``/``exp`` claim.
        """
        if not token:
            raise MalformedCredentialError("empty token")
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self.algorithm],
                options=_DECODE_OPTIONS,
            )
        except jwt.InvalidTokenError as e:
            raise MalformedCredentialError(str(e)) from e
        if not isinstance(claims.get("sub"), str) or not claims["sub"]:
            raise MalformedCredentialError("subject claim is not a string")
        return claims

    def expires_at(self, token: str) -> datetime:
        exp = self.decode(token)["exp"]
        try:
            return datetime.fromtimestamp(int(exp), tz=timezone.utc)
        except (TypeError, ValueError, OverflowError) as e:
            raise MalformedCredentialError("expiry claim is not a timestamp") from e

    def is_expired(self, token: str) -> bool:
        """True when ``exp`` is at or before the current time.

        A token that does not decode raises ``MalformedCredentialError``
        rather than reporting a boolean.
        """
        return self.expires_at(token) <= self.clock()

    def is_renewal_token(self, token: str) -> bool:
        return bool(self.decode(token).get(REFRESH_CLAIM))

    def subject_of(self, token: str) -> str:
        return self.decode(token)["sub"]

    def roles_of(self, token: str) -> List[str]:
        roles = self.decode(token).get(ROLES_CLAIM) or []
        return [str(r) for r in roles] if isinstance(roles, list) else []

    def is_token_valid(self, token: str, account_id: str) -> bool:
        """Signature intact, not expired, and the subject is *account_id*."""
        try:
            return self.subject_of(token) == account_id and not self.is_expired(token)
        except MalformedCredentialError:
            return False
