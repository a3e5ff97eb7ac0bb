"""
Session orchestration: register, login, refresh, logout.

The service owns no state of its own. Accounts live in an ``AccountStore``,
renewal credentials in the ``RefreshTokenStore``, and access credentials are
never persisted. Each mutating operation is one store transaction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Protocol

from sqlalchemy.exc import IntegrityError

from sessiongate.auth.refresh_store import RefreshTokenStore
from sessiongate.auth.results import AuthFailure, Err, MalformedCredentialError, Ok, Result
from sessiongate.auth.roles import Role
from sessiongate.auth.tokens import TokenCodec
from sessiongate.db.models import Account
from sessiongate.log import get_logger
from sessiongate.observability import metrics

logger = get_logger(__name__)

INVALID_CREDENTIALS_MESSAGE = "Invalid credentials"
INVALID_REFRESH_TOKEN_MESSAGE = "Invalid refresh token"


class AccountStore(Protocol):
    def exists_by_username(self, username: str) -> bool: ...

    def find_by_username(self, username: str) -> Optional[Account]: ...

    def find_by_id(self, account_id: str) -> Optional[Account]: ...

    def save(self, account: Account) -> Account: ...


class PasswordHasher(Protocol):
    def hash(self, plain: str) -> str: ...

    def verify(self, plain: str, hashed: str) -> bool: ...

    def dummy_verify(self, plain: str) -> bool: ...


@dataclass(frozen=True)
class AccountSummary:
    id: str
    username: str
    role: str
    enabled: bool
    account_non_expired: bool
    account_non_locked: bool
    credentials_non_expired: bool

    @classmethod
    def from_account(cls, account: Account) -> "AccountSummary":
        return cls(
            id=account.id,
            username=account.username,
            role=account.role,
            enabled=bool(account.enabled),
            account_non_expired=bool(account.account_non_expired),
            account_non_locked=bool(account.account_non_locked),
            credentials_non_expired=bool(account.credentials_non_expired),
        )


@dataclass(frozen=True)
class LoginResult:
    access_token: str
    refresh_token: str
    account_id: str


@dataclass(frozen=True)
class RefreshResult:
    access_token: str


@dataclass(frozen=True)
class LogoutResult:
    message: str = "Successfully logout"


def role_claims(account: Account) -> List[str]:
    return [Role.parse(account.role).value]


class AuthenticationService:
    """Drives an account through registration, login, refresh and logout."""

    def __init__(
        self,
        accounts: AccountStore,
        refresh_tokens: RefreshTokenStore,
        codec: TokenCodec,
        hasher: PasswordHasher,
    ):
        self.accounts = accounts
        self.refresh_tokens = refresh_tokens
        self.codec = codec
        self.hasher = hasher

    def register(self, username: str, password: str, role: "Role | str") -> Result[AccountSummary]:
        """Create an account. No credential is issued at registration."""
        role = Role.parse(role)
        if self.accounts.exists_by_username(username):
            metrics.auth_events_total.labels(operation="register", outcome="username_taken").inc()
            return Err(AuthFailure.USERNAME_TAKEN, f"Username already exists: {username}")

        account = Account(
            username=username,
            password_hash=self.hasher.hash(password),
            role=role.value,
        )
        try:
            account = self.accounts.save(account)
        except IntegrityError:
            # lost a race against a concurrent registration of the same name
            metrics.auth_events_total.labels(operation="register", outcome="username_taken").inc()
            return Err(AuthFailure.USERNAME_TAKEN, f"Username already exists: {username}")

        logger.info("registered account %s (role=%s)", account.id, account.role)
        metrics.auth_events_total.labels(operation="register", outcome="success").inc()
        return Ok(AccountSummary.from_account(account))

    def login(self, username: str, password: str) -> Result[LoginResult]:
        """Check the password and issue an access + renewal credential pair.

        An unknown username, a wrong password and an unusable account all
        produce the same ``INVALID_CREDENTIALS`` error.
        """
        account = self.accounts.find_by_username(username)
        if account is None:
            self.hasher.dummy_verify(password)
            return self._login_failed()
        if not self.hasher.verify(password, account.password_hash) or not account.is_usable:
            return self._login_failed()

        access_token = self.codec.issue_access(account.id, role_claims(account))
        refresh_token = self.codec.issue_renewal(account.id)
        created = self.refresh_tokens.create(
            account.id, refresh_token, self.codec.expires_at(refresh_token)
        )
        if not created.ok:
            metrics.auth_events_total.labels(operation="login", outcome=created.failure.value).inc()
            return created

        logger.info("login succeeded for account %s", account.id)
        metrics.auth_events_total.labels(operation="login", outcome="success").inc()
        return Ok(LoginResult(
            access_token=access_token,
            refresh_token=refresh_token,
            account_id=account.id,
        ))

    def _login_failed(self) -> Err:
        metrics.auth_events_total.labels(operation="login", outcome="invalid_credentials").inc()
        return Err(AuthFailure.INVALID_CREDENTIALS, INVALID_CREDENTIALS_MESSAGE)

    def refresh(self, token: str) -> Result[RefreshResult]:
        """Mint a new access credential from a stored renewal credential.

        Only a stored row holding exactly *token* can authorize a refresh, so a
        credential revoked by logout or by a later login is dead even while the
        account has another live one, and an access credential never matches.
        The new credential is bound to the stored row's account. The renewal
        credential is not rotated. An expired row is deleted before
        ``TOKEN_INVALID`` is returned.
        """
        try:
            account_id = self.codec.subject_of(token)
        except MalformedCredentialError:
            return self._refresh_failed(AuthFailure.REFRESH_TOKEN_NOT_FOUND)

        stored = self.refresh_tokens.find_by_token(token)
        if stored is None or stored.account_id != account_id:
            return self._refresh_failed(AuthFailure.REFRESH_TOKEN_NOT_FOUND)

        if self.refresh_tokens.is_expired(stored):
            self.refresh_tokens.delete(stored)
            logger.info("expired refresh token removed for account %s", stored.account_id)
            return self._refresh_failed(AuthFailure.TOKEN_INVALID)

        account = self.accounts.find_by_id(stored.account_id)
        if account is None:
            return self._refresh_failed(AuthFailure.UNKNOWN_ACCOUNT)

        access_token = self.codec.issue_access(account.id, role_claims(account))
        metrics.auth_events_total.labels(operation="refresh", outcome="success").inc()
        return Ok(RefreshResult(access_token=access_token))

    def _refresh_failed(self, failure: AuthFailure) -> Err:
        metrics.auth_events_total.labels(operation="refresh", outcome=failure.value).inc()
        return Err(failure, INVALID_REFRESH_TOKEN_MESSAGE)

    def logout(self, token: str) -> Result[LogoutResult]:
        """Delete the renewal credential matching *token* exactly.

        Access credentials already issued stay valid until their own expiry,
        but the request authenticator stops accepting them once the renewal
        credential is gone.
        """
        stored = self.refresh_tokens.find_by_token(token)
        if stored is None:
            metrics.auth_events_total.labels(operation="logout", outcome="refresh_token_not_found").inc()
            return Err(AuthFailure.REFRESH_TOKEN_NOT_FOUND, INVALID_REFRESH_TOKEN_MESSAGE)

        self.refresh_tokens.delete(stored)
        logger.info("logout for account %s", stored.account_id)
        metrics.auth_events_total.labels(operation="logout", outcome="success").inc()
        return Ok(LogoutResult())
