"""Lifecycle policy for persisted renewal credentials.

Rules enforced here, on top of the plain repository:
  - a token string is inserted once and never modified; a second insert of
    the same string is reported as ``DUPLICATE_TOKEN``;
  - with ``single_session`` on, creating a credential removes every other
    credential of the same account in the same transaction;
  - an expired credential is never handed out as usable; callers that detect
    expiry delete the row.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy.exc import IntegrityError

from sessiongate.auth.results import AuthFailure, Err, Ok, Result
from sessiongate.auth.tokens import Clock, utcnow
from sessiongate.db.models import RefreshToken
from sessiongate.db.repositories import RefreshTokenRepository, to_iso
from sessiongate.log import get_logger

logger = get_logger(__name__)


class RefreshTokenStore:
    def __init__(
        self,
        repository: Optional[RefreshTokenRepository] = None,
        *,
        single_session: Optional[bool] = None,
        clock: Clock = utcnow,
    ):
        if single_session is None:
            from config.settings import settings
            single_session = settings.auth.single_session
        self.repository = repository or RefreshTokenRepository()
        self.single_session = single_session
        self.clock = clock

    def create(self, account_id: str, token: str, expires_at: datetime) -> Result[RefreshToken]:
        now_iso = to_iso(self.clock(), timespec="microseconds")
        row = RefreshToken(
            account_id=account_id,
            token=token,
            expires_at=to_iso(expires_at),
            created_at=now_iso,
            updated_at=now_iso,
        )
        try:
            stored = self.repository.insert(row, replace_for_account=self.single_session)
        except IntegrityError:
            logger.warning("refresh token insert rejected as duplicate (account_id=%s)", account_id)
            return Err(AuthFailure.DUPLICATE_TOKEN, "Refresh token already exists")
        return Ok(stored)

    def find_by_account(self, account_id: str) -> Optional[RefreshToken]:
        if not account_id:
            return None
        return self.repository.find_by_account_id(account_id)

    def find_by_token(self, token: str) -> Optional[RefreshToken]:
        if not token:
            return None
        return self.repository.find_by_token(token)

    def delete(self, credential: RefreshToken) -> None:
        """Remove *credential*; deleting an already-removed row is a no-op."""
        if self.repository.delete(credential.id):
            logger.info("refresh token deleted (account_id=%s)", credential.account_id)

    def is_expired(self, credential: RefreshToken) -> bool:
        return credential.get_expires_at() <= self.clock()

    def find_live_by_account(self, account_id: str) -> Optional[RefreshToken]:
        """An unexpired credential of the account, if any; never mutates."""
        if not account_id:
            return None
        return self.repository.find_unexpired_by_account_id(account_id, self.clock())

    def purge_expired(self) -> int:
        """Delete every credential whose expiry has passed. Returns the row count."""
        return self.repository.delete_expired(self.clock())
