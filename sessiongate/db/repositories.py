"""
Durable stores for accounts and renewal credentials.

Plain persistence mechanics only (insert / find / delete by key). Lifecycle
rules for renewal credentials live in ``sessiongate.auth.refresh_store``.
Returned rows are detached from their session with all columns loaded.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from sessiongate.db.engine import get_engine
from sessiongate.db.models import Account, RefreshToken


def to_iso(value: datetime, timespec: str = "seconds") -> str:
    """UTC ISO-8601, the on-disk timestamp format. Expiries use whole seconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec=timespec)


class _EngineBound:
    def __init__(self, engine: Optional[Engine] = None):
        self._engine = engine

    @property
    def engine(self) -> Engine:
        return self._engine or get_engine()


class SqlAccountStore(_EngineBound):
    """Account CRUD by id and by username."""

    def exists_by_username(self, username: str) -> bool:
        return self.find_by_username(username) is not None

    def find_by_username(self, username: str) -> Optional[Account]:
        if not username:
            return None
        with Session(self.engine) as session:
            return session.exec(select(Account).where(Account.username == username)).first()

    def find_by_id(self, account_id: str) -> Optional[Account]:
        if not account_id:
            return None
        with Session(self.engine) as session:
            return session.get(Account, account_id)

    def save(self, account: Account) -> Account:
        """Insert or update. Raises ``sqlalchemy.exc.IntegrityError`` on a duplicate username."""
        account.updated_at = to_iso(datetime.now(tz=timezone.utc))
        with Session(self.engine) as session:
            account = session.merge(account)
            session.commit()
            session.refresh(account)
        return account

    def list_accounts(self) -> List[Account]:
        with Session(self.engine) as session:
            return list(session.exec(select(Account).order_by(Account.created_at)).all())


class RefreshTokenRepository(_EngineBound):
    """Rows of ``refresh_tokens``; uniqueness is enforced on the token column."""

    def insert(self, row: RefreshToken, *, replace_for_account: bool = False) -> RefreshToken:
        """Insert *row* in one transaction, optionally removing the account's other rows first.

        Raises ``sqlalchemy.exc.IntegrityError`` if the token already exists.
        """
        with Session(self.engine) as session:
            if replace_for_account:
                existing = session.exec(
                    select(RefreshToken).where(RefreshToken.account_id == row.account_id)
                ).all()
                for old in existing:
                    session.delete(old)
                session.flush()
            session.add(row)
            session.commit()
            session.refresh(row)
        return row

    def find_by_account_id(self, account_id: str) -> Optional[RefreshToken]:
        """Newest row for the account, or None.

        Rows created in the same instant are ordered by later expiry, then id.
        """
        with Session(self.engine) as session:
            stmt = (
                select(RefreshToken)
                .where(RefreshToken.account_id == account_id)
                .order_by(
                    RefreshToken.created_at.desc(),
                    RefreshToken.expires_at.desc(),
                    RefreshToken.id.desc(),
                )
            )
            return session.exec(stmt).first()

    def find_unexpired_by_account_id(self, account_id: str, now: datetime) -> Optional[RefreshToken]:
        """Any row of the account expiring after *now*, latest expiry first."""
        with Session(self.engine) as session:
            stmt = (
                select(RefreshToken)
                .where(RefreshToken.account_id == account_id)
                .where(RefreshToken.expires_at > to_iso(now))
                .order_by(RefreshToken.expires_at.desc(), RefreshToken.id.desc())
            )
            return session.exec(stmt).first()

    def find_by_token(self, token: str) -> Optional[RefreshToken]:
        with Session(self.engine) as session:
            return session.exec(select(RefreshToken).where(RefreshToken.token == token)).first()

    def delete(self, row_id: str) -> bool:
        """Delete by primary key; returns False when the row was already gone."""
        with Session(self.engine) as session:
            row = session.get(RefreshToken, row_id)
            if row is None:
                return False
            session.delete(row)
            session.commit()
        return True

    def delete_expired(self, now: datetime) -> int:
        """Delete rows whose expiry is at or before *now*."""
        cutoff = to_iso(now)
        with Session(self.engine) as session:
            rows = session.exec(select(RefreshToken).where(RefreshToken.expires_at <= cutoff)).all()
            count = len(rows)
            for row in rows:
                session.delete(row)
            session.commit()
        return count
