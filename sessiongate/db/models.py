"""
SQLModel table definitions for accounts and their renewal credentials.

  - Timestamps are stored as ISO-8601 TEXT (UTC, timezone-qualified) so
    SQLite and PostgreSQL behave the same.
  - Status flags are INTEGER 0/1 columns.
  - Deleting an account cascades to its refresh tokens (delete-orphan).
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import Column, Index, Integer, Text
from sqlmodel import Field, Relationship, SQLModel


def _now_iso() -> str:
    return datetime.now(tz=timezone.utc).isoformat()


def _new_id() -> str:
    return str(uuid.uuid4())


class Account(SQLModel, table=True):
    __tablename__ = "accounts"

    id: str = Field(default_factory=_new_id, primary_key=True)
    username: str = Field(sa_column=Column(Text, nullable=False, unique=True))
    password_hash: str = Field(default="", sa_column=Column(Text, nullable=False, server_default=""))
    role: str = Field(default="USER", sa_column=Column(Text, nullable=False, server_default="USER"))
    enabled: int = Field(default=1, sa_column=Column(Integer, nullable=False, server_default="1"))
    account_non_expired: int = Field(default=1, sa_column=Column(Integer, nullable=False, server_default="1"))
    account_non_locked: int = Field(default=1, sa_column=Column(Integer, nullable=False, server_default="1"))
    credentials_non_expired: int = Field(default=1, sa_column=Column(Integer, nullable=False, server_default="1"))
    is_verified: int = Field(default=0, sa_column=Column(Integer, nullable=False, server_default="0"))
    created_at: str = Field(default_factory=_now_iso, sa_column=Column(Text, nullable=False))
    updated_at: str = Field(default_factory=_now_iso, sa_column=Column(Text, nullable=False))

    refresh_tokens: List["RefreshToken"] = Relationship(
        back_populates="account",
        sa_relationship_kwargs={"cascade": "all, delete-orphan"},
    )

    @property
    def is_usable(self) -> bool:
        """True when the account may authenticate (enabled, unlocked, unexpired)."""
        return bool(
            self.enabled
            and self.account_non_expired
            and self.account_non_locked
            and self.credentials_non_expired
        )


class RefreshToken(SQLModel, table=True):
    """A persisted renewal credential.

    The token string is unique across all accounts and never updated after
    insert. Rows are deleted on logout or when found expired during refresh.
    """

    __tablename__ = "refresh_tokens"
    __table_args__ = (
        Index("idx_refresh_tokens_account_id", "account_id"),
        Index("idx_refresh_tokens_expires_at", "expires_at"),
    )

    id: str = Field(default_factory=_new_id, primary_key=True)
    token: str = Field(sa_column=Column(Text, nullable=False, unique=True))
    account_id: str = Field(foreign_key="accounts.id")
    # ISO-8601 UTC timestamp copied from the JWT `exp` claim
    expires_at: str = Field(sa_column=Column(Text, nullable=False))
    created_at: str = Field(default_factory=_now_iso, sa_column=Column(Text, nullable=False))
    updated_at: str = Field(default_factory=_now_iso, sa_column=Column(Text, nullable=False))

    account: Optional[Account] = Relationship(back_populates="refresh_tokens")

    def get_expires_at(self) -> datetime:
        value = datetime.fromisoformat(self.expires_at)
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value
