"""
Centralized SQLAlchemy/SQLModel engine.

All repositories resolve the engine through `get_engine()` at call time.
The database URL comes from the SESSIONGATE_DATABASE_URL environment
variable or config/app_config.json, so moving to PostgreSQL is a single
configuration change.
"""

from __future__ import annotations

import os
from pathlib import Path
from sqlalchemy import event
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

_engine: Engine | None = None


def _resolve_db_url() -> str:
    """
    Resolve database URL with precedence:
    1. SESSIONGATE_DATABASE_URL environment variable
    2. database.url from config/app_config(.local).json
    3. Fallback: sqlite:///data/sessiongate.db
    """
    env_url = os.environ.get("SESSIONGATE_DATABASE_URL")
    if env_url:
        return env_url

    from config.settings import settings
    return settings.database.url or "sqlite:///data/sessiongate.db"


def _make_absolute_sqlite_url(url: str) -> str:
    """
    Resolve relative sqlite:/// paths against the project root so the DB
    lands in <project_root>/data regardless of cwd.
    """
    if not url.startswith("sqlite:///"):
        return url
    rel_path = url[len("sqlite:///"):]
    if not rel_path or rel_path == ":memory:" or os.path.isabs(rel_path):
        return url
    root = Path(__file__).resolve().parents[2]
    abs_path = (root / rel_path).resolve()
    abs_path.parent.mkdir(parents=True, exist_ok=True)
    return f"sqlite:///{abs_path}"


def _install_sqlite_pragmas(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _set_sqlite_pragmas(dbapi_conn, _connection_record):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA synchronous=NORMAL")
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA busy_timeout=30000")
        cursor.close()


def get_engine() -> Engine:
    """Return the singleton SQLAlchemy engine, creating it on first call."""
    global _engine
    if _engine is not None:
        return _engine

    db_url = _make_absolute_sqlite_url(_resolve_db_url())

    is_sqlite = db_url.startswith("sqlite")
    connect_args = {"check_same_thread": False, "timeout": 30} if is_sqlite else {}

    _engine = create_engine(
        db_url,
        echo=False,
        connect_args=connect_args,
        pool_pre_ping=True,
    )

    if is_sqlite:
        _install_sqlite_pragmas(_engine)

    return _engine


def init_db(engine: Engine | None = None) -> None:
    """
    Create all tables that are not yet present.
    Called once at application startup. In production the Alembic migration
    already handles table creation; this is a safety net for tests and fresh installs.
    """
    from sessiongate.db import models as _models  # noqa: F401 - ensure all models are registered
    SQLModel.metadata.create_all(engine or get_engine())
