"""
sessiongate.db: database engine, SQLModel models and repositories.

Usage:
    from sessiongate.db import get_engine, init_db
    from sessiongate.db.models import Account, RefreshToken
"""

from sessiongate.db.engine import get_engine, init_db

__all__ = ["get_engine", "init_db"]
