"""Session management for database access."""

from __future__ import annotations

from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from packages.db.base import get_engine


def get_session_factory(engine: Engine | None = None) -> sessionmaker:
    """Return a session factory bound to ``engine`` (or the configured database)."""

    return sessionmaker(autocommit=False, autoflush=False, bind=engine or get_engine())
