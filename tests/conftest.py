"""Shared fixtures: an in-memory reporting database."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

import packages.db.models  # noqa: F401  registers the reporting tables
from packages.db.base import Base
from packages.db.seed import seed_all

SEEDED_SALES = 60


@pytest.fixture
def engine():
    """Empty reporting schema on a single shared SQLite connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def seeded_sales() -> int:
    return SEEDED_SALES


@pytest.fixture
def seeded_engine(engine):
    """Reporting schema filled with deterministic fake data."""
    with Session(engine) as session:
        seed_all(session, sales_count=SEEDED_SALES, seed=7)
        session.commit()
    return engine
