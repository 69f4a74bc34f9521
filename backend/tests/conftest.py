"""Pytest fixtures for the matching engine.

Provides reusable test fixtures for:
- In-memory SQLite session with all tables created per test
- Item factories (ORM rows and plain ItemProfile snapshots)
- FastAPI test client bound to the test session

Usage:
    def test_reject(client, make_item):
        lost = make_item("lost", item_name="Black Wallet")
"""

import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator
from uuid import uuid4

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

from reunite.database import get_db as database_get_db
from reunite.matching.ports import ItemProfile
from reunite.models import Base, Item

# One shared in-memory database for the whole session
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)


# pysqlite opens transactions lazily and breaks SAVEPOINT; let SQLAlchemy emit BEGIN itself
@event.listens_for(test_engine, "connect")
def _disable_pysqlite_transactions(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(test_engine, "begin")
def _emit_begin(conn):
    conn.exec_driver_sql("BEGIN")


TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

EVENT_DAY = datetime(2024, 3, 14, 10, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=test_engine)

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


def _item_fields(item_type: str, **overrides) -> dict:
    fields = {
        "item_type": item_type,
        "user_id": uuid4(),
        "community": "north-campus",
        "item_name": "Black Samsung Phone",
        "category": "Phone",
        "description": "black samsung phone with cracked screen",
        "location": "Library",
        "event_at": EVENT_DAY,
    }
    fields.update(overrides)
    return fields


@pytest.fixture
def make_item(db_session: Session):
    """Factory persisting an Item row and returning it.

    Defaults describe a black Samsung phone lost/found at the library.
    """
    def _make(item_type: str = "lost", **overrides) -> Item:
        item = Item(**_item_fields(item_type, **overrides))
        db_session.add(item)
        db_session.commit()
        db_session.refresh(item)
        return item

    return _make


@pytest.fixture
def make_profile():
    """Factory building an in-memory ItemProfile (no database)."""
    def _make(item_type: str = "lost", **overrides) -> ItemProfile:
        fields = _item_fields(item_type, **overrides)
        fields.setdefault("id", uuid4())
        return ItemProfile(**fields)

    return _make


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """FastAPI test client using the test database session."""
    from reunite.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[database_get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()
