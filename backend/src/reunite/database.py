"""Engine and session management.

One engine per process, built from settings. Request handlers get a session
through the `get_db` dependency; workers and scripts use `session_scope()`.
"""

from contextlib import contextmanager
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from .config import get_settings


def build_engine(url: str) -> Engine:
    """Create an engine with pool settings suited to the backend.

    PostgreSQL gets a bounded pool with pre-ping; SQLite (local runs) only
    needs cross-thread access for the FastAPI threadpool.
    """
    options: Dict[str, Any] = {"echo": False}

    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}
    else:
        options.update(pool_pre_ping=True, pool_size=5, max_overflow=10)

    return create_engine(url, **options)


engine = build_engine(get_settings().DATABASE_URL)

SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)


@contextmanager
def session_scope() -> Generator[Session, None, None]:
    """Session that commits on success and rolls back on error."""
    session = SessionLocal()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a request-scoped session.

    Repositories commit their own writes; the session is only closed here.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_schema(bind: Optional[Engine] = None) -> None:
    """Create all tables directly from the models (local development only).

    Deployed databases are migrated with Alembic instead.
    """
    from .models import Base

    Base.metadata.create_all(bind=bind or engine)
