"""Service wiring and FastAPI dependencies.

Builds the matching services on top of the SQLAlchemy repositories for one
database session. HTTP routes use the `get_*` dependencies; the Celery worker
calls the `build_*` functions with its own session.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from .config import get_settings
from .database import get_db
from .infrastructure.repositories import (
    ItemRepository,
    MatchRepository,
    RejectedPairRepository,
    UserStatsRepository,
)
from .matching.finder import MatchFinder
from .matching.lifecycle import MatchLifecycleService
from .matching.orchestrator import MatchOrchestrator
from .rejection.abuse_policy import AbusePolicy
from .rejection.service import RejectionService


def build_orchestrator(db: Session) -> MatchOrchestrator:
    settings = get_settings()
    return MatchOrchestrator(
        items=ItemRepository(db),
        matches=MatchRepository(db),
        blacklist=RejectedPairRepository(db),
        finder=MatchFinder(settings=settings),
    )


def build_rejection_service(db: Session) -> RejectionService:
    return RejectionService(
        items=ItemRepository(db),
        matches=MatchRepository(db),
        blacklist=RejectedPairRepository(db),
        stats=UserStatsRepository(db, AbusePolicy.from_settings(get_settings())),
    )


def build_lifecycle_service(db: Session) -> MatchLifecycleService:
    return MatchLifecycleService(
        items=ItemRepository(db),
        matches=MatchRepository(db),
        stats=UserStatsRepository(db, AbusePolicy.from_settings(get_settings())),
    )


def get_orchestrator(db: Session = Depends(get_db)) -> MatchOrchestrator:
    return build_orchestrator(db)


def get_rejection_service(db: Session = Depends(get_db)) -> RejectionService:
    return build_rejection_service(db)


def get_lifecycle_service(db: Session = Depends(get_db)) -> MatchLifecycleService:
    return build_lifecycle_service(db)
