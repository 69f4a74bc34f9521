"""Celery application for background matching."""

from celery import Celery

from ..config import get_settings


def make_celery() -> Celery:
    settings = get_settings()
    app = Celery(
        "reunite",
        broker=settings.CELERY_BROKER_URL,
        backend=settings.CELERY_RESULT_BACKEND,
        include=["reunite.workers.match_item_worker"],
    )
    app.conf.update(
        task_track_started=True,
        task_serializer="json",
        result_serializer="json",
        accept_content=["json"],
    )
    return app


celery_app = make_celery()
