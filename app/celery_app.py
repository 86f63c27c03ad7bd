"""Celery application instance and configuration."""
from __future__ import annotations

from celery import Celery
from celery.signals import setup_logging as celery_setup_logging

from app.config import settings
from app.core.logging import setup_logging


def _resolve_broker_url() -> str:
    if settings.CELERY_BROKER_URL is not None:
        return str(settings.CELERY_BROKER_URL)
    return str(settings.REDIS_URL)


def _resolve_result_backend() -> str:
    if settings.CELERY_RESULT_BACKEND is not None:
        return str(settings.CELERY_RESULT_BACKEND)
    return str(settings.REDIS_URL)


celery_app = Celery(
    "push_relay",
    broker=_resolve_broker_url(),
    backend=_resolve_result_backend(),
    include=["app.tasks.notifications"],
)

celery_app.conf.update(
    task_serializer="json",
    accept_content=["json"],
    result_serializer="json",
    timezone="UTC",
    enable_utc=True,
    task_track_started=True,
    task_time_limit=5 * 60,
    task_soft_time_limit=4 * 60,
    worker_prefetch_multiplier=1,
    worker_max_tasks_per_child=1000,
)

celery_app.conf.beat_schedule = {
    "check-pending-notifications": {
        "task": "app.tasks.notifications.check_pending_notifications",
        "schedule": settings.PENDING_POLL_INTERVAL_SECONDS,
        # A missed tick is covered by the next one.
        "options": {"expires": settings.PENDING_POLL_INTERVAL_SECONDS},
    },
}


@celery_setup_logging.connect
def _configure_worker_logging(**_kwargs) -> None:
    setup_logging(settings.LOG_LEVEL)


__all__ = ["celery_app"]
