"""Celery tasks for draining the notification log."""
from __future__ import annotations

from typing import Any

from loguru import logger

from app.celery_app import celery_app
from app.config import settings
from app.db.session import SessionLocal
from app.services.pending_poller import PendingPoller, trigger_url_from_settings
from app.services.stores import NotificationLogStore


@celery_app.task(name="app.tasks.notifications.check_pending_notifications")
def check_pending_notifications() -> dict[str, Any]:
    """Trigger a drain through the send endpoint when anything is pending."""

    db = SessionLocal()
    try:
        poller = PendingPoller(
            notifications=NotificationLogStore(db),
            trigger_url=trigger_url_from_settings(settings),
            peek_limit=settings.PENDING_PEEK_LIMIT,
            timeout=settings.TRIGGER_TIMEOUT_SECONDS,
            api_key=settings.RELAY_API_KEY,
        )
        result = poller.check()
        if "checked" in result:
            logger.info("Pending notifications handed off", checked=result["checked"])
        return result
    finally:
        db.close()
