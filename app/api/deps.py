"""Shared API dependencies."""
from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from app.config import settings
from app.db.session import SessionLocal
from app.services.dispatcher import NotificationDispatcher
from app.services.push_client import PushClient, WebPushClient
from app.services.stores import NotificationLogStore, SubscriptionStore
from app.utils.exceptions import AuthenticationError

_push_client_singleton: WebPushClient | None = None


def get_db() -> Session:
    """Yield a database session for request lifetime."""

    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_push_client() -> PushClient:
    """Return a cached Web Push client or raise if VAPID is not configured."""

    global _push_client_singleton
    if _push_client_singleton is None:
        _push_client_singleton = WebPushClient.from_settings(settings)
    return _push_client_singleton


def get_dispatcher(
    db: Session = Depends(get_db),
    push_client: PushClient = Depends(get_push_client),
) -> NotificationDispatcher:
    """Assemble the dispatcher with request-scoped stores."""

    return NotificationDispatcher(
        NotificationLogStore(db),
        SubscriptionStore(db),
        push_client,
        page_size=settings.PENDING_PAGE_SIZE,
        icon=settings.PUSH_ICON_PATH,
        badge=settings.PUSH_BADGE_PATH,
        admin_device_type=settings.ADMIN_DEVICE_TYPE,
    )


def verify_relay_key(x_relay_key: Optional[str] = Header(default=None)) -> None:
    """Require ``X-Relay-Key`` when a relay key is configured."""

    expected = settings.RELAY_API_KEY
    if not expected:
        return
    if not x_relay_key or not secrets.compare_digest(x_relay_key, expected):
        raise AuthenticationError("Invalid relay key")
