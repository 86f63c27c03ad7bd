"""Web Push endpoints: subscription management and the send trigger."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header
from sqlalchemy.orm import Session

from app.api import deps
from app.config import settings
from app.schemas.push import (
    PushSendRequest,
    PushSendResponse,
    PushSubscriptionCreate,
    PushSubscriptionRead,
    PushUnsubscribeRequest,
    VapidPublicKeyResponse,
)
from app.services.dispatcher import DispatchRequest, NotificationDispatcher
from app.services.stores import SubscriptionStore
from app.utils.exceptions import PushNotConfiguredError

router = APIRouter(prefix="/push", tags=["push"])


@router.get("/vapid-public-key", response_model=VapidPublicKeyResponse)
def get_vapid_public_key() -> VapidPublicKeyResponse:
    if not settings.VAPID_PUBLIC_KEY:
        raise PushNotConfiguredError("VAPID_PUBLIC_KEY not configured")
    return VapidPublicKeyResponse(public_key=settings.VAPID_PUBLIC_KEY)


@router.post("/subscribe", response_model=PushSubscriptionRead)
def subscribe(
    subscription: PushSubscriptionCreate,
    user_agent: Optional[str] = Header(default=None),
    db: Session = Depends(deps.get_db),
) -> PushSubscriptionRead:
    """Register a browser endpoint, reactivating it if already known."""

    store = SubscriptionStore(db)
    record = store.upsert(
        endpoint=subscription.endpoint,
        p256dh=subscription.keys.p256dh,
        auth=subscription.keys.auth,
        device_type=subscription.device_type,
        user_agent=(user_agent or "")[:255] or None,
    )
    return PushSubscriptionRead.model_validate(record)


@router.post("/unsubscribe")
def unsubscribe(
    payload: PushUnsubscribeRequest,
    db: Session = Depends(deps.get_db),
) -> dict:
    found = SubscriptionStore(db).deactivate_endpoint(payload.endpoint)
    return {"status": "success", "found": found}


@router.post(
    "/send",
    response_model=PushSendResponse,
    dependencies=[Depends(deps.verify_relay_key)],
)
def send_notifications(
    payload: Optional[PushSendRequest] = None,
    dispatcher: NotificationDispatcher = Depends(deps.get_dispatcher),
) -> PushSendResponse:
    """Push one notification by id, or drain the pending queue."""

    request = DispatchRequest()
    if payload is not None:
        request = DispatchRequest(
            notification_id=payload.notification_id,
            send_all=payload.drain_pending,
        )

    summary = dispatcher.dispatch(request)
    return PushSendResponse(
        message=summary.message,
        sent=summary.sent,
        notifications=summary.notifications,
        subscribers=summary.subscribers,
        failed=summary.failed,
    )
