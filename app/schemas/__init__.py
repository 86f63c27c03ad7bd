"""Pydantic schemas package."""

from app.schemas.push import (
    PushSendRequest,
    PushSendResponse,
    PushSubscriptionCreate,
    PushSubscriptionRead,
    PushUnsubscribeRequest,
    SubscriptionKeys,
    VapidPublicKeyResponse,
)

__all__ = [
    "PushSendRequest",
    "PushSendResponse",
    "PushSubscriptionCreate",
    "PushSubscriptionRead",
    "PushUnsubscribeRequest",
    "SubscriptionKeys",
    "VapidPublicKeyResponse",
]
