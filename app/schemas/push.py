"""Pydantic schemas for the push relay endpoints."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PushSendRequest(BaseModel):
    """Body accepted by the send trigger."""

    model_config = ConfigDict(populate_by_name=True)

    notification_id: Optional[UUID] = Field(None, alias="notificationId")
    send_all: bool = Field(False, alias="sendAll")
    type: Optional[str] = Field(None, description='"pending" is an alias for sendAll')

    @property
    def drain_pending(self) -> bool:
        return self.send_all or self.type == "pending"


class PushSendResponse(BaseModel):
    """Summary of one dispatch pass."""

    success: bool = True
    message: str
    sent: int = 0
    notifications: int = 0
    subscribers: int = 0
    failed: int = 0


class SubscriptionKeys(BaseModel):
    p256dh: str = Field(..., min_length=1, max_length=255, description="Encryption key")
    auth: str = Field(..., min_length=1, max_length=255, description="Auth secret")


class PushSubscriptionCreate(BaseModel):
    """PushSubscription.toJSON() from the browser, plus a device class."""

    model_config = ConfigDict(populate_by_name=True)

    endpoint: str = Field(..., min_length=1)
    keys: SubscriptionKeys
    device_type: str = Field("user", min_length=1, max_length=20, alias="deviceType")


class PushUnsubscribeRequest(BaseModel):
    endpoint: str = Field(..., min_length=1)


class PushSubscriptionRead(BaseModel):
    id: UUID
    endpoint: str
    device_type: str
    is_active: bool

    model_config = {"from_attributes": True}


class VapidPublicKeyResponse(BaseModel):
    public_key: str = Field(..., serialization_alias="publicKey")


__all__ = [
    "PushSendRequest",
    "PushSendResponse",
    "PushSubscriptionCreate",
    "PushSubscriptionRead",
    "PushUnsubscribeRequest",
    "SubscriptionKeys",
    "VapidPublicKeyResponse",
]
