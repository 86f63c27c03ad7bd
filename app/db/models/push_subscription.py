"""Push Notification Subscription model."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from app.db.base import Base


class PushSubscription(Base):
    """Stores Web Push API subscription details for one browser or device."""

    __tablename__ = "push_subscriptions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    endpoint = Column(Text, nullable=False, unique=True)
    p256dh = Column(String(255), nullable=False)  # Encryption key
    auth = Column(String(255), nullable=False)  # Auth secret

    is_active = Column(Boolean, nullable=False, default=True, index=True)
    device_type = Column(String(20), nullable=False, default="user", index=True)
    user_agent = Column(String(255))

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
    )
    last_used = Column(DateTime(timezone=True))

    def subscription_info(self) -> dict:
        """Return the endpoint and keys in the shape pywebpush expects."""

        return {
            "endpoint": self.endpoint,
            "keys": {"p256dh": self.p256dh, "auth": self.auth},
        }
