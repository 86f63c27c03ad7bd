"""Notification log model."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from app.db.base import Base
from app.db.types import JSONDict


class NotificationLog(Base):
    """A notification raised by the application, waiting to be pushed."""

    __tablename__ = "notifications_log"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    # May carry ``url`` (click-through target) and ``admin_only``.
    notification_data = Column(JSONDict, nullable=False, default=dict)

    is_sent = Column(Boolean, nullable=False, default=False, index=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=func.now(),
        index=True,
    )

    @property
    def click_url(self) -> str:
        return (self.notification_data or {}).get("url") or "/"

    @property
    def admin_only(self) -> bool:
        return bool((self.notification_data or {}).get("admin_only"))
