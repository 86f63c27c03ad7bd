"""Database models package."""
from app.db.models.notification import NotificationLog
from app.db.models.push_subscription import PushSubscription

__all__ = [
    "NotificationLog",
    "PushSubscription",
]
