"""Service layer package."""

from app.services.dispatcher import NotificationDispatcher
from app.services.pending_poller import PendingPoller
from app.services.push_client import WebPushClient
from app.services.stores import NotificationLogStore, SubscriptionStore

__all__ = [
    "NotificationDispatcher",
    "NotificationLogStore",
    "PendingPoller",
    "SubscriptionStore",
    "WebPushClient",
]
