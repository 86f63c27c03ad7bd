"""Drain the notification log into Web Push deliveries."""
from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence
from uuid import UUID

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from app.db.models.notification import NotificationLog
from app.db.models.push_subscription import PushSubscription
from app.services.push_client import PushClient
from app.services.stores import NotificationLogStore, SubscriptionStore
from app.utils.exceptions import (
    DatastoreError,
    InvalidRequestError,
    PushDeliveryError,
    PushGoneError,
)


DEFAULT_ICON = "/icons/icon-192x192.png"
DEFAULT_BADGE = "/icons/icon-96x96.png"


@dataclass(frozen=True)
class DispatchRequest:
    """Either one explicit notification or a drain of everything pending."""

    notification_id: Optional[UUID] = None
    send_all: bool = False


@dataclass(frozen=True)
class PlannedDelivery:
    notification: NotificationLog
    subscription: PushSubscription


class DeliveryOutcome(str, enum.Enum):
    SENT = "sent"
    GONE = "gone"
    FAILED = "failed"


@dataclass
class DispatchSummary:
    """Counters reported back to whoever triggered the pass."""

    message: str
    sent: int = 0
    notifications: int = 0
    subscribers: int = 0
    failed_subscriptions: List[UUID] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failed_subscriptions)


def targets_for(
    notification: NotificationLog,
    subscriptions: Sequence[PushSubscription],
    admin_device_type: str = "admin",
) -> List[PushSubscription]:
    """Return the subscriptions that should receive ``notification``."""

    if notification.admin_only:
        return [sub for sub in subscriptions if sub.device_type == admin_device_type]
    return list(subscriptions)


def plan_deliveries(
    notifications: Sequence[NotificationLog],
    subscriptions: Sequence[PushSubscription],
    admin_device_type: str = "admin",
) -> List[PlannedDelivery]:
    """Expand notifications x subscriptions into ordered delivery pairs.

    Pairs are grouped by notification in input order, so one notification's
    fan-out is complete before the next one starts.
    """

    return [
        PlannedDelivery(notification=notification, subscription=subscription)
        for notification in notifications
        for subscription in targets_for(notification, subscriptions, admin_device_type)
    ]


def build_payload(
    notification: NotificationLog,
    icon: str = DEFAULT_ICON,
    badge: str = DEFAULT_BADGE,
) -> Dict[str, Any]:
    """Return the JSON object the service worker receives."""

    return {
        "title": notification.title,
        "body": notification.message,
        "icon": icon,
        "badge": badge,
        "url": notification.click_url,
        "data": notification.notification_data or {},
    }


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class NotificationDispatcher:
    """Select notifications, fan them out to subscriptions, record outcomes."""

    def __init__(
        self,
        notifications: NotificationLogStore,
        subscriptions: SubscriptionStore,
        push_client: PushClient,
        *,
        page_size: int = 50,
        icon: str = DEFAULT_ICON,
        badge: str = DEFAULT_BADGE,
        admin_device_type: str = "admin",
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.notifications = notifications
        self.subscriptions = subscriptions
        self.push_client = push_client
        self.page_size = page_size
        self.icon = icon
        self.badge = badge
        self.admin_device_type = admin_device_type
        self.clock = clock

    def select_notifications(self, request: DispatchRequest) -> List[NotificationLog]:
        if request.notification_id is not None:
            notification = self.notifications.get(request.notification_id)
            if notification.is_sent:
                logger.info("Notification already sent", notification_id=str(notification.id))
                return []
            return [notification]
        if request.send_all:
            return self.notifications.list_pending(self.page_size)
        raise InvalidRequestError("Missing notificationId or sendAll")

    def dispatch(self, request: DispatchRequest) -> DispatchSummary:
        try:
            notifications = self.select_notifications(request)
            if not notifications:
                return DispatchSummary(message="No notifications to send")

            subscriptions = self.subscriptions.list_active()
        except SQLAlchemyError as exc:
            raise DatastoreError("Failed to send notifications", details=str(exc)) from exc

        if not subscriptions:
            logger.info("No active subscriptions", pending=len(notifications))
            return DispatchSummary(message="No active subscriptions")

        summary = DispatchSummary(
            message="Notifications sent successfully",
            notifications=len(notifications),
            subscribers=len(subscriptions),
        )
        fan_out: Dict[UUID, List[PlannedDelivery]] = {n.id: [] for n in notifications}
        for delivery in plan_deliveries(notifications, subscriptions, self.admin_device_type):
            fan_out[delivery.notification.id].append(delivery)

        for notification in notifications:
            payload = json.dumps(build_payload(notification, self.icon, self.badge))
            for delivery in fan_out[notification.id]:
                if not delivery.subscription.is_active:
                    # Deactivated earlier in this pass.
                    continue
                outcome = self.execute_delivery(delivery, payload)
                if outcome is DeliveryOutcome.SENT:
                    summary.sent += 1
                elif outcome is DeliveryOutcome.GONE:
                    summary.failed_subscriptions.append(delivery.subscription.id)
            self.notifications.mark_sent(notification)

        logger.info(
            "Dispatch pass completed",
            sent=summary.sent,
            notifications=summary.notifications,
            subscribers=summary.subscribers,
            deactivated=summary.failed,
        )
        return summary

    def execute_delivery(self, delivery: PlannedDelivery, payload: str) -> DeliveryOutcome:
        """Push one payload and apply the result to the subscription row."""

        subscription = delivery.subscription
        try:
            self.push_client.send(subscription.subscription_info(), payload)
        except PushGoneError as exc:
            logger.warning(
                "Deactivating gone subscription",
                subscription_id=str(subscription.id),
                status=exc.response_status,
            )
            self.subscriptions.deactivate(subscription)
            return DeliveryOutcome.GONE
        except PushDeliveryError as exc:
            logger.error(
                "Failed to send to subscription",
                subscription_id=str(subscription.id),
                notification_id=str(delivery.notification.id),
                status=exc.response_status,
                error=exc.message,
            )
            return DeliveryOutcome.FAILED

        self.subscriptions.touch(subscription, self.clock())
        return DeliveryOutcome.SENT
