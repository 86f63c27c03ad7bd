"""Row-level access to the notification log and the subscription table."""
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.db.models.notification import NotificationLog
from app.db.models.push_subscription import PushSubscription
from app.utils.exceptions import NotificationNotFoundError


class NotificationLogStore:
    """Reads pending notifications and records their delivery state."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, notification_id: UUID) -> NotificationLog:
        notification = self.db.get(NotificationLog, notification_id)
        if notification is None:
            raise NotificationNotFoundError(
                "Notification not found", details={"notificationId": str(notification_id)}
            )
        return notification

    def list_pending(self, limit: int) -> list[NotificationLog]:
        """Return up to ``limit`` unsent notifications, oldest first."""

        stmt = (
            select(NotificationLog)
            .where(NotificationLog.is_sent.is_(False))
            .order_by(NotificationLog.created_at.asc())
            .limit(limit)
        )
        return list(self.db.scalars(stmt).all())

    def pending_ids(self, limit: int) -> list[UUID]:
        stmt = select(NotificationLog.id).where(NotificationLog.is_sent.is_(False)).limit(limit)
        return list(self.db.scalars(stmt).all())

    def mark_sent(self, notification: NotificationLog) -> None:
        notification.is_sent = True
        self.db.commit()


class SubscriptionStore:
    """Reads active subscriptions and applies delivery outcomes to them."""

    def __init__(self, db: Session):
        self.db = db

    def list_active(self) -> list[PushSubscription]:
        stmt = (
            select(PushSubscription)
            .where(PushSubscription.is_active.is_(True))
            .order_by(PushSubscription.created_at.asc())
        )
        return list(self.db.scalars(stmt).all())

    def touch(self, subscription: PushSubscription, when: datetime) -> None:
        subscription.last_used = when
        self.db.commit()

    def deactivate(self, subscription: PushSubscription) -> None:
        subscription.is_active = False
        self.db.commit()

    def upsert(
        self,
        endpoint: str,
        p256dh: str,
        auth: str,
        device_type: str,
        user_agent: Optional[str] = None,
    ) -> PushSubscription:
        """Register an endpoint, or refresh and reactivate an existing one."""

        existing = self.db.scalars(
            select(PushSubscription).where(PushSubscription.endpoint == endpoint)
        ).first()
        if existing:
            existing.p256dh = p256dh
            existing.auth = auth
            existing.device_type = device_type
            existing.user_agent = user_agent
            existing.is_active = True
            subscription = existing
        else:
            subscription = PushSubscription(
                endpoint=endpoint,
                p256dh=p256dh,
                auth=auth,
                device_type=device_type,
                user_agent=user_agent,
                is_active=True,
            )
            self.db.add(subscription)

        self.db.commit()
        logger.info(
            "Push subscription registered",
            subscription_id=str(subscription.id),
            device_type=device_type,
            reactivated=existing is not None,
        )
        return subscription

    def deactivate_endpoint(self, endpoint: str) -> bool:
        subscription = self.db.scalars(
            select(PushSubscription).where(PushSubscription.endpoint == endpoint)
        ).first()
        if subscription is None:
            return False
        self.deactivate(subscription)
        return True
