"""Pytest fixtures for the relay tests."""

import os
from collections.abc import Generator
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional

os.environ.setdefault("VAPID_PUBLIC_KEY", "test-public-key")
os.environ.setdefault("VAPID_PRIVATE_KEY", "test-private-key")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db, get_push_client
from app.db import models  # noqa: F401  # Imported for side effects
from app.db.base import Base
from app.db.models import NotificationLog, PushSubscription
from app.main import create_app
from app.utils.exceptions import PushDeliveryError, PushGoneError


class FakePushClient:
    """Records sends; endpoints listed in ``gone``/``failing`` raise."""

    def __init__(self) -> None:
        self.sent: List[Dict[str, Any]] = []
        self.gone: set[str] = set()
        self.failing: set[str] = set()

    def send(self, subscription_info: Dict[str, Any], payload: str) -> None:
        endpoint = subscription_info["endpoint"]
        if endpoint in self.gone:
            raise PushGoneError("Push subscription is gone", status_code=410)
        if endpoint in self.failing:
            raise PushDeliveryError("Push service rejected the message", status_code=500)
        self.sent.append({"endpoint": endpoint, "keys": subscription_info["keys"], "payload": payload})

    @property
    def endpoints(self) -> List[str]:
        return [item["endpoint"] for item in self.sent]


@pytest.fixture(scope="session")
def db_engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session(db_engine) -> Generator[Session, None, None]:
    TestingSessionLocal = sessionmaker(
        autocommit=False, autoflush=False, expire_on_commit=False, bind=db_engine
    )
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.rollback()
        db.query(NotificationLog).delete()
        db.query(PushSubscription).delete()
        db.commit()
        db.close()


@pytest.fixture()
def push_client() -> FakePushClient:
    return FakePushClient()


@pytest.fixture()
def client(db_session: Session, push_client: FakePushClient) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_get_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_push_client] = lambda: push_client
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def make_notification(db_session) -> Callable[..., NotificationLog]:
    base_time = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    counter = {"n": 0}

    def factory(
        title: str = "New inquiry",
        message: str = "Someone asked about admissions",
        notification_data: Optional[dict] = None,
        is_sent: bool = False,
        created_at: Optional[datetime] = None,
    ) -> NotificationLog:
        counter["n"] += 1
        notification = NotificationLog(
            title=title,
            message=message,
            notification_data=notification_data or {},
            is_sent=is_sent,
            created_at=created_at or base_time + timedelta(minutes=counter["n"]),
        )
        db_session.add(notification)
        db_session.commit()
        return notification

    return factory


@pytest.fixture()
def make_subscription(db_session) -> Callable[..., PushSubscription]:
    counter = {"n": 0}

    def factory(
        device_type: str = "user",
        is_active: bool = True,
        endpoint: Optional[str] = None,
    ) -> PushSubscription:
        counter["n"] += 1
        subscription = PushSubscription(
            endpoint=endpoint or f"https://push.example.com/send/{counter['n']}",
            p256dh=f"p256dh-{counter['n']}",
            auth=f"auth-{counter['n']}",
            device_type=device_type,
            is_active=is_active,
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(seconds=counter["n"]),
        )
        db_session.add(subscription)
        db_session.commit()
        return subscription

    return factory
