"""Tests for the pywebpush-backed delivery client."""
from __future__ import annotations

from types import SimpleNamespace
from unittest.mock import patch

import pytest
import requests
from pywebpush import WebPushException

from app.config import Settings
from app.services.push_client import WebPushClient
from app.utils.exceptions import PushDeliveryError, PushGoneError, PushNotConfiguredError

SUBSCRIPTION = {
    "endpoint": "https://push.example.com/send/1",
    "keys": {"p256dh": "p256dh", "auth": "auth"},
}


@pytest.fixture()
def web_push_client() -> WebPushClient:
    return WebPushClient(
        vapid_private_key="private",
        vapid_subject="mailto:ops@example.com",
        ttl=60,
        timeout=5.0,
    )


def test_send_passes_vapid_details(web_push_client):
    with patch("app.services.push_client.webpush") as webpush:
        web_push_client.send(SUBSCRIPTION, '{"title": "Hi"}')

    kwargs = webpush.call_args.kwargs
    assert kwargs["subscription_info"] == SUBSCRIPTION
    assert kwargs["data"] == '{"title": "Hi"}'
    assert kwargs["vapid_private_key"] == "private"
    assert kwargs["vapid_claims"] == {"sub": "mailto:ops@example.com"}
    assert kwargs["ttl"] == 60
    assert kwargs["timeout"] == 5.0


@pytest.mark.parametrize("status_code", [404, 410])
def test_gone_status_raises_push_gone(web_push_client, status_code):
    error = WebPushException("Push failed", response=SimpleNamespace(status_code=status_code))

    with patch("app.services.push_client.webpush", side_effect=error):
        with pytest.raises(PushGoneError) as excinfo:
            web_push_client.send(SUBSCRIPTION, "{}")

    assert excinfo.value.response_status == status_code


def test_other_status_is_transient(web_push_client):
    error = WebPushException("Push failed", response=SimpleNamespace(status_code=429))

    with patch("app.services.push_client.webpush", side_effect=error):
        with pytest.raises(PushDeliveryError) as excinfo:
            web_push_client.send(SUBSCRIPTION, "{}")

    assert not isinstance(excinfo.value, PushGoneError)
    assert excinfo.value.response_status == 429


def test_network_error_is_transient(web_push_client):
    with patch(
        "app.services.push_client.webpush",
        side_effect=requests.ConnectionError("connection reset"),
    ):
        with pytest.raises(PushDeliveryError) as excinfo:
            web_push_client.send(SUBSCRIPTION, "{}")

    assert excinfo.value.response_status is None


def test_gone_codes_are_configurable():
    client = WebPushClient(vapid_private_key="k", vapid_subject="mailto:a@b.c", gone_status_codes=(410,))
    error = WebPushException("Push failed", response=SimpleNamespace(status_code=404))

    with patch("app.services.push_client.webpush", side_effect=error):
        with pytest.raises(PushDeliveryError) as excinfo:
            client.send(SUBSCRIPTION, "{}")

    assert not isinstance(excinfo.value, PushGoneError)


def test_from_settings_requires_keys():
    config = Settings(VAPID_PUBLIC_KEY=None, VAPID_PRIVATE_KEY=None)

    with pytest.raises(PushNotConfiguredError):
        WebPushClient.from_settings(config)


def test_from_settings_copies_policy():
    config = Settings(
        VAPID_PUBLIC_KEY="pub",
        VAPID_PRIVATE_KEY="priv",
        VAPID_SUBJECT="mailto:x@example.com",
        PUSH_GONE_STATUS_CODES=[410],
        PUSH_TTL_SECONDS=120,
    )

    client = WebPushClient.from_settings(config)

    assert client.vapid_private_key == "priv"
    assert client.vapid_subject == "mailto:x@example.com"
    assert client.gone_status_codes == (410,)
    assert client.ttl == 120
