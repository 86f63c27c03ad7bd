"""Web Push delivery client built on pywebpush."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol, Tuple

import requests
from loguru import logger
from pywebpush import WebPushException, webpush

from app.config import Settings, settings
from app.utils.exceptions import PushDeliveryError, PushGoneError, PushNotConfiguredError


class PushClient(Protocol):
    """Anything able to deliver one serialized payload to one subscription."""

    def send(self, subscription_info: Dict[str, Any], payload: str) -> None:  # pragma: no cover - interface definition
        """Deliver ``payload`` or raise :class:`PushDeliveryError`."""


@dataclass
class WebPushClient:
    """Send VAPID-signed Web Push messages.

    A send either returns normally or raises :class:`PushGoneError` when the
    push service says the subscription no longer exists, and
    :class:`PushDeliveryError` for every other failure.
    """

    vapid_private_key: str
    vapid_subject: str
    ttl: int = 86400
    timeout: float = 12.0
    gone_status_codes: Tuple[int, ...] = field(default=(404, 410))

    @classmethod
    def from_settings(cls, config: Settings = settings) -> "WebPushClient":
        if not config.VAPID_PRIVATE_KEY or not config.VAPID_PUBLIC_KEY:
            raise PushNotConfiguredError("VAPID keys not configured")
        return cls(
            vapid_private_key=config.VAPID_PRIVATE_KEY,
            vapid_subject=config.VAPID_SUBJECT,
            ttl=config.PUSH_TTL_SECONDS,
            timeout=config.PUSH_TIMEOUT_SECONDS,
            gone_status_codes=tuple(config.PUSH_GONE_STATUS_CODES),
        )

    def send(self, subscription_info: Dict[str, Any], payload: str) -> None:
        endpoint = subscription_info.get("endpoint", "")
        try:
            webpush(
                subscription_info=subscription_info,
                data=payload,
                vapid_private_key=self.vapid_private_key,
                # webpush adds "aud" and "exp" to the claims dict it receives
                vapid_claims={"sub": self.vapid_subject},
                ttl=self.ttl,
                timeout=self.timeout,
            )
        except WebPushException as exc:
            status_code = _response_status(exc)
            if status_code in self.gone_status_codes:
                raise PushGoneError(
                    "Push subscription is gone", status_code=status_code, details=str(exc)
                ) from exc
            raise PushDeliveryError(
                "Push service rejected the message", status_code=status_code, details=str(exc)
            ) from exc
        except (requests.RequestException, ValueError) as exc:
            raise PushDeliveryError("Push send failed", details=str(exc)) from exc

        logger.debug("Web push sent", endpoint=endpoint[:50])


def _response_status(exc: WebPushException) -> Optional[int]:
    response = getattr(exc, "response", None)
    if response is None:
        return None
    return getattr(response, "status_code", None)
