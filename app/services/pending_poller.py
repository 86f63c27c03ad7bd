"""Check the notification log and hand pending work to the send endpoint."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx
from loguru import logger

from app.config import Settings, settings
from app.services.stores import NotificationLogStore
from app.utils.exceptions import TriggerError


def trigger_url_from_settings(config: Settings = settings) -> str:
    return f"{str(config.SITE_URL).rstrip('/')}{config.API_V1_STR}/push/send"


@dataclass
class PendingPoller:
    """Peek for unsent notifications and, if any, ask the API to drain them.

    The poller keeps no state between runs; overlapping runs may both
    trigger a drain.
    """

    notifications: NotificationLogStore
    trigger_url: str
    peek_limit: int = 10
    timeout: float = 25.0
    api_key: Optional[str] = None
    transport: Optional[httpx.BaseTransport] = None

    def check(self) -> Dict[str, Any]:
        pending = self.notifications.pending_ids(self.peek_limit)
        if not pending:
            logger.info("No pending notifications")
            return {"message": "No pending notifications"}

        logger.info("Found pending notifications", count=len(pending))
        result = self.trigger()
        return {"success": True, "checked": len(pending), "result": result}

    def trigger(self) -> Dict[str, Any]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["X-Relay-Key"] = self.api_key

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.trigger_url, json={"sendAll": True}, headers=headers)
        except httpx.HTTPError as exc:
            raise TriggerError("Send endpoint unreachable", details=str(exc)) from exc

        try:
            body = response.json()
        except ValueError as exc:
            raise TriggerError(
                "Send endpoint returned a non-JSON body",
                details={"status": response.status_code, "body": response.text[:200]},
            ) from exc

        if response.status_code >= 400:
            logger.error("Send endpoint returned error", status=response.status_code, body=body)
        return body
