"""Custom exception classes and error handling utilities."""
from typing import Any, Dict, Optional

from fastapi import Request, status
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException


class RelayError(Exception):
    """Base exception for the application."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, details: Any = None):
        self.message = message
        self.details = details
        super().__init__(message)


class InvalidRequestError(RelayError):
    """Required request input is missing or malformed."""

    status_code = status.HTTP_400_BAD_REQUEST


class AuthenticationError(RelayError):
    """The caller did not present a valid relay key."""

    status_code = status.HTTP_401_UNAUTHORIZED


class NotificationNotFoundError(RelayError):
    """An explicitly requested notification does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class DatastoreError(RelayError):
    """Database operation errors."""


class PushDeliveryError(RelayError):
    """A push send failed."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None,
    ):
        super().__init__(message, details)
        self.response_status = status_code


class PushGoneError(PushDeliveryError):
    """The push service reports the subscription is permanently gone."""


class TriggerError(RelayError):
    """The pending poll could not reach the send endpoint."""

    status_code = status.HTTP_502_BAD_GATEWAY


def error_body(error: str, details: Any = None) -> Dict[str, Any]:
    return {"error": error, "details": details}


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Render a :class:`RelayError` as ``{error, details}``."""

    if exc.status_code >= 500:
        logger.error("Request failed", path=request.url.path, error=exc.message)
    else:
        logger.warning("Request rejected", path=request.url.path, error=exc.message)
    details = exc.details if exc.details is not None else exc.message
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message, details))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all so internal failures keep the ``{error, details}`` shape."""

    logger.exception("Unhandled error", path=request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Internal server error", str(exc)),
    )


class PushNotConfiguredError(RelayError):
    """VAPID credentials are missing, so nothing can be pushed."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Routing errors (404, 405) in the same ``{error, details}`` shape."""

    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )
