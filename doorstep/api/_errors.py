"""
API errors — what a failed backend call turns into.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto

import httpx

logger = logging.getLogger(__name__)


class ApiErrorKind(Enum):
    """API error kinds."""
    TRANSPORT = auto()
    STATUS = auto()
    DECODE = auto()


@dataclass(frozen=True, slots=True)
class ApiError:
    """
    Backend call failure.

    server_message holds the `message` field of an error body, verbatim,
    when the backend sent one.
    """
    kind: ApiErrorKind
    message: str
    status: int | None = None
    server_message: str | None = None

    def user_message(self, fallback: str) -> str:
        return self.server_message or fallback


def _server_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


def to_api_error(exc: Exception, operation: str = "request") -> ApiError:
    """Convert an exception raised around an httpx call into ApiError."""
    match exc:
        case httpx.HTTPStatusError(response=response):
            error = ApiError(
                kind=ApiErrorKind.STATUS,
                message=f"{operation}: HTTP {response.status_code}",
                status=response.status_code,
                server_message=_server_message(response),
            )
        case httpx.RequestError():
            error = ApiError(ApiErrorKind.TRANSPORT, f"{operation}: {exc}")
        case ValueError():
            error = ApiError(ApiErrorKind.DECODE, f"{operation}: invalid JSON ({exc})")
        case _:
            error = ApiError(ApiErrorKind.TRANSPORT, f"{operation}: {exc!r}")

    logger.warning("Backend call failed: %s", error.message)
    return error


__all__ = ("ApiError", "ApiErrorKind", "to_api_error")
