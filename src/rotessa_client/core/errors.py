"""
Failure types raised by the Rotessa client.

Two runtime kinds are kept disjoint so calling code can branch on the class:
:class:`RotessaApiError` when the provider answered unhappily and
:class:`RotessaRequestError` when no usable answer was obtained.
"""

from __future__ import annotations

import asyncio
from typing import Any, List, Optional

from .types import ErrorDetail

__all__ = [
    "ConfigError",
    "RotessaApiError",
    "RotessaConfigError",
    "RotessaError",
    "RotessaRequestError",
    "RotessaResponseError",
    "normalize_errors",
]


class RotessaError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(RotessaError):
    """Raised when the supplied configuration is invalid."""


RotessaConfigError = ConfigError


class RotessaApiError(RotessaError):
    """The provider returned a response with a non-success status."""

    def __init__(
        self,
        message: str,
        *,
        status: int,
        method: str,
        path: str,
        errors: Optional[List[ErrorDetail]] = None,
        payload: Any = None,
        response_text: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = status
        self.method = method
        self.path = path
        self.errors = errors
        self.payload = payload
        self.response_text = response_text

    @property
    def first_error_message(self) -> Optional[str]:
        if not self.errors:
            return None
        return self.errors[0].error_message or None

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status={self.status}, method={self.method!r}, "
            f"path={self.path!r}, message={self.message!r})"
        )


class RotessaResponseError(RotessaApiError):
    """
    The provider answered with a success status but the body is not the JSON
    shape the endpoint promises (empty, malformed, or the wrong type).
    """


class RotessaRequestError(RotessaError):
    """
    The request could not be completed: it could not be built, the network
    call failed, the deadline expired, or the caller cancelled it.
    """

    def __init__(
        self,
        message: str,
        *,
        method: str,
        path: str,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.method = method
        self.path = path
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    @property
    def timed_out(self) -> bool:
        return isinstance(self.cause, (TimeoutError, asyncio.TimeoutError))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(method={self.method!r}, path={self.path!r}, "
            f"message={self.message!r})"
        )


def normalize_errors(payload: Any) -> Optional[List[ErrorDetail]]:
    """
    Extract ``{"errors": [{"error_code", "error_message"}]}`` entries.

    Entries that carry neither a code nor a message are dropped. ``None`` is
    returned when nothing usable remains.
    """
    if not isinstance(payload, dict):
        return None
    errors = payload.get("errors")
    if not isinstance(errors, list):
        return None

    normalized: List[ErrorDetail] = []
    for item in errors:
        if not isinstance(item, dict):
            continue
        code = item.get("error_code")
        message = item.get("error_message")
        error_code = "" if code is None else str(code)
        error_message = "" if message is None else str(message)
        if not error_code and not error_message:
            continue
        normalized.append(ErrorDetail(error_code=error_code, error_message=error_message))

    return normalized or None
