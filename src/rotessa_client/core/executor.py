"""
Single low-level routine that performs one Rotessa HTTP call.

Every typed operation of the client ends up in :func:`perform`. It builds the
URL and headers, bounds the call with an internal deadline, parses the body
tolerantly and turns every failure into one of the two runtime error kinds.
"""

from __future__ import annotations

import asyncio
import json
import logging
import re
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Mapping, Optional, Union
from urllib.parse import quote, urlencode

from .config import ClientConfig
from .errors import (
    RotessaApiError,
    RotessaRequestError,
    RotessaResponseError,
    normalize_errors,
)
from .manifest import HttpMethod
from .transport import TransportRequest, TransportResponse
from .types import format_amount, wire_value

__all__ = [
    "build_headers",
    "build_url",
    "perform",
    "resolve_path",
    "safe_parse_json",
]

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

PathParams = Mapping[str, Union[str, int]]
Query = Mapping[str, Any]


class _Cancelled(Exception):
    """The caller's cancel event fired before the transport answered."""


def _method_name(method: Union[HttpMethod, str], path: str) -> str:
    try:
        return HttpMethod(str(getattr(method, "value", method)).upper()).value
    except ValueError:
        raise RotessaRequestError(
            f"Unsupported HTTP method: {method}", method=str(method), path=path
        ) from None


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, Enum):
        return str(value.value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format_amount(value)
    return str(value)


def resolve_path(method: str, path: str, path_params: Optional[PathParams] = None) -> str:
    """
    Substitute every ``{name}`` placeholder with its percent-encoded value.

    Raises :class:`RotessaRequestError` naming the first placeholder without a
    value; the unresolved template is kept as the error's ``path``.
    """
    params = path_params or {}

    def _substitute(match: "re.Match[str]") -> str:
        key = match.group(1)
        value = params.get(key)
        if value is None:
            raise RotessaRequestError(
                f"Missing path parameter: {key}", method=method, path=path
            )
        return quote(_stringify(value), safe="")

    return _PLACEHOLDER.sub(_substitute, path)


def build_url(base_url: str, path: str, query: Optional[Query] = None) -> str:
    url = base_url.rstrip("/") + (path if path.startswith("/") else f"/{path}")
    if not query:
        return url
    pairs = [(key, _stringify(value)) for key, value in query.items() if value is not None]
    if not pairs:
        return url
    return f"{url}?{urlencode(pairs)}"


def build_headers(config: ClientConfig) -> dict:
    return {
        "Accept": "application/json",
        "Authorization": config.authorization_header,
        "Content-Type": "application/json",
    }


def _encode_body(method: str, body: Any) -> Optional[str]:
    if body is None or method == HttpMethod.GET.value:
        return None
    return json.dumps(wire_value(body))


def safe_parse_json(text: str) -> Any:
    """Parse ``text`` as JSON, returning ``None`` for empty or malformed bodies."""
    if not text or not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def _report(config: ClientConfig, error: Union[RotessaApiError, RotessaRequestError]) -> None:
    if config.reporter is None:
        return
    try:
        config.reporter(error)
    except Exception:  # noqa: BLE001
        logger.warning("Rotessa error reporter raised; ignoring", exc_info=True)


async def _send_with_deadline(
    config: ClientConfig,
    request: TransportRequest,
    timeout_seconds: float,
    cancel_event: Optional[asyncio.Event],
) -> TransportResponse:
    transport_task = asyncio.ensure_future(config.transport(request))
    waiters = {transport_task}
    cancel_task: Optional[asyncio.Future] = None
    if cancel_event is not None:
        cancel_task = asyncio.ensure_future(cancel_event.wait())
        waiters.add(cancel_task)

    try:
        # The deadline lives inside asyncio.wait and is released on every exit.
        done, _ = await asyncio.wait(
            waiters, timeout=timeout_seconds, return_when=asyncio.FIRST_COMPLETED
        )
    finally:
        for task in waiters:
            if not task.done():
                task.cancel()

    if transport_task in done:
        return transport_task.result()
    if cancel_task is not None and cancel_task in done:
        raise _Cancelled()
    raise TimeoutError(f"No response within {timeout_seconds * 1000:.0f} ms")


def _check_shape(expect: Optional[str], payload: Any) -> bool:
    if expect == "object":
        return isinstance(payload, dict)
    if expect == "array":
        return isinstance(payload, list)
    return True


async def perform(
    config: ClientConfig,
    method: Union[HttpMethod, str],
    path: str,
    *,
    path_params: Optional[PathParams] = None,
    query: Optional[Query] = None,
    body: Any = None,
    cancel_event: Optional[asyncio.Event] = None,
    timeout_ms: Optional[int] = None,
    expect: Optional[str] = None,
) -> Any:
    """
    Perform one request and return the parsed JSON payload.

    Failures are classified in a fixed order: unresolvable paths, then
    transport failures (network errors, the deadline, caller cancellation),
    then non-2xx statuses. ``expect`` (``"object"`` or ``"array"``) makes a 2xx
    answer without a payload of that shape a :class:`RotessaResponseError`.
    Every error goes through the configured reporter before it is raised.
    """
    try:
        method_name = _method_name(method, path)
        resolved_path = resolve_path(method_name, path, path_params)
    except RotessaRequestError as error:
        _report(config, error)
        raise

    if timeout_ms is None:
        effective_timeout_ms = config.timeout_ms
        timeout_seconds = config.timeout_seconds
    else:
        effective_timeout_ms = timeout_ms
        timeout_seconds = timeout_ms / 1000
    request = TransportRequest(
        method=method_name,
        url=build_url(config.base_url, resolved_path, query),
        headers=build_headers(config),
        content=_encode_body(method_name, body),
        timeout_seconds=timeout_seconds,
    )
    logger.debug("Rotessa %s %s", method_name, resolved_path)

    try:
        response = await _send_with_deadline(config, request, timeout_seconds, cancel_event)
    except _Cancelled as exc:
        error = RotessaRequestError(
            "Rotessa request was cancelled.", method=method_name, path=resolved_path, cause=exc
        )
        logger.info("Rotessa %s %s cancelled by caller", method_name, resolved_path)
        _report(config, error)
        raise error from exc
    except (TimeoutError, asyncio.TimeoutError) as exc:
        error = RotessaRequestError(
            "Rotessa request timed out.", method=method_name, path=resolved_path, cause=exc
        )
        logger.warning(
            "Rotessa %s %s timed out after %s ms", method_name, resolved_path, effective_timeout_ms
        )
        _report(config, error)
        raise error from exc
    except Exception as exc:  # noqa: BLE001
        error = RotessaRequestError(
            "Rotessa request failed.", method=method_name, path=resolved_path, cause=exc
        )
        logger.warning("Rotessa %s %s failed: %s", method_name, resolved_path, exc)
        _report(config, error)
        raise error from exc

    payload = safe_parse_json(response.text)

    if not response.ok:
        errors = normalize_errors(payload)
        message = (
            errors[0].error_message
            if errors and errors[0].error_message
            else f"Rotessa request failed with status {response.status_code}"
        )
        api_error = RotessaApiError(
            message,
            status=response.status_code,
            method=method_name,
            path=resolved_path,
            errors=errors,
            payload=payload,
            response_text=response.text,
        )
        logger.info(
            "Rotessa %s %s returned %s", method_name, resolved_path, response.status_code
        )
        _report(config, api_error)
        raise api_error

    if not _check_shape(expect, payload):
        shape_error = RotessaResponseError(
            f"Rotessa returned status {response.status_code} without a JSON {expect}",
            status=response.status_code,
            method=method_name,
            path=resolved_path,
            payload=payload,
            response_text=response.text,
        )
        logger.warning(
            "Rotessa %s %s returned an unusable body", method_name, resolved_path
        )
        _report(config, shape_error)
        raise shape_error

    return payload
