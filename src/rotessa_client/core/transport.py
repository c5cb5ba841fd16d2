"""
Pluggable HTTP transports.

A transport is any ``async`` callable that takes a :class:`TransportRequest`
and returns a :class:`TransportResponse`. Library-specific timeouts are
re-raised as :class:`TimeoutError` so the executor can tell them apart from
other network failures.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Mapping, Optional

import httpx
import requests

__all__ = [
    "HttpxTransport",
    "RequestsTransport",
    "Transport",
    "TransportRequest",
    "TransportResponse",
]


@dataclass(frozen=True)
class TransportRequest:
    method: str
    url: str
    headers: Mapping[str, str]
    content: Optional[str] = None
    timeout_seconds: Optional[float] = None


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    text: str
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


Transport = Callable[[TransportRequest], Awaitable[TransportResponse]]


class HttpxTransport:
    """
    Default transport backed by :class:`httpx.AsyncClient`.

    Pass a client to reuse connections across calls; the caller then owns its
    lifetime. Without one, a short-lived client is opened for each request.
    """

    def __init__(self, client: Optional[httpx.AsyncClient] = None) -> None:
        self.client = client

    async def __call__(self, request: TransportRequest) -> TransportResponse:
        if self.client is not None:
            return await self._send(self.client, request)
        async with httpx.AsyncClient(timeout=request.timeout_seconds) as client:
            return await self._send(client, request)

    async def _send(
        self, client: httpx.AsyncClient, request: TransportRequest
    ) -> TransportResponse:
        try:
            response = await client.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                content=request.content,
                timeout=request.timeout_seconds,
            )
        except httpx.TimeoutException as exc:
            raise TimeoutError(str(exc) or "httpx timed out") from exc
        return TransportResponse(
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )


class RequestsTransport:
    """
    Transport for callers that already hold a configured :class:`requests.Session`.

    The blocking call runs in a worker thread; the session's own socket timeout
    is set from the request so the thread does not outlive the deadline for long.
    """

    def __init__(self, session: Optional[requests.Session] = None) -> None:
        self.session = session or requests.Session()

    async def __call__(self, request: TransportRequest) -> TransportResponse:
        return await asyncio.to_thread(self._send, request)

    def _send(self, request: TransportRequest) -> TransportResponse:
        try:
            response = self.session.request(
                request.method,
                request.url,
                headers=dict(request.headers),
                data=request.content.encode("utf-8") if request.content is not None else None,
                timeout=request.timeout_seconds,
            )
        except requests.Timeout as exc:
            raise TimeoutError(str(exc) or "requests timed out") from exc
        return TransportResponse(
            status_code=response.status_code,
            text=response.text,
            headers=dict(response.headers),
        )
