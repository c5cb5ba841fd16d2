"""
Resource-oriented facade over the Rotessa request executor.

Each resource binds its operations from :data:`~rotessa_client.core.manifest.MANIFEST`
once, at construction. The typed methods only shape path parameters, query
strings and bodies, then parse the JSON payload into the records from
:mod:`rotessa_client.core.types`.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Union

from .config import ClientConfig
from .executor import PathParams, Query, perform
from .manifest import MANIFEST, EndpointSpec, HttpMethod
from .types import (
    CustomerCreate,
    CustomerDetail,
    CustomerListItem,
    CustomerUpdate,
    CustomerUpdateViaPost,
    TransactionReportItem,
    TransactionReportQuery,
    TransactionSchedule,
    TransactionScheduleCreate,
    TransactionScheduleCreateWithCustomIdentifier,
    TransactionScheduleUpdate,
    TransactionScheduleUpdateViaPost,
    wire_value,
)

__all__ = [
    "CustomersResource",
    "Operation",
    "RotessaClient",
    "TransactionReportResource",
    "TransactionSchedulesResource",
    "bind_endpoint",
]

Operation = Callable[..., Awaitable[Any]]
Payload = Union[Mapping[str, Any], Any]


def bind_endpoint(config: ClientConfig, spec: EndpointSpec) -> Operation:
    """
    Turn a manifest entry into an async callable bound to ``config``.

    The callable accepts ``path_params``, ``query``, ``body``, ``cancel_event``
    and ``timeout_ms`` keywords and returns the parsed payload.
    """

    async def operation(
        *,
        path_params: Optional[PathParams] = None,
        query: Optional[Query] = None,
        body: Any = None,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> Any:
        return await perform(
            config,
            spec.method,
            spec.path,
            path_params=path_params,
            query=query,
            body=body,
            cancel_event=cancel_event,
            timeout_ms=timeout_ms,
            expect=spec.returns,
        )

    operation.__name__ = f"{spec.method.value.lower()}_{spec.path.strip('/').replace('/', '_')}"
    operation.__doc__ = f"{spec.method.value} {spec.path}"
    return operation


def _body(payload: Payload) -> Dict[str, Any]:
    body = wire_value(payload)
    if not isinstance(body, dict):
        raise TypeError(f"Expected a request record or mapping, got {type(payload).__name__}")
    return body


def _records(payload: List[Any], parse: Callable[[Mapping[str, Any]], Any]) -> List[Any]:
    return [parse(item) for item in payload if isinstance(item, Mapping)]


class _Resource:
    resource_name = ""

    def __init__(self, config: ClientConfig) -> None:
        self._operations: Dict[str, Operation] = {
            name: bind_endpoint(config, spec)
            for name, spec in MANIFEST[self.resource_name].items()
        }

    async def _call(self, operation: str, **kwargs: Any) -> Any:
        return await self._operations[operation](**kwargs)


class CustomersResource(_Resource):
    resource_name = "customers"

    async def list(
        self,
        *,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> List[CustomerListItem]:
        payload = await self._call("list", cancel_event=cancel_event, timeout_ms=timeout_ms)
        return _records(payload, CustomerListItem.from_payload)

    async def get(
        self,
        customer_id: int,
        *,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> CustomerDetail:
        payload = await self._call(
            "get",
            path_params={"id": customer_id},
            cancel_event=cancel_event,
            timeout_ms=timeout_ms,
        )
        return CustomerDetail.from_payload(payload)

    async def get_by_custom_identifier(
        self,
        custom_identifier: str,
        *,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> CustomerDetail:
        payload = await self._call(
            "get_by_custom_identifier",
            body={"custom_identifier": custom_identifier},
            cancel_event=cancel_event,
            timeout_ms=timeout_ms,
        )
        return CustomerDetail.from_payload(payload)

    async def create(
        self,
        payload: Union[CustomerCreate, Mapping[str, Any]],
        *,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> CustomerDetail:
        result = await self._call(
            "create", body=_body(payload), cancel_event=cancel_event, timeout_ms=timeout_ms
        )
        return CustomerDetail.from_payload(result)

    async def update(
        self,
        customer_id: int,
        payload: Union[CustomerUpdate, Mapping[str, Any]],
        *,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> CustomerDetail:
        """Update through ``PATCH /customers/{id}``."""
        result = await self._call(
            "update",
            path_params={"id": customer_id},
            body=_body(payload),
            cancel_event=cancel_event,
            timeout_ms=timeout_ms,
        )
        return CustomerDetail.from_payload(result)

    async def update_via_post(
        self,
        payload: Union[CustomerUpdateViaPost, Mapping[str, Any]],
        *,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> CustomerDetail:
        """Update through ``POST /customers/update_via_post``; the id travels in the body."""
        result = await self._call(
            "update_via_post",
            body=_body(payload),
            cancel_event=cancel_event,
            timeout_ms=timeout_ms,
        )
        return CustomerDetail.from_payload(result)


class TransactionSchedulesResource(_Resource):
    resource_name = "transaction_schedules"

    async def get(
        self,
        schedule_id: int,
        *,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> TransactionSchedule:
        payload = await self._call(
            "get",
            path_params={"id": schedule_id},
            cancel_event=cancel_event,
            timeout_ms=timeout_ms,
        )
        return TransactionSchedule.from_payload(payload)

    async def create(
        self,
        payload: Union[TransactionScheduleCreate, Mapping[str, Any]],
        *,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> TransactionSchedule:
        result = await self._call(
            "create", body=_body(payload), cancel_event=cancel_event, timeout_ms=timeout_ms
        )
        return TransactionSchedule.from_payload(result)

    async def create_with_custom_identifier(
        self,
        payload: Union[TransactionScheduleCreateWithCustomIdentifier, Mapping[str, Any]],
        *,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> TransactionSchedule:
        result = await self._call(
            "create_with_custom_identifier",
            body=_body(payload),
            cancel_event=cancel_event,
            timeout_ms=timeout_ms,
        )
        return TransactionSchedule.from_payload(result)

    async def update(
        self,
        schedule_id: int,
        payload: Union[TransactionScheduleUpdate, Mapping[str, Any]],
        *,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> TransactionSchedule:
        """Update through ``PATCH /transaction_schedules/{id}``."""
        result = await self._call(
            "update",
            path_params={"id": schedule_id},
            body=_body(payload),
            cancel_event=cancel_event,
            timeout_ms=timeout_ms,
        )
        return TransactionSchedule.from_payload(result)

    async def update_via_post(
        self,
        payload: Union[TransactionScheduleUpdateViaPost, Mapping[str, Any]],
        *,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> TransactionSchedule:
        """Update through ``POST /transaction_schedules/update_via_post``."""
        result = await self._call(
            "update_via_post",
            body=_body(payload),
            cancel_event=cancel_event,
            timeout_ms=timeout_ms,
        )
        return TransactionSchedule.from_payload(result)

    async def delete(
        self,
        schedule_id: int,
        *,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> None:
        await self._call(
            "delete",
            path_params={"id": schedule_id},
            cancel_event=cancel_event,
            timeout_ms=timeout_ms,
        )


class TransactionReportResource(_Resource):
    resource_name = "transaction_report"

    async def list(
        self,
        query: Union[TransactionReportQuery, Mapping[str, Any]],
        *,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> List[TransactionReportItem]:
        """
        List report rows for one page.

        ``status`` and ``filter`` are alternate names the provider accepts for
        the same status filter; both are forwarded when given.
        """
        if not isinstance(query, TransactionReportQuery):
            query = TransactionReportQuery.from_mapping(query)
        payload = await self._call(
            "list", query=query.to_query(), cancel_event=cancel_event, timeout_ms=timeout_ms
        )
        return _records(payload, TransactionReportItem.from_payload)


class RotessaClient:
    """
    Typed client for the Rotessa REST API.

    The client holds no mutable state after construction and can be shared by
    concurrent tasks.
    """

    def __init__(self, config: ClientConfig) -> None:
        self.config = config
        self.customers = CustomersResource(config)
        self.transaction_schedules = TransactionSchedulesResource(config)
        self.transaction_report = TransactionReportResource(config)

    async def request(
        self,
        method: Union[HttpMethod, str],
        path: str,
        *,
        path_params: Optional[PathParams] = None,
        query: Optional[Query] = None,
        body: Any = None,
        cancel_event: Optional[asyncio.Event] = None,
        timeout_ms: Optional[int] = None,
    ) -> Any:
        """
        Call any endpoint, wrapped or not, with the same failure handling as
        the typed methods. Returns the parsed payload (``None`` for empty bodies).
        """
        return await perform(
            self.config,
            method,
            path,
            path_params=path_params,
            query=query,
            body=body,
            cancel_event=cancel_event,
            timeout_ms=timeout_ms,
        )

    def __repr__(self) -> str:
        return f"RotessaClient(base_url={self.config.base_url!r})"
