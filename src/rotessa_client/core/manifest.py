"""
Declarative description of every Rotessa endpoint the client supports.

The manifest is plain data: method, path template and parameter specs per
operation. :mod:`rotessa_client.core.client` derives its typed operations from
these entries, so method and path live in exactly one place.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterator, Literal, Mapping, Optional, Tuple, Type

from .types import (
    AuthorizationType,
    BankAccountType,
    CustomerType,
    ReportStatusFilter,
    ScheduleFrequency,
    StatusReason,
    TransactionStatus,
)

__all__ = [
    "EndpointParams",
    "EndpointSpec",
    "HttpMethod",
    "MANIFEST",
    "ParamSpec",
    "get_endpoint",
    "iter_endpoints",
]

_PLACEHOLDER = re.compile(r"\{(\w+)\}")

ParamType = Literal["string", "number", "boolean", "object", "array"]
ReturnShape = Literal["object", "array"]


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"


def _options(enum_cls: Type[Enum]) -> Tuple[str, ...]:
    return tuple(member.value for member in enum_cls)


def _frozen(values: Optional[Mapping[str, "ParamSpec"]]) -> Mapping[str, "ParamSpec"]:
    return MappingProxyType(dict(values or {}))


@dataclass(frozen=True)
class ParamSpec:
    type: ParamType
    required: bool = False
    description: Optional[str] = None
    options: Optional[Tuple[str, ...]] = None
    fields: Optional[Mapping[str, "ParamSpec"]] = None


@dataclass(frozen=True)
class EndpointParams:
    path: Mapping[str, ParamSpec] = field(default_factory=lambda: _frozen(None))
    query: Mapping[str, ParamSpec] = field(default_factory=lambda: _frozen(None))
    body: Mapping[str, ParamSpec] = field(default_factory=lambda: _frozen(None))


@dataclass(frozen=True)
class EndpointSpec:
    method: HttpMethod
    path: str
    params: EndpointParams = field(default_factory=EndpointParams)
    returns: Optional[ReturnShape] = "object"
    notes: Tuple[str, ...] = ()

    @property
    def placeholders(self) -> Tuple[str, ...]:
        return tuple(_PLACEHOLDER.findall(self.path))


def _string(description: str, *, required: bool = False, options=None) -> ParamSpec:
    return ParamSpec("string", required=required, description=description, options=options)


def _number(description: str, *, required: bool = False) -> ParamSpec:
    return ParamSpec("number", required=required, description=description)


_ADDRESS_FIELDS = _frozen(
    {
        "address_1": _string("Street address line 1."),
        "address_2": _string("Street address line 2."),
        "city": _string("City."),
        "province_code": _string("Province or state code."),
        "postal_code": _string("Postal or zip code."),
    }
)


def _customer_body(*, creating: bool) -> Mapping[str, ParamSpec]:
    return {
        "name": _string("Customer name.", required=creating),
        "custom_identifier": _string("Optional external identifier."),
        "email": _string("Customer email.", required=creating),
        "home_phone": _string("Customer home phone."),
        "phone": _string("Customer phone."),
        "bank_name": _string("Bank name."),
        "institution_number": _string("Canadian institution number."),
        "transit_number": _string("Canadian transit number."),
        "bank_account_type": _string(
            "US bank account type.", options=_options(BankAccountType)
        ),
        "authorization_type": _string(
            "Customer authorization type.",
            required=creating,
            options=_options(AuthorizationType),
        ),
        "routing_number": _string("US routing number."),
        "account_number": _string("Bank account number.", required=creating),
        "address": ParamSpec(
            "object", description="Customer address object.", fields=_ADDRESS_FIELDS
        ),
        "customer_type": _string("Customer type.", options=_options(CustomerType)),
    }


def _schedule_body(owner: str, owner_spec: ParamSpec) -> Mapping[str, ParamSpec]:
    return {
        owner: owner_spec,
        "amount": _number("Transaction amount.", required=True),
        "frequency": _string(
            "Schedule frequency.", required=True, options=_options(ScheduleFrequency)
        ),
        "process_date": _string("Process date (YYYY-MM-DD).", required=True),
        "installments": _number("Optional number of installments."),
        "comment": _string("Optional comment."),
    }


_SCHEDULE_UPDATE_BODY = {
    "amount": _number("Updated amount."),
    "comment": _string("Updated comment."),
}

_CUSTOMER_ID = _frozen({"id": _number("Customer ID.", required=True)})
_SCHEDULE_ID = _frozen({"id": _number("Transaction schedule ID.", required=True)})
_REPORT_STATUSES = _options(ReportStatusFilter)


_ENDPOINTS = {
    "customers": {
        "list": EndpointSpec(HttpMethod.GET, "/customers", returns="array"),
        "get": EndpointSpec(
            HttpMethod.GET, "/customers/{id}", EndpointParams(path=_CUSTOMER_ID)
        ),
        "get_by_custom_identifier": EndpointSpec(
            HttpMethod.POST,
            "/customers/show_with_custom_identifier",
            EndpointParams(
                body=_frozen(
                    {
                        "custom_identifier": _string(
                            "Customer custom identifier.", required=True
                        )
                    }
                )
            ),
        ),
        "create": EndpointSpec(
            HttpMethod.POST,
            "/customers",
            EndpointParams(body=_frozen(_customer_body(creating=True))),
        ),
        "update": EndpointSpec(
            HttpMethod.PATCH,
            "/customers/{id}",
            EndpointParams(path=_CUSTOMER_ID, body=_frozen(_customer_body(creating=False))),
            notes=("Docs list PATCH /customers, but examples use /customers/{id}.",),
        ),
        "update_via_post": EndpointSpec(
            HttpMethod.POST,
            "/customers/update_via_post",
            EndpointParams(
                body=_frozen(
                    {
                        "id": _number("Customer ID.", required=True),
                        **_customer_body(creating=False),
                    }
                )
            ),
        ),
    },
    "transaction_schedules": {
        "get": EndpointSpec(
            HttpMethod.GET, "/transaction_schedules/{id}", EndpointParams(path=_SCHEDULE_ID)
        ),
        "create": EndpointSpec(
            HttpMethod.POST,
            "/transaction_schedules",
            EndpointParams(
                body=_frozen(
                    _schedule_body("customer_id", _number("Customer ID.", required=True))
                )
            ),
        ),
        "create_with_custom_identifier": EndpointSpec(
            HttpMethod.POST,
            "/transaction_schedules/create_with_custom_identifier",
            EndpointParams(
                body=_frozen(
                    _schedule_body(
                        "custom_identifier",
                        _string("Customer custom identifier.", required=True),
                    )
                )
            ),
            notes=(
                "Docs show a stray space in the example path; "
                "use /transaction_schedules/create_with_custom_identifier.",
            ),
        ),
        "update": EndpointSpec(
            HttpMethod.PATCH,
            "/transaction_schedules/{id}",
            EndpointParams(path=_SCHEDULE_ID, body=_frozen(_SCHEDULE_UPDATE_BODY)),
        ),
        "update_via_post": EndpointSpec(
            HttpMethod.POST,
            "/transaction_schedules/update_via_post",
            EndpointParams(
                body=_frozen(
                    {
                        "id": _number("Transaction schedule ID.", required=True),
                        **_SCHEDULE_UPDATE_BODY,
                    }
                )
            ),
        ),
        "delete": EndpointSpec(
            HttpMethod.DELETE,
            "/transaction_schedules/{id}",
            EndpointParams(path=_SCHEDULE_ID),
            returns=None,
        ),
    },
    "transaction_report": {
        "list": EndpointSpec(
            HttpMethod.GET,
            "/transaction_report",
            EndpointParams(
                query=_frozen(
                    {
                        "start_date": _string("Start date (YYYY-MM-DD).", required=True),
                        "end_date": _string("End date (YYYY-MM-DD)."),
                        "status": _string("Status filter.", options=_REPORT_STATUSES),
                        "filter": _string(
                            "Alternate status filter parameter.", options=_REPORT_STATUSES
                        ),
                        "page": _number("Page number."),
                    }
                )
            ),
            returns="array",
            notes=(
                "Financial transaction status values: "
                + ", ".join(_options(TransactionStatus))
                + ".",
                "Status reason values: " + ", ".join(_options(StatusReason)) + ".",
            ),
        ),
    },
}

MANIFEST: Mapping[str, Mapping[str, EndpointSpec]] = MappingProxyType(
    {resource: MappingProxyType(ops) for resource, ops in _ENDPOINTS.items()}
)


def get_endpoint(resource: str, operation: str) -> EndpointSpec:
    try:
        return MANIFEST[resource][operation]
    except KeyError:
        raise KeyError(f"No Rotessa endpoint registered for {resource}.{operation}") from None


def iter_endpoints() -> Iterator[Tuple[str, str, EndpointSpec]]:
    for resource, operations in MANIFEST.items():
        for operation, spec in operations.items():
            yield resource, operation, spec
