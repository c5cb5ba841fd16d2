"""
Domain vocabulary for the Rotessa API: enumerations, response records and
request payloads.

Response records are parsed tolerantly from the provider's JSON: missing keys
become ``None`` and enum strings the client does not know yet are kept as
plain strings. The untouched mapping is always available as ``raw``.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple, Type, TypeVar, Union

__all__ = [
    "AddressInput",
    "Address",
    "Amount",
    "AuthorizationType",
    "BASE_URLS",
    "BankAccountType",
    "CLEAR",
    "CustomerCreate",
    "CustomerDetail",
    "CustomerListItem",
    "CustomerType",
    "CustomerUpdate",
    "CustomerUpdateViaPost",
    "DateLike",
    "ErrorDetail",
    "FinancialTransaction",
    "ReportStatusFilter",
    "ScheduleFrequency",
    "StatusReason",
    "TransactionReportItem",
    "TransactionReportQuery",
    "TransactionSchedule",
    "TransactionScheduleCreate",
    "TransactionScheduleCreateWithCustomIdentifier",
    "TransactionScheduleUpdate",
    "TransactionScheduleUpdateViaPost",
    "TransactionStatus",
    "format_amount",
    "to_decimal",
    "wire_value",
]

BASE_URLS: Mapping[str, str] = {
    "production": "https://api.rotessa.com/v1",
    "sandbox": "https://sandbox-api.rotessa.com/v1",
}

Amount = Union[Decimal, int, str, float]
DateLike = Union[date, str]


class _Clear:
    """Marker for a request-record field that must be sent as JSON ``null``."""

    _instance: Optional["_Clear"] = None

    def __new__(cls) -> "_Clear":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "CLEAR"

    def __bool__(self) -> bool:
        return False


CLEAR: Any = _Clear()


class CustomerType(str, Enum):
    PERSONAL = "Personal"
    BUSINESS = "Business"


class BankAccountType(str, Enum):
    SAVINGS = "Savings"
    CHECKING = "Checking"


class AuthorizationType(str, Enum):
    IN_PERSON = "In Person"
    ONLINE = "Online"


class ScheduleFrequency(str, Enum):
    ONCE = "Once"
    WEEKLY = "Weekly"
    EVERY_OTHER_WEEK = "Every Other Week"
    MONTHLY = "Monthly"
    EVERY_OTHER_MONTH = "Every Other Month"
    QUARTERLY = "Quarterly"
    SEMI_ANNUALLY = "Semi-Annually"
    YEARLY = "Yearly"


class TransactionStatus(str, Enum):
    FUTURE = "Future"
    PENDING = "Pending"
    APPROVED = "Approved"
    DECLINED = "Declined"
    CHARGEBACK = "Chargeback"


class StatusReason(str, Enum):
    NSF = "NSF"
    PAYMENT_STOPPED_RECALLED = "Payment Stopped/Recalled"
    EDIT_REJECT = "Edit Reject"
    FUNDS_NOT_CLEARED = "Funds Not Cleared"
    ACCOUNT_CLOSED = "Account Closed"
    INVALID_ACCOUNT_NUMBER = "Invalid/Incorrect Account No."
    ACCOUNT_NOT_FOUND = "Account Not Found"
    ACCOUNT_FROZEN = "Account Frozen"
    AGREEMENT_REVOKED = "Agreement Revoked"
    NO_DEBIT_ALLOWED = "No Debit Allowed"


class ReportStatusFilter(str, Enum):
    ALL = "All"
    PENDING = "Pending"
    APPROVED = "Approved"
    DECLINED = "Declined"
    CHARGEBACK = "Chargeback"


_E = TypeVar("_E", bound=Enum)


def _enum_or_raw(enum_cls: Type[_E], value: Any) -> Union[_E, str, None]:
    if value is None:
        return None
    try:
        return enum_cls(value)
    except ValueError:
        return str(value)


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


def _opt_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def to_decimal(value: Any) -> Optional[Decimal]:
    """Parse a provider amount (usually a string such as ``"125.00"``)."""
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


def format_amount(value: Amount) -> str:
    """
    Render an amount for the wire.

    Floats are converted through ``str`` so ``19.99`` stays ``"19.99"`` instead
    of picking up binary noise.
    """
    if isinstance(value, bool):
        raise ValueError(f"Amount must be numeric, got {value!r}")
    if isinstance(value, Decimal):
        amount = value
    else:
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation as exc:
            raise ValueError(f"Amount must be a decimal number, got {value!r}") from exc
    if not amount.is_finite():
        raise ValueError(f"Amount must be finite, got {value!r}")
    return format(amount, "f")


def wire_value(value: Any) -> Any:
    """
    Convert enums, dates, decimals and request records into JSON-friendly values.

    Keys of plain mappings are kept as given, so ``None`` is sent as ``null``.
    Only request records omit their unset fields.
    """
    if value is CLEAR:
        return None
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return format_amount(value)
    if isinstance(value, _RequestRecord):
        return value.to_body()
    if isinstance(value, Mapping):
        return {key: wire_value(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [wire_value(item) for item in value]
    return value


def _raw_field() -> Any:
    return field(default_factory=dict, repr=False, compare=False)


@dataclass(frozen=True)
class ErrorDetail:
    error_code: str
    error_message: str

    def as_dict(self) -> Dict[str, str]:
        return {"error_code": self.error_code, "error_message": self.error_message}


# --------------------------------------------------------------------------
# Response records
# --------------------------------------------------------------------------


@dataclass(frozen=True)
class Address:
    id: Optional[int] = None
    address_1: Optional[str] = None
    address_2: Optional[str] = None
    city: Optional[str] = None
    province_code: Optional[str] = None
    postal_code: Optional[str] = None
    raw: Mapping[str, Any] = _raw_field()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "Address":
        return cls(
            id=_opt_int(payload.get("id")),
            address_1=_opt_str(payload.get("address_1")),
            address_2=_opt_str(payload.get("address_2")),
            city=_opt_str(payload.get("city")),
            province_code=_opt_str(payload.get("province_code")),
            postal_code=_opt_str(payload.get("postal_code")),
            raw=payload,
        )


@dataclass(frozen=True)
class FinancialTransaction:
    """One dated payment attempt generated from a transaction schedule."""

    id: Optional[int]
    amount: Optional[Decimal]
    process_date: Optional[str]
    status: Union[TransactionStatus, str, None]
    status_reason: Union[StatusReason, str, None] = None
    transaction_schedule_id: Optional[int] = None
    bank_name: Optional[str] = None
    institution_number: Optional[str] = None
    transit_number: Optional[str] = None
    account_number: Optional[str] = None
    raw: Mapping[str, Any] = _raw_field()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "FinancialTransaction":
        return cls(
            id=_opt_int(payload.get("id")),
            amount=to_decimal(payload.get("amount")),
            process_date=_opt_str(payload.get("process_date")),
            status=_enum_or_raw(TransactionStatus, payload.get("status")),
            status_reason=_enum_or_raw(StatusReason, payload.get("status_reason")),
            transaction_schedule_id=_opt_int(payload.get("transaction_schedule_id")),
            bank_name=_opt_str(payload.get("bank_name")),
            institution_number=_opt_str(payload.get("institution_number")),
            transit_number=_opt_str(payload.get("transit_number")),
            account_number=_opt_str(payload.get("account_number")),
            raw=payload,
        )


def _financial_transactions(values: Any) -> Tuple[FinancialTransaction, ...]:
    if not isinstance(values, list):
        return ()
    return tuple(
        FinancialTransaction.from_payload(item) for item in values if isinstance(item, Mapping)
    )


@dataclass(frozen=True)
class TransactionSchedule:
    id: Optional[int]
    amount: Optional[Decimal]
    frequency: Union[ScheduleFrequency, str, None]
    process_date: Optional[str]
    next_process_date: Optional[str] = None
    installments: Optional[int] = None
    comment: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    financial_transactions: Tuple[FinancialTransaction, ...] = ()
    raw: Mapping[str, Any] = _raw_field()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TransactionSchedule":
        return cls(
            id=_opt_int(payload.get("id")),
            amount=to_decimal(payload.get("amount")),
            frequency=_enum_or_raw(ScheduleFrequency, payload.get("frequency")),
            process_date=_opt_str(payload.get("process_date")),
            next_process_date=_opt_str(payload.get("next_process_date")),
            installments=_opt_int(payload.get("installments")),
            comment=_opt_str(payload.get("comment")),
            created_at=_opt_str(payload.get("created_at")),
            updated_at=_opt_str(payload.get("updated_at")),
            financial_transactions=_financial_transactions(
                payload.get("financial_transactions")
            ),
            raw=payload,
        )


def _list_item_fields(payload: Mapping[str, Any]) -> Dict[str, Any]:
    return {
        "id": _opt_int(payload.get("id")),
        "name": _opt_str(payload.get("name")),
        "email": _opt_str(payload.get("email")),
        "active": bool(payload.get("active")),
        "custom_identifier": _opt_str(payload.get("custom_identifier")),
        "customer_type": _enum_or_raw(CustomerType, payload.get("customer_type")),
        "identifier": _opt_str(payload.get("identifier")),
        "home_phone": _opt_str(payload.get("home_phone")),
        "phone": _opt_str(payload.get("phone")),
        "bank_name": _opt_str(payload.get("bank_name")),
        "created_at": _opt_str(payload.get("created_at")),
        "updated_at": _opt_str(payload.get("updated_at")),
    }


@dataclass(frozen=True)
class CustomerListItem:
    """Customer as returned by ``GET /customers``."""

    id: Optional[int]
    name: Optional[str]
    email: Optional[str]
    active: bool = False
    custom_identifier: Optional[str] = None
    customer_type: Union[CustomerType, str, None] = None
    identifier: Optional[str] = None
    home_phone: Optional[str] = None
    phone: Optional[str] = None
    bank_name: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    raw: Mapping[str, Any] = _raw_field()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CustomerListItem":
        return cls(raw=payload, **_list_item_fields(payload))


@dataclass(frozen=True)
class CustomerDetail(CustomerListItem):
    """
    Customer as returned by the single-customer endpoints.

    Banking fields are masked by the provider; the client never sees more of an
    account number than the provider chooses to return.
    """

    account_number: Optional[str] = None
    institution_number: Optional[str] = None
    transit_number: Optional[str] = None
    routing_number: Optional[str] = None
    bank_account_type: Union[BankAccountType, str, None] = None
    authorization_type: Union[AuthorizationType, str, None] = None
    address: Optional[Address] = None
    transaction_schedules: Tuple[TransactionSchedule, ...] = ()
    financial_transactions: Tuple[FinancialTransaction, ...] = ()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "CustomerDetail":
        address = payload.get("address")
        schedules = payload.get("transaction_schedules")
        return cls(
            raw=payload,
            account_number=_opt_str(payload.get("account_number")),
            institution_number=_opt_str(payload.get("institution_number")),
            transit_number=_opt_str(payload.get("transit_number")),
            routing_number=_opt_str(payload.get("routing_number")),
            bank_account_type=_enum_or_raw(BankAccountType, payload.get("bank_account_type")),
            authorization_type=_enum_or_raw(
                AuthorizationType, payload.get("authorization_type")
            ),
            address=Address.from_payload(address) if isinstance(address, Mapping) else None,
            transaction_schedules=tuple(
                TransactionSchedule.from_payload(item)
                for item in (schedules if isinstance(schedules, list) else [])
                if isinstance(item, Mapping)
            ),
            financial_transactions=_financial_transactions(
                payload.get("financial_transactions")
            ),
            **_list_item_fields(payload),
        )


@dataclass(frozen=True)
class TransactionReportItem:
    """Flattened report row joining a transaction with its customer and schedule."""

    id: Optional[int]
    customer_id: Optional[int]
    transaction_schedule_id: Optional[int]
    amount: Optional[Decimal]
    status: Union[TransactionStatus, str, None]
    process_date: Optional[str]
    custom_identifier: Optional[str] = None
    transaction_number: Optional[str] = None
    comment: Optional[str] = None
    status_reason: Union[StatusReason, str, None] = None
    settlement_date: Optional[str] = None
    earliest_approval_date: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    account_number: Optional[str] = None
    institution_number: Optional[str] = None
    transit_number: Optional[str] = None
    bank_name: Optional[str] = None
    raw: Mapping[str, Any] = _raw_field()

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "TransactionReportItem":
        return cls(
            id=_opt_int(payload.get("id")),
            customer_id=_opt_int(payload.get("customer_id")),
            transaction_schedule_id=_opt_int(payload.get("transaction_schedule_id")),
            amount=to_decimal(payload.get("amount")),
            status=_enum_or_raw(TransactionStatus, payload.get("status")),
            process_date=_opt_str(payload.get("process_date")),
            custom_identifier=_opt_str(payload.get("custom_identifier")),
            transaction_number=_opt_str(payload.get("transaction_number")),
            comment=_opt_str(payload.get("comment")),
            status_reason=_enum_or_raw(StatusReason, payload.get("status_reason")),
            settlement_date=_opt_str(payload.get("settlement_date")),
            earliest_approval_date=_opt_str(payload.get("earliest_approval_date")),
            created_at=_opt_str(payload.get("created_at")),
            updated_at=_opt_str(payload.get("updated_at")),
            account_number=_opt_str(payload.get("account_number")),
            institution_number=_opt_str(payload.get("institution_number")),
            transit_number=_opt_str(payload.get("transit_number")),
            bank_name=_opt_str(payload.get("bank_name")),
            raw=payload,
        )


# --------------------------------------------------------------------------
# Request payloads
# --------------------------------------------------------------------------


class _RequestRecord:
    """
    Mixin for request dataclasses.

    ``to_body`` drops fields left at ``None``; a field set to :data:`CLEAR` is
    sent as ``null`` so the provider erases the stored value.
    """

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        for item in dataclasses.fields(self):  # type: ignore[arg-type]
            value = getattr(self, item.name)
            if value is None:
                continue
            if value is CLEAR:
                body[item.name] = None
            elif item.name == "amount":
                body[item.name] = format_amount(value)
            else:
                body[item.name] = wire_value(value)
        return body


@dataclass(frozen=True, kw_only=True)
class AddressInput(_RequestRecord):
    address_1: Optional[str] = None
    address_2: Optional[str] = None
    city: Optional[str] = None
    province_code: Optional[str] = None
    postal_code: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class _CustomerFields(_RequestRecord):
    name: Optional[str] = None
    email: Optional[str] = None
    custom_identifier: Optional[str] = None
    customer_type: Optional[CustomerType] = None
    home_phone: Optional[str] = None
    phone: Optional[str] = None
    bank_name: Optional[str] = None
    authorization_type: Optional[AuthorizationType] = None
    institution_number: Optional[str] = None
    transit_number: Optional[str] = None
    routing_number: Optional[str] = None
    bank_account_type: Optional[BankAccountType] = None
    account_number: Optional[str] = None
    address: Optional[AddressInput] = None


@dataclass(frozen=True, kw_only=True)
class CustomerCreate(_CustomerFields):
    """
    Body for ``POST /customers``.

    Canadian accounts need institution, transit and account numbers; US
    accounts need a bank account type, routing and account numbers. Use
    :meth:`canadian` or :meth:`us` to get the right combination.
    """

    name: str
    email: str
    authorization_type: AuthorizationType
    account_number: str

    @classmethod
    def canadian(
        cls,
        *,
        name: str,
        email: str,
        authorization_type: AuthorizationType,
        institution_number: str,
        transit_number: str,
        account_number: str,
        **extra: Any,
    ) -> "CustomerCreate":
        return cls(
            name=name,
            email=email,
            authorization_type=authorization_type,
            institution_number=institution_number,
            transit_number=transit_number,
            account_number=account_number,
            **extra,
        )

    @classmethod
    def us(
        cls,
        *,
        name: str,
        email: str,
        authorization_type: AuthorizationType,
        bank_account_type: BankAccountType,
        routing_number: str,
        account_number: str,
        **extra: Any,
    ) -> "CustomerCreate":
        return cls(
            name=name,
            email=email,
            authorization_type=authorization_type,
            bank_account_type=bank_account_type,
            routing_number=routing_number,
            account_number=account_number,
            **extra,
        )


@dataclass(frozen=True, kw_only=True)
class CustomerUpdate(_CustomerFields):
    """Partial customer body for ``PATCH /customers/{id}``."""


@dataclass(frozen=True, kw_only=True)
class CustomerUpdateViaPost(_CustomerFields):
    """Partial customer body for ``POST /customers/update_via_post``; carries the id."""

    id: int


@dataclass(frozen=True, kw_only=True)
class _ScheduleFields(_RequestRecord):
    amount: Amount
    frequency: ScheduleFrequency
    process_date: DateLike
    installments: Optional[int] = None
    comment: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class TransactionScheduleCreate(_ScheduleFields):
    customer_id: int


@dataclass(frozen=True, kw_only=True)
class TransactionScheduleCreateWithCustomIdentifier(_ScheduleFields):
    custom_identifier: str


@dataclass(frozen=True, kw_only=True)
class TransactionScheduleUpdate(_RequestRecord):
    amount: Optional[Amount] = None
    comment: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class TransactionScheduleUpdateViaPost(TransactionScheduleUpdate):
    id: int


@dataclass(frozen=True, kw_only=True)
class TransactionReportQuery:
    start_date: DateLike
    end_date: Optional[DateLike] = None
    status: Optional[ReportStatusFilter] = None
    filter: Optional[ReportStatusFilter] = None
    page: Optional[int] = None

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "TransactionReportQuery":
        if "start_date" not in values:
            raise TypeError("Transaction report queries need a start_date")
        return cls(
            start_date=values["start_date"],
            end_date=values.get("end_date"),
            status=values.get("status"),
            filter=values.get("filter"),
            page=values.get("page"),
        )

    def to_query(self) -> Dict[str, Any]:
        """Query parameters; unset values stay ``None`` and are skipped on the wire."""
        return {
            "start_date": wire_value(self.start_date),
            "end_date": wire_value(self.end_date),
            "status": wire_value(self.status),
            "filter": wire_value(self.filter),
            "page": self.page,
        }
