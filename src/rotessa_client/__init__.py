"""
Public facade for the Rotessa client package.

The module intentionally re-exports the most useful pieces for integrators so
they can ``from rotessa_client import ...`` without navigating the package.
"""

from .api import create_rotessa_client, get_client, logging_reporter, reset_client
from .core import (
    DEFAULT_TIMEOUT_MS,
    MANIFEST,
    ClientConfig,
    ClientParameters,
    ConfigError,
    EndpointSpec,
    HttpMethod,
    HttpxTransport,
    RequestsTransport,
    RotessaApiError,
    RotessaClient,
    RotessaConfigError,
    RotessaEnvironment,
    RotessaError,
    RotessaRequestError,
    RotessaResponseError,
    TransportRequest,
    TransportResponse,
    build_environment,
    load_client_config,
    load_env_file,
)
from .core.types import (
    BASE_URLS,
    CLEAR,
    AddressInput,
    AuthorizationType,
    BankAccountType,
    CustomerCreate,
    CustomerDetail,
    CustomerListItem,
    CustomerType,
    CustomerUpdate,
    CustomerUpdateViaPost,
    ErrorDetail,
    FinancialTransaction,
    ReportStatusFilter,
    ScheduleFrequency,
    StatusReason,
    TransactionReportItem,
    TransactionReportQuery,
    TransactionSchedule,
    TransactionScheduleCreate,
    TransactionScheduleCreateWithCustomIdentifier,
    TransactionScheduleUpdate,
    TransactionScheduleUpdateViaPost,
    TransactionStatus,
)

__all__ = (
    "AddressInput",
    "AuthorizationType",
    "BASE_URLS",
    "BankAccountType",
    "CLEAR",
    "ClientConfig",
    "ClientParameters",
    "ConfigError",
    "CustomerCreate",
    "CustomerDetail",
    "CustomerListItem",
    "CustomerType",
    "CustomerUpdate",
    "CustomerUpdateViaPost",
    "DEFAULT_TIMEOUT_MS",
    "EndpointSpec",
    "ErrorDetail",
    "FinancialTransaction",
    "HttpMethod",
    "HttpxTransport",
    "MANIFEST",
    "ReportStatusFilter",
    "RequestsTransport",
    "RotessaApiError",
    "RotessaClient",
    "RotessaConfigError",
    "RotessaEnvironment",
    "RotessaError",
    "RotessaRequestError",
    "RotessaResponseError",
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
    "TransportRequest",
    "TransportResponse",
    "build_environment",
    "create_rotessa_client",
    "get_client",
    "load_client_config",
    "load_env_file",
    "logging_reporter",
    "reset_client",
)
