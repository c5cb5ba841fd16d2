"""
Core primitives that implement the Rotessa request lifecycle.
"""

from .client import (
    CustomersResource,
    RotessaClient,
    TransactionReportResource,
    TransactionSchedulesResource,
    bind_endpoint,
)
from .config import (
    DEFAULT_TIMEOUT_MS,
    ClientConfig,
    ClientParameters,
    Reporter,
    load_client_config,
)
from .environment import RotessaEnvironment, build_environment, load_env_file
from .errors import (
    ConfigError,
    RotessaApiError,
    RotessaConfigError,
    RotessaError,
    RotessaRequestError,
    RotessaResponseError,
    normalize_errors,
)
from .executor import perform
from .manifest import (
    MANIFEST,
    EndpointParams,
    EndpointSpec,
    HttpMethod,
    ParamSpec,
    get_endpoint,
    iter_endpoints,
)
from .transport import (
    HttpxTransport,
    RequestsTransport,
    Transport,
    TransportRequest,
    TransportResponse,
)

__all__ = [
    "ClientConfig",
    "ClientParameters",
    "ConfigError",
    "CustomersResource",
    "DEFAULT_TIMEOUT_MS",
    "EndpointParams",
    "EndpointSpec",
    "HttpMethod",
    "HttpxTransport",
    "MANIFEST",
    "ParamSpec",
    "Reporter",
    "RequestsTransport",
    "RotessaApiError",
    "RotessaClient",
    "RotessaConfigError",
    "RotessaEnvironment",
    "RotessaError",
    "RotessaRequestError",
    "RotessaResponseError",
    "TransactionReportResource",
    "TransactionSchedulesResource",
    "Transport",
    "TransportRequest",
    "TransportResponse",
    "bind_endpoint",
    "build_environment",
    "get_endpoint",
    "iter_endpoints",
    "load_client_config",
    "load_env_file",
    "normalize_errors",
    "perform",
]
