"""
Public, high-level helpers for building Rotessa clients.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Union

from .core.client import RotessaClient
from .core.config import ClientConfig, ClientParameters, Reporter, load_client_config
from .core.errors import RotessaApiError, RotessaRequestError
from .core.transport import Transport

__all__ = [
    "create_rotessa_client",
    "get_client",
    "logging_reporter",
    "reset_client",
]

_client: Optional[RotessaClient] = None


def create_rotessa_client(
    *,
    config: Optional[ClientConfig] = None,
    transport: Optional[Transport] = None,
    reporter: Optional[Reporter] = None,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_ms: Optional[Union[int, str]] = None,
    environment: Optional[str] = None,
) -> RotessaClient:
    """
    Construct a :class:`RotessaClient`.

    Callers can either supply a ready-made :class:`ClientConfig` or let the
    helper assemble one from explicit arguments, the environment and a ``.env``
    file. A missing API key raises :class:`ConfigError` here, before any
    request can be made.
    """
    if config is not None:
        extras = (
            transport,
            reporter,
            overrides,
            base,
            parameters,
            api_key,
            base_url,
            timeout_ms,
            environment,
        )
        if any(item is not None and item != {} for item in extras):
            raise ValueError(
                "Provide either a pre-built ClientConfig or individual parameters, not both."
            )
        cfg = config
    else:
        cfg = load_client_config(
            env_file=env_file,
            overrides=overrides,
            base=base,
            parameters=parameters,
            api_key=api_key,
            base_url=base_url,
            timeout_ms=timeout_ms,
            environment=environment,
            transport=transport,
            reporter=reporter,
        )
    return RotessaClient(cfg)


def get_client(**kwargs) -> RotessaClient:
    """
    Return the process-wide client, building it on first use.

    Arguments are forwarded to :func:`create_rotessa_client` on the first call
    only; later calls return the cached instance untouched until
    :func:`reset_client` is called.
    """
    global _client
    if _client is None:
        _client = create_rotessa_client(**kwargs)
    return _client


def reset_client() -> None:
    """Discard the cached client so the next :func:`get_client` rebuilds it."""
    global _client
    _client = None


def logging_reporter(
    logger: Optional[logging.Logger] = None,
    level: int = logging.WARNING,
) -> Reporter:
    """
    Build a reporter that writes each failure to ``logger`` with its details in
    ``extra`` so structured handlers can pick them up.
    """
    target = logger or logging.getLogger("rotessa_client")

    def report(error: Union[RotessaApiError, RotessaRequestError]) -> None:
        extra = {
            "rotessa_method": error.method,
            "rotessa_path": error.path,
            "rotessa_error": type(error).__name__,
        }
        if isinstance(error, RotessaApiError):
            extra["rotessa_status"] = error.status
            if error.errors:
                extra["rotessa_error_codes"] = [detail.error_code for detail in error.errors]
        target.log(
            level,
            "Rotessa %s %s failed: %s",
            error.method,
            error.path,
            error.message,
            extra=extra,
        )

    return report
