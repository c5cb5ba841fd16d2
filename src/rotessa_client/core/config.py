"""
Configuration objects and helpers for the Rotessa client.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Union

from .environment import build_environment
from .errors import ConfigError, RotessaApiError, RotessaRequestError
from .transport import HttpxTransport, Transport
from .types import BASE_URLS

__all__ = [
    "ClientConfig",
    "ClientParameters",
    "ConfigError",
    "DEFAULT_TIMEOUT_MS",
    "Reporter",
    "load_client_config",
]

DEFAULT_TIMEOUT_MS = 15_000

# Called synchronously with every failure before it is raised; must not be async.
Reporter = Callable[[Union[RotessaApiError, RotessaRequestError]], Any]

_PARAMETER_TO_ENV_KEY = {
    "api_key": "ROTESSA_API_KEY",
    "base_url": "ROTESSA_API_BASE_URL",
    "timeout_ms": "ROTESSA_TIMEOUT_MS",
    "environment": "ROTESSA_ENVIRONMENT",
}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _explicit_timeout(value: Union[int, str]) -> int:
    try:
        timeout_ms = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"timeout_ms must be an integer, got {value!r}") from exc
    if timeout_ms <= 0:
        raise ConfigError(f"timeout_ms must be positive, got {timeout_ms}")
    return timeout_ms


def _environment_timeout(raw: Optional[str]) -> int:
    if not raw:
        return DEFAULT_TIMEOUT_MS
    try:
        timeout_ms = int(raw.strip())
    except ValueError:
        return DEFAULT_TIMEOUT_MS
    return timeout_ms if timeout_ms > 0 else DEFAULT_TIMEOUT_MS


def _base_url_for(environment: str) -> str:
    try:
        return BASE_URLS[environment.strip().lower()]
    except KeyError:
        known = ", ".join(sorted(BASE_URLS))
        raise ConfigError(
            f"ROTESSA_ENVIRONMENT must be one of {known}, got '{environment}'"
        ) from None


@dataclass(frozen=True)
class ClientParameters:
    """
    Explicit parameter bundle for constructing :class:`ClientConfig`.

    Callers can either instantiate this helper or pass the individual keyword
    arguments directly to :func:`load_client_config`.
    """

    api_key: Optional[str] = field(default=None, repr=False)
    base_url: Optional[str] = None
    timeout_ms: Optional[Union[int, str]] = None
    environment: Optional[str] = None

    def as_overrides(self) -> Dict[str, str]:
        overrides: Dict[str, str] = {}
        for field_name, env_key in _PARAMETER_TO_ENV_KEY.items():
            value = getattr(self, field_name)
            if value is None:
                continue
            overrides[env_key] = _stringify(value)
        return overrides


def _collect_parameter_overrides(
    parameters: Optional[ClientParameters],
    explicit: Mapping[str, Any],
) -> Dict[str, str]:
    merged: Dict[str, Any] = {}
    if parameters is not None:
        merged.update(
            {
                name: getattr(parameters, name)
                for name in _PARAMETER_TO_ENV_KEY
                if getattr(parameters, name) is not None
            }
        )
    merged.update({key: value for key, value in explicit.items() if value is not None})

    if "timeout_ms" in merged:
        merged["timeout_ms"] = _explicit_timeout(merged["timeout_ms"])
    if "environment" in merged and "base_url" not in merged:
        # An explicit environment outranks a base URL that only comes from the env.
        merged["base_url"] = _base_url_for(str(merged["environment"]))

    overrides: Dict[str, str] = {}
    for key, value in merged.items():
        try:
            env_key = _PARAMETER_TO_ENV_KEY[key]
        except KeyError as exc:  # pragma: no cover
            raise TypeError(f"Unknown client parameter '{key}'") from exc
        overrides[env_key] = _stringify(value)
    return overrides


@dataclass(frozen=True)
class ClientConfig:
    """
    Resolved, immutable settings shared by every call a client makes.

    The API key, transport and reporter are left out of ``repr`` so configs can
    be logged safely.
    """

    api_key: str = field(repr=False)
    base_url: str = BASE_URLS["production"]
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    transport: Transport = field(default_factory=HttpxTransport, repr=False, compare=False)
    reporter: Optional[Reporter] = field(default=None, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not self.api_key or not self.api_key.strip():
            raise ConfigError(
                "Missing ROTESSA_API_KEY. Provide api_key or set ROTESSA_API_KEY."
            )
        if self.timeout_ms <= 0:
            raise ConfigError(f"timeout_ms must be positive, got {self.timeout_ms}")
        if self.reporter is not None and (
            inspect.iscoroutinefunction(self.reporter)
            or inspect.iscoroutinefunction(getattr(self.reporter, "__call__", None))
        ):
            raise ConfigError("reporter must be a plain function; async reporters are never awaited")
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @property
    def timeout_seconds(self) -> float:
        return self.timeout_ms / 1000

    @property
    def authorization_header(self) -> str:
        return f'Token token="{self.api_key}"'

    @classmethod
    def from_mapping(
        cls,
        values: Mapping[str, str],
        *,
        transport: Optional[Transport] = None,
        reporter: Optional[Reporter] = None,
    ) -> "ClientConfig":
        api_key = values.get("ROTESSA_API_KEY")
        if api_key is None or not api_key.strip():
            raise ConfigError(
                "Missing ROTESSA_API_KEY. Provide api_key or set ROTESSA_API_KEY."
            )

        base_url = values.get("ROTESSA_API_BASE_URL", "").strip()
        if not base_url:
            base_url = _base_url_for(values.get("ROTESSA_ENVIRONMENT") or "production")

        timeout_ms = _environment_timeout(values.get("ROTESSA_TIMEOUT_MS"))

        return cls(
            api_key=api_key.strip(),
            base_url=base_url,
            timeout_ms=timeout_ms,
            transport=transport if transport is not None else HttpxTransport(),
            reporter=reporter,
        )

    @classmethod
    def from_env(
        cls,
        *,
        env_file: Optional[str] = ".env",
        overrides: Optional[Mapping[str, str]] = None,
        base: Optional[Mapping[str, str]] = None,
        parameters: Optional[ClientParameters] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout_ms: Optional[Union[int, str]] = None,
        environment: Optional[str] = None,
        transport: Optional[Transport] = None,
        reporter: Optional[Reporter] = None,
    ) -> "ClientConfig":
        parameter_overrides = _collect_parameter_overrides(
            parameters,
            {
                "api_key": api_key,
                "base_url": base_url,
                "timeout_ms": timeout_ms,
                "environment": environment,
            },
        )
        merged_overrides = dict(overrides or {})
        merged_overrides.update(parameter_overrides)

        env = build_environment(
            env_file=env_file,
            base=base,
            overrides=merged_overrides,
        )
        return cls.from_mapping(env.variables, transport=transport, reporter=reporter)


def load_client_config(
    *,
    env_file: Optional[str] = ".env",
    overrides: Optional[Mapping[str, str]] = None,
    base: Optional[Mapping[str, str]] = None,
    parameters: Optional[ClientParameters] = None,
    api_key: Optional[str] = None,
    base_url: Optional[str] = None,
    timeout_ms: Optional[Union[int, str]] = None,
    environment: Optional[str] = None,
    transport: Optional[Transport] = None,
    reporter: Optional[Reporter] = None,
) -> ClientConfig:
    """
    Convenience wrapper that mirrors :meth:`ClientConfig.from_env`.

    The configuration can be provided entirely through environment variables,
    a ``.env`` file, direct keyword arguments, or any combination of the three.
    Explicit arguments win over the environment, which wins over the defaults.
    """
    return ClientConfig.from_env(
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
