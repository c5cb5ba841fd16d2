"""
Layering of process variables, a ``.env`` file and explicit overrides into the
flat mapping that :meth:`rotessa_client.core.config.ClientConfig.from_mapping`
reads ``ROTESSA_*`` settings from.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Mapping, MutableMapping, Optional, Tuple

__all__ = [
    "RotessaEnvironment",
    "build_environment",
    "load_env_file",
]

_QUOTES = ("'", '"')


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] in _QUOTES and value[-1] == value[0]:
        return value[1:-1]
    return value


def _iter_assignments(text: str) -> Iterator[Tuple[str, str]]:
    """Yield ``KEY=VALUE`` pairs, accepting shell-style ``export`` lines."""
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if line.startswith("export "):
            line = line[len("export "):].lstrip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep or not key:
            continue
        yield key, _unquote(value.strip())


def load_env_file(
    path: str = ".env",
    *,
    environ: Optional[MutableMapping[str, str]] = None,
) -> Dict[str, str]:
    """
    Fill ``environ`` (default :data:`os.environ`) with the settings in ``path``.

    A missing file is treated as empty and keys already present in ``environ``
    keep their value. Returns a copy of the resulting mapping.
    """
    target: MutableMapping[str, str] = os.environ if environ is None else environ
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        return dict(target)
    for key, value in _iter_assignments(text):
        target.setdefault(key, value)
    return dict(target)


@dataclass(frozen=True)
class RotessaEnvironment:
    """Snapshot of the variables a client configuration is resolved from."""

    variables: Mapping[str, str]

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key, default)


def build_environment(
    *,
    env_file: Optional[str] = ".env",
    base: Optional[Mapping[str, str]] = None,
    overrides: Optional[Mapping[str, str]] = None,
) -> RotessaEnvironment:
    """
    Resolve variables with precedence ``overrides`` > ``base`` > ``env_file``.

    ``base`` defaults to :data:`os.environ`; pass ``{}`` to ignore the process
    environment. ``env_file=None`` skips file loading. Neither ``base`` nor the
    process environment is modified.
    """
    merged: Dict[str, str] = dict(os.environ if base is None else base)
    if env_file is not None:
        merged = load_env_file(env_file, environ=merged)
    merged.update(overrides or {})
    return RotessaEnvironment(variables=merged)
