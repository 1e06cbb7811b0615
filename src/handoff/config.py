"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Environment variable helpers used by the backend factories.
"""

from __future__ import annotations

import os

from .errors import ConfigurationError

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def env_first(*names: str, default: str | None = None) -> str | None:
    """
    Return the first non-empty environment variable in `names`.

    Args:
        *names: Environment variable names to check in order.
        default: Value returned if no non-empty variable is found.
    """
    for name in names:
        raw = os.getenv(name)
        if raw is None:
            continue
        value = raw.strip()
        if value:
            return value
    return default


def env_float(name: str, default: float) -> float:
    raw = env_first(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from exc


def env_int(name: str, default: int) -> int:
    raw = env_first(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc


def env_bool(name: str, default: bool) -> bool:
    raw = env_first(name)
    if raw is None:
        return default
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise ConfigurationError(f"{name} must be a boolean flag, got {raw!r}")


def redis_url_from_env(prefix: str) -> str:
    """
    Resolve a Redis URL from `{prefix}_REDIS_*` then `HANDOFF_REDIS_*` variables.

    Falls back to host/port/db/password variables when no URL is set.
    """
    url = env_first(f"{prefix}_REDIS_URL", "HANDOFF_REDIS_URL")
    if url:
        return url
    host = (
        env_first(f"{prefix}_REDIS_HOST", "HANDOFF_REDIS_HOST", default="localhost")
        or "localhost"
    )
    port = env_first(f"{prefix}_REDIS_PORT", "HANDOFF_REDIS_PORT", default="6379") or "6379"
    db = env_first(f"{prefix}_REDIS_DB", "HANDOFF_REDIS_DB", default="0") or "0"
    password = (
        env_first(f"{prefix}_REDIS_PASSWORD", "HANDOFF_REDIS_PASSWORD", default="")
        or ""
    )
    if password:
        return f"redis://:{password}@{host}:{port}/{db}"
    return f"redis://{host}:{port}/{db}"
