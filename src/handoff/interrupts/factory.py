"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Factory helpers for selecting interrupt store backends from environment variables.
"""

from __future__ import annotations

import os
from typing import Any

from ..config import env_first, redis_url_from_env
from ..errors import ConfigurationError
from .adapters.in_memory import InMemoryInterruptStore
from .store import InterruptStore


def create_interrupt_store_from_env(*, redis_client: Any | None = None) -> InterruptStore:
    """
    Create a durable interrupt store from `HANDOFF_INTERRUPT_*` variables.

    Backends:
    - `inmemory` (default)
    - `redis`

    Redis resolution:
    - Uses the provided `redis_client` when supplied.
    - Otherwise builds a client from `HANDOFF_INTERRUPT_REDIS_URL` (or
      `HANDOFF_REDIS_URL`), falling back to host/port/db/password variables.
    """
    backend = os.getenv("HANDOFF_INTERRUPT_BACKEND", "inmemory").strip().lower()

    if backend in ("mem", "memory", "inmemory", "in_memory"):
        return InMemoryInterruptStore()

    if backend in ("redis",):
        try:
            from .adapters.redis import RedisInterruptStore
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise ConfigurationError(
                "Redis interrupt backend requires `redis` to be installed."
            ) from exc

        prefix = env_first("HANDOFF_INTERRUPT_REDIS_PREFIX", default="handoff") or "handoff"
        client = redis_client
        if client is None:
            import redis.asyncio as redis

            client = redis.Redis.from_url(redis_url_from_env("HANDOFF_INTERRUPT"))
        return RedisInterruptStore(client, prefix=prefix)

    raise ConfigurationError(f"Unknown HANDOFF_INTERRUPT_BACKEND: {backend}")
