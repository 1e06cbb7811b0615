"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Durable interrupt store adapters.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .in_memory import InMemoryInterruptStore

RedisInterruptStore = None  # type: ignore[assignment]

__all__ = [
    "InMemoryInterruptStore",
    "RedisInterruptStore",
]

try:
    from .redis import RedisInterruptStore as _RedisInterruptStore
except ModuleNotFoundError:  # optional dependency: redis
    pass
else:
    RedisInterruptStore = _RedisInterruptStore

if TYPE_CHECKING:
    from .redis import RedisInterruptStore
