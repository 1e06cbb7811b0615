"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Read-through / write-through cache over a durable interrupt store.
"""

from __future__ import annotations

import logging

from .store import InterruptRecord, InterruptStore
from .types import Interrupt

logger = logging.getLogger("handoff.interrupts")


class InterruptCache:
    """
    Process-memory tier over an optional durable store.

    Memory is only a cache. Reads fall through to the store on a miss and
    populate memory with the result. Writes go to memory and, for durable
    interrupts, to the store. Store errors propagate.

    Args:
        store: Durable store, or ``None`` for memory-only operation.
    """

    def __init__(self, store: InterruptStore | None = None) -> None:
        self._store = store
        self._entries: dict[str, Interrupt] = {}

    @property
    def store(self) -> InterruptStore | None:
        return self._store

    def peek(self, execution_id: str) -> Interrupt | None:
        """Return the cached entry without touching the store."""
        return self._entries.get(execution_id)

    async def get(self, execution_id: str) -> Interrupt | None:
        cached = self._entries.get(execution_id)
        if cached is not None:
            logger.debug("Interrupt cache hit: %s", execution_id)
            return cached
        if self._store is None:
            return None

        record = await self._store.get_by_execution_id(execution_id)
        if record is None:
            return None
        interrupt = Interrupt.from_record(record)
        # A concurrent reader may have populated the entry while we awaited.
        existing = self._entries.setdefault(execution_id, interrupt)
        logger.info("Restored interrupt from durable store: %s", execution_id)
        return existing

    async def put_new(self, interrupt: Interrupt) -> None:
        """Insert a new interrupt in memory and, when durable, in the store."""
        if interrupt.is_durable and self._store is not None:
            await self._store.insert(interrupt.to_record())
        self._entries[interrupt.execution_id] = interrupt

    async def write(self, interrupt: Interrupt, patch: InterruptRecord) -> None:
        """Apply an already-mutated interrupt to both tiers."""
        if interrupt.is_durable and self._store is not None:
            await self._store.update_by_execution_id(interrupt.execution_id, patch)
        self._entries[interrupt.execution_id] = interrupt

    def evict(self, execution_id: str) -> bool:
        return self._entries.pop(execution_id, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def cached(self) -> list[Interrupt]:
        return list(self._entries.values())
