"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

In-memory interrupt store.
"""

from __future__ import annotations

import copy

from ...errors import InterruptStoreError
from ..store import InterruptRecord, InterruptStore


class InMemoryInterruptStore(InterruptStore):
    """
    Dict-backed store for tests and single-process deployments.

    Records live as long as this object does, independent of the
    interrupt manager's cache, so clearing the manager simulates a restart.
    """

    def __init__(self) -> None:
        self._records: dict[str, InterruptRecord] = {}
        self.insert_calls = 0
        self.get_calls = 0
        self.update_calls = 0

    async def insert(self, record: InterruptRecord) -> None:
        self.insert_calls += 1
        execution_id = record.get("execution_id")
        if not isinstance(execution_id, str) or not execution_id:
            raise InterruptStoreError("Interrupt record requires 'execution_id'")
        self._records[execution_id] = copy.deepcopy(record)

    async def get_by_execution_id(self, execution_id: str) -> InterruptRecord | None:
        self.get_calls += 1
        record = self._records.get(execution_id)
        return copy.deepcopy(record) if record is not None else None

    async def update_by_execution_id(
        self, execution_id: str, patch: InterruptRecord
    ) -> None:
        self.update_calls += 1
        existing = self._records.get(execution_id)
        if existing is None:
            raise InterruptStoreError(f"Interrupt '{execution_id}' not found in store")
        existing.update(copy.deepcopy(patch))

    @property
    def records(self) -> dict[str, InterruptRecord]:
        """Snapshot of stored records keyed by execution id."""
        return copy.deepcopy(self._records)
