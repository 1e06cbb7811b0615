"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

In-memory execution registry.
"""

from __future__ import annotations

from typing import Any

from ..types import JSONValue, now_ms
from .types import ExecutionRecord, ExecutionStatus, ExecutionStep


class ExecutionRegistry:
    """
    Map from execution id to ``ExecutionRecord``.

    Holds no coordination logic. Terminal records reject further status
    transitions with ``ValueError``; steps may still be appended.
    """

    def __init__(self) -> None:
        self._records: dict[str, ExecutionRecord] = {}

    def create(self, execution_id: str | None = None, **fields: Any) -> ExecutionRecord:
        """
        Register a new pending record.

        Raises:
            ValueError: If the execution id is already registered.
        """
        if execution_id is not None:
            fields["execution_id"] = execution_id
        record = ExecutionRecord(**fields)
        if record.execution_id in self._records:
            raise ValueError(f"Execution '{record.execution_id}' is already registered")
        self._records[record.execution_id] = record
        return record

    def get(self, execution_id: str) -> ExecutionRecord | None:
        return self._records.get(execution_id)

    def require(self, execution_id: str) -> ExecutionRecord:
        """Return record or raise ``KeyError``."""
        record = self._records.get(execution_id)
        if record is None:
            raise KeyError(f"Execution '{execution_id}' not found")
        return record

    def add_step(
        self,
        execution_id: str,
        message: str,
        *,
        metadata: dict[str, JSONValue] | None = None,
    ) -> ExecutionStep:
        record = self.require(execution_id)
        step = ExecutionStep(message=message, metadata=dict(metadata or {}))
        record.steps.append(step)
        record.updated_at = now_ms()
        return step

    def mark_running(self, execution_id: str) -> ExecutionRecord:
        return self._transition(execution_id, "running")

    def complete(self, execution_id: str, result: Any = None) -> ExecutionRecord:
        record = self._transition(execution_id, "completed")
        record.result = result
        return record

    def fail(self, execution_id: str, error: str) -> ExecutionRecord:
        record = self._transition(execution_id, "failed")
        record.error = error
        return record

    def cancel(self, execution_id: str) -> ExecutionRecord:
        return self._transition(execution_id, "cancelled")

    def remove(self, execution_id: str) -> bool:
        return self._records.pop(execution_id, None) is not None

    def list(
        self, *, status: ExecutionStatus | None = None, limit: int = 100
    ) -> list[ExecutionRecord]:
        """List records with optional status filter, in creation order."""
        items = list(self._records.values())
        if status is not None:
            items = [r for r in items if r.status == status]
        return items[:limit]

    def _transition(self, execution_id: str, status: ExecutionStatus) -> ExecutionRecord:
        record = self.require(execution_id)
        if record.is_terminal:
            raise ValueError(
                f"Execution '{execution_id}' is already {record.status}"
            )
        record.status = status
        record.updated_at = now_ms()
        return record

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, execution_id: object) -> bool:
        return execution_id in self._records
