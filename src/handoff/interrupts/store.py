"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Durable interrupt store contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..types import JSONValue

InterruptRecord = dict[str, JSONValue]


class InterruptStore(ABC):
    """
    Narrow persistence contract used by the interrupt manager.

    Records use the field set produced by ``Interrupt.to_record()`` and are
    keyed by ``execution_id``. No cross-key transactions are assumed.
    """

    async def setup(self) -> None:
        """Prepare connections or schema. Default is a no-op."""

    async def close(self) -> None:
        """Release resources. Default is a no-op."""

    @abstractmethod
    async def insert(self, record: InterruptRecord) -> None:
        """
        Persist a new interrupt record, overwriting any row with the same key.

        Raises:
            InterruptStoreError: If the write fails.
        """
        ...

    @abstractmethod
    async def get_by_execution_id(self, execution_id: str) -> InterruptRecord | None:
        """
        Load one record by execution id.

        Returns:
            Record dict, or ``None`` when absent.
        """
        ...

    @abstractmethod
    async def update_by_execution_id(
        self, execution_id: str, patch: InterruptRecord
    ) -> None:
        """
        Merge ``patch`` into an existing record.

        Raises:
            InterruptStoreError: If the record is absent or the write fails.
        """
        ...
