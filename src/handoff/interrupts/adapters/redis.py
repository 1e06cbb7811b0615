"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Redis-backed durable interrupt store.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from redis.exceptions import RedisError

from ...errors import InterruptStoreError
from ..store import InterruptRecord, InterruptStore

logger = logging.getLogger("handoff.interrupts.redis")


class RedisInterruptStore(InterruptStore):
    """
    Interrupt store using one Redis hash (``{prefix}:interrupts``).

    Each field is an execution id and each value the JSON record. Updates
    read, merge, and overwrite the field; there are no cross-key guarantees.

    Requires ``redis.asyncio`` (``pip install redis``).

    Args:
        redis: An ``redis.asyncio.Redis`` client instance.
        prefix: Key prefix for namespacing.
    """

    def __init__(self, redis: Any, *, prefix: str = "handoff") -> None:
        self._redis = redis
        self._prefix = prefix

    def _records_key(self) -> str:
        """Redis hash key storing serialized interrupt records."""
        return f"{self._prefix}:interrupts"

    def _serialize(self, record: InterruptRecord) -> str:
        return json.dumps(record, default=str, ensure_ascii=False)

    def _deserialize(self, raw: str | bytes) -> InterruptRecord:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise InterruptStoreError("Stored interrupt record is not an object")
        return data

    async def insert(self, record: InterruptRecord) -> None:
        execution_id = record.get("execution_id")
        if not isinstance(execution_id, str) or not execution_id:
            raise InterruptStoreError("Interrupt record requires 'execution_id'")
        try:
            await self._redis.hset(
                self._records_key(), execution_id, self._serialize(record)
            )
        except RedisError as exc:
            raise InterruptStoreError(
                f"Failed to insert interrupt '{execution_id}': {exc}"
            ) from exc

    async def get_by_execution_id(self, execution_id: str) -> InterruptRecord | None:
        try:
            raw = await self._redis.hget(self._records_key(), execution_id)
        except RedisError as exc:
            raise InterruptStoreError(
                f"Failed to load interrupt '{execution_id}': {exc}"
            ) from exc
        if raw is None:
            return None
        return self._deserialize(raw)

    async def update_by_execution_id(
        self, execution_id: str, patch: InterruptRecord
    ) -> None:
        existing = await self.get_by_execution_id(execution_id)
        if existing is None:
            raise InterruptStoreError(f"Interrupt '{execution_id}' not found in store")
        existing.update(patch)
        try:
            await self._redis.hset(
                self._records_key(), execution_id, self._serialize(existing)
            )
        except RedisError as exc:
            raise InterruptStoreError(
                f"Failed to update interrupt '{execution_id}': {exc}"
            ) from exc
        logger.debug("Updated interrupt record %s", execution_id)

    async def close(self) -> None:
        await self._redis.aclose()
