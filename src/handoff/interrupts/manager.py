"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Restart-durable interrupt/resume manager.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, replace
from typing import Any

from ..errors import InterruptPayloadError, InterruptStateError
from ..types import now_ms
from .cache import InterruptCache
from .store import InterruptStore
from .types import HumanResponse, Interrupt, InterruptPayload

logger = logging.getLogger("handoff.interrupts")


@dataclass(frozen=True, slots=True)
class InterruptManagerConfig:
    """
    Interrupt manager tuning.

    Attributes:
        wait_timeout_s: Default ceiling for ``wait_for_response``.
        poll_interval_s: Default poll interval for ``wait_for_response``.
        enforce_allowed_responses: Reject response kinds the payload's
            config does not allow.
    """

    wait_timeout_s: float = 300.0
    poll_interval_s: float = 0.5
    enforce_allowed_responses: bool = True


class InterruptManager:
    """
    Track pending human approvals keyed by execution id.

    State machine: ``pending -> approved | rejected``. A response is the only
    transition out of ``pending`` and a second response fails with
    ``InterruptStateError``.

    Interrupts stored with a ``user_id`` are written through to the durable
    store and can be recovered after a restart. Interrupts without one live
    only in memory.

    Args:
        store: Durable store, or ``None`` for memory-only operation.
        config: Wait defaults and response checks.
    """

    def __init__(
        self,
        store: InterruptStore | None = None,
        *,
        config: InterruptManagerConfig | None = None,
    ) -> None:
        self._cache = InterruptCache(store)
        self._config = config or InterruptManagerConfig()
        self._locks: dict[str, asyncio.Lock] = {}

    @property
    def store(self) -> InterruptStore | None:
        return self._cache.store

    def _lock_for(self, execution_id: str) -> asyncio.Lock:
        lock = self._locks.get(execution_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[execution_id] = lock
        return lock

    async def store_interrupt(
        self,
        execution_id: str,
        thread_id: str,
        payload: InterruptPayload | dict[str, Any],
        user_id: str | None = None,
        agent_id: str | None = None,
    ) -> Interrupt:
        """
        Record a new pending interrupt.

        Args:
            execution_id: Paused execution.
            thread_id: Conversation thread.
            payload: Action awaiting approval (object or wire dict).
            user_id: Owning user; without it the interrupt is not persisted.
            agent_id: Agent raising the interrupt.

        Raises:
            InterruptPayloadError: If the payload is malformed.
            InterruptStateError: If an interrupt already exists for the
                execution, pending or resolved.
            InterruptStoreError: If the durable write fails.
        """
        if not execution_id:
            raise InterruptPayloadError("execution_id must be non-empty")
        parsed = (
            payload
            if isinstance(payload, InterruptPayload)
            else InterruptPayload.from_dict(payload)
        )
        interrupt = Interrupt(
            execution_id=execution_id,
            thread_id=thread_id,
            payload=parsed,
            user_id=user_id,
            agent_id=agent_id,
        )
        async with self._lock_for(execution_id):
            existing = await self._cache.get(execution_id)
            if existing is not None:
                raise InterruptStateError(execution_id, existing.status)
            await self._cache.put_new(interrupt)
        if user_id is None:
            logger.warning(
                "Interrupt %s stored without user_id; it will not survive a restart",
                execution_id,
            )
        logger.info(
            "Stored interrupt execution_id=%s thread_id=%s action=%s",
            execution_id,
            thread_id,
            parsed.action_request.action,
        )
        return interrupt

    async def get_interrupt(self, execution_id: str) -> Interrupt | None:
        """Return the interrupt from memory, falling back to the durable store."""
        return await self._cache.get(execution_id)

    async def update_interrupt_response(
        self, execution_id: str, response: HumanResponse | dict[str, Any]
    ) -> Interrupt | None:
        """
        Attach a human response and resolve the interrupt.

        Returns:
            The updated interrupt, or ``None`` when no interrupt exists.

        Raises:
            InterruptStateError: If the interrupt is no longer pending.
            InterruptPayloadError: If the response kind is malformed or not
                allowed by the interrupt's config.
            InterruptStoreError: If the durable write fails.
        """
        parsed = (
            response
            if isinstance(response, HumanResponse)
            else HumanResponse.from_dict(response)
        )
        async with self._lock_for(execution_id):
            current = await self._cache.get(execution_id)
            if current is None:
                logger.error("No interrupt found for execution_id=%s", execution_id)
                return None
            if not current.is_pending:
                raise InterruptStateError(execution_id, current.status)
            if (
                self._config.enforce_allowed_responses
                and not current.payload.config.allows(parsed.type)
            ):
                raise InterruptPayloadError(
                    f"Response type '{parsed.type}' is not allowed for interrupt "
                    f"'{execution_id}'"
                )

            resolved_at = now_ms()
            updated = replace(
                current,
                response=parsed,
                status=parsed.status_for(),
                resolved_at=resolved_at,
                updated_at=resolved_at,
            )
            await self._cache.write(
                updated,
                {
                    "status": updated.status,
                    "response": parsed.to_dict(),
                    "updated_at": resolved_at,
                    "resolved_at": resolved_at,
                },
            )
        # Resolution is terminal for this key.
        self._locks.pop(execution_id, None)

        logger.info(
            "Updated interrupt execution_id=%s response=%s status=%s",
            execution_id,
            parsed.type,
            updated.status,
        )
        return updated

    async def has_pending_interrupt(self, execution_id: str) -> bool:
        interrupt = await self._cache.get(execution_id)
        return interrupt is not None and interrupt.is_pending

    def list_pending(self) -> list[Interrupt]:
        """Pending interrupts currently held in memory."""
        return [item for item in self._cache.cached() if item.is_pending]

    def clear_interrupt(self, execution_id: str) -> bool:
        """
        Drop an interrupt from memory once its caller observed the outcome.

        The durable record is kept.
        """
        self._locks.pop(execution_id, None)
        removed = self._cache.evict(execution_id)
        if removed:
            logger.debug("Cleared interrupt for execution_id=%s", execution_id)
        return removed

    def clear_all(self) -> None:
        """Drop every in-memory interrupt, as a process restart would."""
        self._cache.clear()
        self._locks.clear()

    async def wait_for_response(
        self,
        execution_id: str,
        *,
        timeout_s: float | None = None,
        poll_interval_s: float | None = None,
    ) -> HumanResponse | None:
        """
        Poll until a response is attached.

        Returns:
            The response, or ``None`` on timeout or when the interrupt
            disappears.
        """
        timeout = self._config.wait_timeout_s if timeout_s is None else timeout_s
        interval = (
            self._config.poll_interval_s if poll_interval_s is None else poll_interval_s
        )
        deadline = time.monotonic() + timeout
        while True:
            interrupt = await self._cache.get(execution_id)
            if interrupt is None:
                logger.error("Interrupt disappeared during wait: %s", execution_id)
                return None
            if interrupt.response is not None:
                return interrupt.response
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                logger.warning(
                    "Timeout waiting for interrupt response: %s (%.1fs)",
                    execution_id,
                    timeout,
                )
                return None
            await asyncio.sleep(min(interval, remaining))
