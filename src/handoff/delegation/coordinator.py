"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Single-flight delegation coordinator driven by event bus completion signals.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any

from ..errors import (
    DelegationClosedError,
    DelegationFailedError,
    DelegationTimeoutError,
)
from ..events import (
    DELEGATION_COMPLETED,
    DELEGATION_FAILED,
    DELEGATION_PROGRESS,
    DELEGATION_REQUESTED,
    BusEvent,
    EventBus,
)
from ..registry import ExecutionRegistry
from .history import DelegationHistory
from .metrics import (
    METRIC_DELEGATIONS_COMPLETED,
    METRIC_DELEGATIONS_DEDUPLICATED,
    METRIC_DELEGATIONS_FAILED,
    METRIC_DELEGATIONS_REQUESTED,
    DelegationMetrics,
    NoOpDelegationMetrics,
)
from .types import (
    CoordinatorConfig,
    DelegationRequest,
    DelegationResult,
    delegation_key,
)

logger = logging.getLogger("handoff.delegation")


def _iso_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class DelegationCoordinator:
    """
    Deduplicate concurrent delegations and resolve them from completion events.

    The coordinator never executes agents. It publishes
    ``delegation.requested`` and waits for a matching
    ``delegation.completed`` (or ``delegation.failed``) published by the
    agent-execution runtime. Concurrent requests with the same dedup key share
    one in-flight wait and receive the same ``DelegationResult``.

    Args:
        bus: Event bus used for requests, progress, and completion signals.
        config: Timeout, history, and keying options.
        metrics: Optional counter sink.
        registry: Optional execution registry receiving progress steps for
            the source execution.
        clock: Monotonic clock used by the history map.
    """

    def __init__(
        self,
        bus: EventBus,
        *,
        config: CoordinatorConfig | None = None,
        metrics: DelegationMetrics | None = None,
        registry: ExecutionRegistry | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._bus = bus
        self._config = config or CoordinatorConfig()
        self._metrics = metrics or NoOpDelegationMetrics()
        self._registry = registry
        self._inflight: dict[str, asyncio.Task[DelegationResult]] = {}
        self._history = DelegationHistory(
            ttl_s=self._config.history_ttl_s,
            max_entries=self._config.history_max_entries,
            clock=clock,
        )
        self._closed = False

    @property
    def config(self) -> CoordinatorConfig:
        return self._config

    @property
    def active_count(self) -> int:
        """Number of delegations currently waiting for completion."""
        return len(self._inflight)

    def key_for(self, request: DelegationRequest) -> str:
        return delegation_key(
            request.source_execution_id,
            request.source_agent,
            request.target_agent,
            task=request.task,
            include_task=self._config.key_includes_task,
        )

    def is_in_flight(self, key: str) -> bool:
        task = self._inflight.get(key)
        return task is not None and not task.done()

    async def delegate(self, request: DelegationRequest) -> DelegationResult:
        """
        Delegate a task, reusing any in-flight delegation with the same key.

        Never raises for delegation failures: timeouts, failure events, and
        unexpected errors all come back as ``DelegationResult(success=False)``.
        Cancelling one caller does not cancel the shared delegation.
        """
        if self._closed:
            return DelegationResult.failure(
                DelegationClosedError("Delegation coordinator is closed")
            )

        key = self.key_for(request)
        task = self._inflight.get(key)
        if task is not None and task.done():
            task = None
        if task is not None:
            logger.info("Reusing in-flight delegation: %s", key)
            self._metrics.incr(METRIC_DELEGATIONS_DEDUPLICATED)
        else:
            logger.debug(
                "Delegation requested key=%s source=%s target=%s",
                key,
                request.source_agent,
                request.target_agent,
            )
            self._metrics.incr(METRIC_DELEGATIONS_REQUESTED)
            task = asyncio.create_task(
                self._execute(key, request), name=f"delegation:{key}"
            )
            self._inflight[key] = task
            task.add_done_callback(lambda done, key=key: self._release(key, done))

        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled():
                return DelegationResult.failure(
                    asyncio.CancelledError(f"Delegation {key} was cancelled")
                )
            raise
        except Exception as exc:  # pragma: no cover - _execute converts errors
            logger.exception("Unexpected delegation error: %s", key)
            return DelegationResult.failure(exc)

    async def _execute(self, key: str, request: DelegationRequest) -> DelegationResult:
        loop = asyncio.get_running_loop()
        outcome: asyncio.Future[DelegationResult] = loop.create_future()

        def _on_completed(event: BusEvent) -> None:
            if outcome.done() or self._event_key(event) != key:
                return
            payload = event.payload
            outcome.set_result(
                DelegationResult.ok(
                    payload.get("result"),
                    target_agent=payload.get("targetAgent"),
                    continuation_hint=payload.get("continuationHint"),
                )
            )

        def _on_failed(event: BusEvent) -> None:
            if outcome.done() or self._event_key(event) != key:
                return
            reason = event.payload.get("error") or event.payload.get("message")
            outcome.set_exception(
                DelegationFailedError(key, str(reason or "unknown error"))
            )

        # Waiters go in before the request is published so a runtime that
        # completes synchronously inside publish() is still observed.
        completed_sub = self._bus.subscribe(DELEGATION_COMPLETED, _on_completed)
        failed_sub = self._bus.subscribe(DELEGATION_FAILED, _on_failed)
        try:
            self._bus.publish(
                DELEGATION_REQUESTED,
                {
                    "sourceAgent": request.source_agent,
                    "targetAgent": request.target_agent,
                    "task": request.task,
                    "context": request.context,
                    "handoffMessage": request.handoff_message,
                    "priority": request.priority,
                    "sourceExecutionId": request.source_execution_id,
                    "userId": request.user_id,
                    "conversationHistory": list(request.conversation_history),
                    "timestamp": _iso_now(),
                },
            )
            self._publish_progress(
                request, "starting", f"Delegating to {request.target_agent}..."
            )
            self._record_step(
                request,
                f"{request.source_agent} delegated task to {request.target_agent}",
                status="in_progress",
            )

            try:
                result = await asyncio.wait_for(outcome, timeout=self._config.timeout_s)
            except asyncio.TimeoutError as exc:
                raise DelegationTimeoutError(key, self._config.timeout_s) from exc

            self._history.record(key, result)
            self._publish_progress(
                request, "completed", f"{request.target_agent} completed the task"
            )
            self._record_step(
                request,
                f"{request.target_agent} completed the delegated task",
                status="completed",
            )
            self._metrics.incr(METRIC_DELEGATIONS_COMPLETED)
            logger.info("Delegation succeeded: %s", key)
            return result
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if isinstance(exc, DelegationTimeoutError):
                logger.warning("Delegation timed out: %s", key)
            else:
                logger.exception("Delegation failed: %s", key)
            failure = DelegationResult.failure(exc)
            self._history.record(key, failure)
            self._publish_progress(
                request, "failed", f"{request.target_agent} failed: {exc}"
            )
            self._record_step(
                request,
                f"{request.target_agent} failed the delegated task",
                status="failed",
            )
            self._metrics.incr(
                METRIC_DELEGATIONS_FAILED, tags={"reason": _failure_reason(exc)}
            )
            return failure
        finally:
            completed_sub.unsubscribe()
            failed_sub.unsubscribe()
            if self._inflight.get(key) is asyncio.current_task():
                del self._inflight[key]
                logger.debug("Delegation removed from active set: %s", key)

    def _release(self, key: str, task: asyncio.Task[DelegationResult]) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]
            logger.debug("Delegation removed from active set: %s", key)

    def _event_key(self, event: BusEvent) -> str:
        payload = event.payload
        return delegation_key(
            payload.get("sourceExecutionId"),
            payload.get("sourceAgent"),
            payload.get("targetAgent"),
            task=payload.get("task"),
            include_task=self._config.key_includes_task,
        )

    def _publish_progress(
        self, request: DelegationRequest, status: str, message: str
    ) -> None:
        self._bus.publish(
            DELEGATION_PROGRESS,
            {
                "sourceAgent": request.source_agent,
                "targetAgent": request.target_agent,
                "sourceExecutionId": request.source_execution_id,
                "task": request.task,
                "status": status,
                "message": message,
                "timestamp": _iso_now(),
            },
        )

    def _record_step(
        self, request: DelegationRequest, message: str, *, status: str
    ) -> None:
        if self._registry is None or request.source_execution_id is None:
            return
        if request.source_execution_id not in self._registry:
            return
        self._registry.add_step(
            request.source_execution_id,
            message,
            metadata={
                "action": "delegating",
                "sourceAgent": request.source_agent,
                "delegatedTo": request.target_agent,
                "task": request.task,
                "status": status,
            },
        )

    # ------------------------------------------------------------------
    # Completion helpers for the agent-execution runtime
    # ------------------------------------------------------------------

    def complete(
        self,
        source_agent: str,
        target_agent: str,
        result: Any,
        *,
        source_execution_id: str | None = None,
        task: str | None = None,
        continuation_hint: str | None = None,
    ) -> None:
        """Publish ``delegation.completed`` with the canonical payload."""
        self._bus.publish(
            DELEGATION_COMPLETED,
            {
                "sourceAgent": source_agent,
                "targetAgent": target_agent,
                "sourceExecutionId": source_execution_id,
                "task": task,
                "status": "completed",
                "result": result,
                "continuationHint": continuation_hint,
                "timestamp": _iso_now(),
            },
        )

    def fail(
        self,
        source_agent: str,
        target_agent: str,
        error: str,
        *,
        source_execution_id: str | None = None,
        task: str | None = None,
    ) -> None:
        """Publish ``delegation.failed`` so waiters resolve before the timeout."""
        self._bus.publish(
            DELEGATION_FAILED,
            {
                "sourceAgent": source_agent,
                "targetAgent": target_agent,
                "sourceExecutionId": source_execution_id,
                "task": task,
                "status": "failed",
                "error": error,
                "timestamp": _iso_now(),
            },
        )

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def get_history(self) -> dict[str, DelegationResult]:
        """Return a copy of recent outcomes keyed by dedup key."""
        return self._history.snapshot()

    def clear_history(self) -> None:
        self._history.clear()
        logger.debug("Delegation history cleared")

    async def close(self) -> None:
        """
        Stop accepting delegations and cancel in-flight waits.

        Callers still awaiting a cancelled delegation receive a failure result.
        """
        self._closed = True
        tasks = list(self._inflight.values())
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)


def _failure_reason(exc: BaseException) -> str:
    if isinstance(exc, DelegationTimeoutError):
        return "timeout"
    if isinstance(exc, DelegationFailedError):
        return "failed_event"
    return "error"
