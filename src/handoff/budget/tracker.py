"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Per-execution budget tracker polled by the runtime between steps.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from .types import (
    APPROACHING_LIMIT_PCT,
    BudgetStats,
    BudgetStatus,
    BudgetUtilization,
    ExecutionBudget,
    RemainingBudget,
)

logger = logging.getLogger("handoff.budget")

_TIME_RECOMMENDATIONS = (
    "Finalize with available results",
    "Consider breaking task into smaller chunks",
    "Check for infinite loops in tool calls",
)
_TOOL_RECOMMENDATIONS = (
    "Summarize results from completed tool calls",
    "Avoid redundant tool executions",
    "Use caching for repeated queries",
)
_CYCLE_RECOMMENDATIONS = (
    "Provide final answer with current information",
    "Check for reasoning loops",
    "Simplify task requirements",
)


def _pct(used: float, limit: float) -> float:
    return min(100.0, max(0.0, used * 100.0 / limit))


class BudgetTracker:
    """
    Track elapsed time, tool calls, and reasoning cycles for one execution.

    The tracker never stops anything itself. The runtime calls
    ``check_budget()`` at safe points and decides what to do.

    Args:
        budget: Limits for this execution.
        clock: Monotonic clock returning seconds; injectable for tests.
    """

    def __init__(
        self,
        budget: ExecutionBudget,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._budget = budget
        self._clock = clock
        self._started_at_s = clock()
        self._tool_calls = 0
        self._cycles = 0
        logger.debug("Budget tracker initialized with %s", budget)

    @property
    def budget(self) -> ExecutionBudget:
        return self._budget

    @property
    def tool_calls(self) -> int:
        return self._tool_calls

    @property
    def cycles(self) -> int:
        return self._cycles

    @property
    def elapsed_s(self) -> float:
        """Seconds since the tracker was created."""
        return max(0.0, self._clock() - self._started_at_s)

    def record_tool_call(self) -> None:
        self._tool_calls += 1
        logger.debug(
            "Tool call recorded (%d/%d)", self._tool_calls, self._budget.max_tool_calls
        )

    def record_agent_cycle(self) -> None:
        self._cycles += 1
        logger.debug(
            "Agent cycle recorded (%d/%d)", self._cycles, self._budget.max_agent_cycles
        )

    def check_budget(self) -> BudgetStatus:
        """
        Check limits in order: time, tool calls, cycles.

        Time is exceeded only once elapsed is strictly over the limit; counters
        are exceeded as soon as they reach their limit.
        """
        elapsed = self.elapsed_s
        budget = self._budget
        if elapsed > budget.max_execution_s:
            return BudgetStatus(
                exceeded=True,
                reason=(
                    f"Time limit exceeded ({int(elapsed)}s / {budget.max_execution_s:g}s)"
                ),
                recommendations=list(_TIME_RECOMMENDATIONS),
            )
        if self._tool_calls >= budget.max_tool_calls:
            return BudgetStatus(
                exceeded=True,
                reason=(
                    f"Tool call limit exceeded ({self._tool_calls} / {budget.max_tool_calls})"
                ),
                recommendations=list(_TOOL_RECOMMENDATIONS),
            )
        if self._cycles >= budget.max_agent_cycles:
            return BudgetStatus(
                exceeded=True,
                reason=(
                    f"Agent cycle limit exceeded ({self._cycles} / {budget.max_agent_cycles})"
                ),
                recommendations=list(_CYCLE_RECOMMENDATIONS),
            )
        return BudgetStatus(exceeded=False)

    def get_utilization(self) -> BudgetUtilization:
        budget = self._budget
        return BudgetUtilization(
            time=_pct(self.elapsed_s, budget.max_execution_s),
            tool_calls=_pct(self._tool_calls, budget.max_tool_calls),
            cycles=_pct(self._cycles, budget.max_agent_cycles),
        )

    def get_remaining(self) -> RemainingBudget:
        budget = self._budget
        return RemainingBudget(
            time_s=max(0.0, budget.max_execution_s - self.elapsed_s),
            tool_calls=max(0, budget.max_tool_calls - self._tool_calls),
            cycles=max(0, budget.max_agent_cycles - self._cycles),
        )

    def get_stats(self) -> BudgetStats:
        return BudgetStats(
            elapsed_s=self.elapsed_s,
            tool_calls=self._tool_calls,
            cycles=self._cycles,
            budget=self._budget,
            utilization=self.get_utilization(),
        )

    def is_approaching_limit(self) -> bool:
        """Return `True` when any utilization is above 80%."""
        return self.get_utilization().highest() > APPROACHING_LIMIT_PCT

    def get_warning(self) -> str | None:
        """Return a warning listing every limit above 80%, or `None`."""
        utilization = self.get_utilization()
        parts: list[str] = []
        if utilization.time > APPROACHING_LIMIT_PCT:
            parts.append(f"Time: {utilization.time:.1f}%")
        if utilization.tool_calls > APPROACHING_LIMIT_PCT:
            parts.append(f"Tool calls: {utilization.tool_calls:.1f}%")
        if utilization.cycles > APPROACHING_LIMIT_PCT:
            parts.append(f"Cycles: {utilization.cycles:.1f}%")
        if not parts:
            return None
        return f"Budget warning - {', '.join(parts)}"
