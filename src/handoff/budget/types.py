"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Execution budget limits, presets, and status payloads.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

BudgetPresetName = Literal["tight", "standard", "extended"]

APPROACHING_LIMIT_PCT = 80.0


@dataclass(frozen=True, slots=True)
class ExecutionBudget:
    """
    Hard limits applied to one agent execution.

    Attributes:
        max_execution_s: Maximum wall-clock duration in seconds.
        max_tool_calls: Maximum number of tool invocations.
        max_agent_cycles: Maximum number of reasoning cycles (model calls).
    """

    max_execution_s: float
    max_tool_calls: int
    max_agent_cycles: int

    def __post_init__(self) -> None:
        if self.max_execution_s <= 0:
            raise ValueError("ExecutionBudget.max_execution_s must be > 0")
        if self.max_tool_calls < 1:
            raise ValueError("ExecutionBudget.max_tool_calls must be >= 1")
        if self.max_agent_cycles < 1:
            raise ValueError("ExecutionBudget.max_agent_cycles must be >= 1")

    @classmethod
    def preset(cls, name: str) -> ExecutionBudget:
        """Return a named preset (`tight`, `standard`, or `extended`)."""
        try:
            return BUDGET_PRESETS[name.strip().lower()]
        except KeyError:
            raise ValueError(
                f"Unknown budget preset '{name}'; expected one of {sorted(BUDGET_PRESETS)}"
            ) from None


TIGHT_BUDGET = ExecutionBudget(max_execution_s=30.0, max_tool_calls=5, max_agent_cycles=5)
STANDARD_BUDGET = ExecutionBudget(
    max_execution_s=120.0, max_tool_calls=20, max_agent_cycles=15
)
EXTENDED_BUDGET = ExecutionBudget(
    max_execution_s=300.0, max_tool_calls=50, max_agent_cycles=30
)

BUDGET_PRESETS: dict[str, ExecutionBudget] = {
    "tight": TIGHT_BUDGET,
    "standard": STANDARD_BUDGET,
    "extended": EXTENDED_BUDGET,
}


@dataclass(frozen=True, slots=True)
class BudgetStatus:
    """
    Result of one budget check.

    Attributes:
        exceeded: Whether any limit has been reached.
        reason: Human-readable description of the first exceeded limit.
        recommendations: Remediation suggestions for the caller.
    """

    exceeded: bool
    reason: str | None = None
    recommendations: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class BudgetUtilization:
    """Per-limit utilization percentages, each clamped to [0, 100]."""

    time: float
    tool_calls: float
    cycles: float

    def highest(self) -> float:
        return max(self.time, self.tool_calls, self.cycles)


@dataclass(frozen=True, slots=True)
class RemainingBudget:
    """Budget headroom, floored at zero."""

    time_s: float
    tool_calls: int
    cycles: int


@dataclass(frozen=True, slots=True)
class BudgetStats:
    """Snapshot of tracker counters for logs and run summaries."""

    elapsed_s: float
    tool_calls: int
    cycles: int
    budget: ExecutionBudget
    utilization: BudgetUtilization
