"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Execution record types.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal

from ..types import JSONValue, new_id, now_ms

ExecutionStatus = Literal["pending", "running", "completed", "failed", "cancelled"]

TERMINAL_STATUSES: frozenset[str] = frozenset({"completed", "failed", "cancelled"})


@dataclass(frozen=True, slots=True)
class ExecutionStep:
    """One free-form progress step appended to an execution record."""

    message: str
    timestamp_ms: int = field(default_factory=now_ms)
    metadata: dict[str, JSONValue] = field(default_factory=dict)


@dataclass(slots=True)
class ExecutionRecord:
    """
    Mutable state for one agent execution.

    Attributes:
        execution_id: Unique execution identifier.
        status: Current lifecycle status.
        steps: Progress steps in append order.
        result: Final result after completion.
        error: Error message on failure.
        user_id: Optional owning user.
        agent_id: Optional executing agent.
        metadata: Optional JSON-safe metadata.
        created_at: Epoch ms when the record was created.
        updated_at: Epoch ms of the last mutation.
    """

    execution_id: str = field(default_factory=new_id)
    status: ExecutionStatus = "pending"
    steps: list[ExecutionStep] = field(default_factory=list)
    result: Any = None
    error: str | None = None
    user_id: str | None = None
    agent_id: str | None = None
    metadata: dict[str, JSONValue] = field(default_factory=dict)
    created_at: int = field(default_factory=now_ms)
    updated_at: int = field(default_factory=now_ms)

    @property
    def is_terminal(self) -> bool:
        """Whether the execution has reached a terminal state."""
        return self.status in TERMINAL_STATUSES
