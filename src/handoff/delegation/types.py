"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Delegation request/result contracts and dedup key derivation.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass, field
from typing import Any, Literal

DelegationPriority = Literal["low", "normal", "high"]

UNKNOWN_EXECUTION = "unknown"

_PRIORITY_ALIASES = {"medium": "normal"}
_PRIORITIES = ("low", "normal", "high")


def normalize_priority(value: str | None) -> DelegationPriority:
    """Map loose priority input onto `low` / `normal` / `high`."""
    if not value:
        return "normal"
    lowered = value.strip().lower()
    lowered = _PRIORITY_ALIASES.get(lowered, lowered)
    if lowered not in _PRIORITIES:
        raise ValueError(f"Unknown delegation priority '{value}'")
    return lowered  # type: ignore[return-value]


def delegation_key(
    source_execution_id: str | None,
    source_agent: str | None,
    target_agent: str | None,
    *,
    task: str | None = None,
    include_task: bool = False,
) -> str:
    """
    Build the single-flight key for one delegation.

    Format: ``{execution or 'unknown'}:{source}:{target}``. Task text is not
    part of the key unless ``include_task`` is set, in which case a short
    digest of it is appended.
    """
    key = (
        f"{source_execution_id or UNKNOWN_EXECUTION}:"
        f"{source_agent or 'unknown'}:{target_agent or 'unknown'}"
    )
    if include_task:
        digest = hashlib.sha256((task or "").encode("utf-8")).hexdigest()[:12]
        key = f"{key}:{digest}"
    return key


@dataclass(frozen=True, slots=True)
class DelegationRequest:
    """
    One request from a supervising agent to hand a sub-task to another agent.

    Attributes:
        source_agent: Delegating agent id.
        target_agent: Agent expected to perform the task.
        task: Task text.
        context: Optional structured context forwarded to the target.
        handoff_message: Optional message shown when the handoff happens.
        priority: `low`, `normal`, or `high` (`medium` is accepted as `normal`).
        source_execution_id: Execution that issued the delegation.
        user_id: Optional owning user.
        conversation_history: Prior conversation turns for the target.
    """

    source_agent: str
    target_agent: str
    task: str
    context: Any = None
    handoff_message: str | None = None
    priority: DelegationPriority = "normal"
    source_execution_id: str | None = None
    user_id: str | None = None
    conversation_history: list[Any] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.source_agent or not self.source_agent.strip():
            raise ValueError("DelegationRequest.source_agent must be non-empty")
        if not self.target_agent or not self.target_agent.strip():
            raise ValueError("DelegationRequest.target_agent must be non-empty")
        object.__setattr__(self, "priority", normalize_priority(self.priority))


@dataclass(frozen=True, slots=True)
class DelegationResult:
    """
    Outcome delivered to every caller sharing one delegation.

    Attributes:
        success: Whether the target agent reported completion.
        result: Opaque result payload on success.
        target_agent: Agent that completed the task.
        continuation_hint: Optional guidance for the caller's next step.
        error: Failure cause when `success` is `False`.
    """

    success: bool
    result: Any = None
    target_agent: str | None = None
    continuation_hint: str | None = None
    error: BaseException | None = None

    @classmethod
    def ok(
        cls,
        result: Any,
        *,
        target_agent: str | None = None,
        continuation_hint: str | None = None,
    ) -> DelegationResult:
        return cls(
            success=True,
            result=result,
            target_agent=target_agent,
            continuation_hint=continuation_hint,
        )

    @classmethod
    def failure(cls, error: BaseException) -> DelegationResult:
        return cls(success=False, error=error)

    @property
    def error_message(self) -> str | None:
        if self.error is None:
            return None
        return str(self.error)


@dataclass(frozen=True, slots=True)
class CoordinatorConfig:
    """
    Coordinator tuning.

    Attributes:
        timeout_s: Ceiling for waiting on a completion event.
        history_ttl_s: Lifetime of diagnostic history entries.
        history_max_entries: Max history entries before oldest are evicted.
        key_includes_task: Add a task digest to the dedup key so distinct
            tasks to the same target in one execution run separately.
    """

    timeout_s: float = 300.0
    history_ttl_s: float = 600.0
    history_max_entries: int = 1000
    key_includes_task: bool = False

    def __post_init__(self) -> None:
        if self.timeout_s <= 0:
            raise ValueError("CoordinatorConfig.timeout_s must be > 0")
        if self.history_ttl_s <= 0:
            raise ValueError("CoordinatorConfig.history_ttl_s must be > 0")
        if self.history_max_entries < 1:
            raise ValueError("CoordinatorConfig.history_max_entries must be >= 1")
