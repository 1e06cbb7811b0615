"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Build execution budgets from `HANDOFF_BUDGET_*` environment variables.
"""

from __future__ import annotations

from ..config import env_first, env_float, env_int
from ..errors import ConfigurationError
from .types import ExecutionBudget


def budget_from_env(*, default: str = "standard") -> ExecutionBudget:
    """
    Resolve an execution budget from the environment.

    `HANDOFF_BUDGET_PRESET` picks the base preset (falls back to `default`).
    `HANDOFF_BUDGET_MAX_EXECUTION_S`, `HANDOFF_BUDGET_MAX_TOOL_CALLS`, and
    `HANDOFF_BUDGET_MAX_AGENT_CYCLES` override single limits of that preset.
    """
    name = env_first("HANDOFF_BUDGET_PRESET", default=default) or default
    try:
        base = ExecutionBudget.preset(name)
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc

    try:
        return ExecutionBudget(
            max_execution_s=env_float(
                "HANDOFF_BUDGET_MAX_EXECUTION_S", base.max_execution_s
            ),
            max_tool_calls=env_int("HANDOFF_BUDGET_MAX_TOOL_CALLS", base.max_tool_calls),
            max_agent_cycles=env_int(
                "HANDOFF_BUDGET_MAX_AGENT_CYCLES", base.max_agent_cycles
            ),
        )
    except ConfigurationError:
        raise
    except ValueError as exc:
        raise ConfigurationError(str(exc)) from exc
