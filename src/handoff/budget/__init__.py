"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Execution budget tracking for agent runs.
"""

from .factory import budget_from_env
from .tracker import BudgetTracker
from .types import (
    APPROACHING_LIMIT_PCT,
    BUDGET_PRESETS,
    EXTENDED_BUDGET,
    STANDARD_BUDGET,
    TIGHT_BUDGET,
    BudgetPresetName,
    BudgetStats,
    BudgetStatus,
    BudgetUtilization,
    ExecutionBudget,
    RemainingBudget,
)

__all__ = [
    "ExecutionBudget",
    "BudgetStatus",
    "BudgetUtilization",
    "RemainingBudget",
    "BudgetStats",
    "BudgetPresetName",
    "BudgetTracker",
    "BUDGET_PRESETS",
    "TIGHT_BUDGET",
    "STANDARD_BUDGET",
    "EXTENDED_BUDGET",
    "APPROACHING_LIMIT_PCT",
    "budget_from_env",
]
