"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Orchestration nucleus for cooperating agents: single-flight delegation,
execution budgets, and restart-durable human-in-the-loop interrupts.
"""

from .budget import (
    BUDGET_PRESETS,
    BudgetStatus,
    BudgetTracker,
    BudgetUtilization,
    ExecutionBudget,
)
from .delegation import (
    CoordinatorConfig,
    DelegationCoordinator,
    DelegationRequest,
    DelegationResult,
)
from .errors import (
    ConfigurationError,
    DelegationError,
    DelegationFailedError,
    DelegationTimeoutError,
    HandoffError,
    InterruptError,
    InterruptPayloadError,
    InterruptStateError,
    InterruptStoreError,
)
from .events import BusEvent, EventBus, InMemoryEventBus, Subscription
from .interrupts import (
    HumanResponse,
    InMemoryInterruptStore,
    Interrupt,
    InterruptManager,
    InterruptPayload,
    InterruptStore,
)
from .registry import ExecutionRecord, ExecutionRegistry

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "EventBus",
    "InMemoryEventBus",
    "BusEvent",
    "Subscription",
    "ExecutionBudget",
    "BudgetTracker",
    "BudgetStatus",
    "BudgetUtilization",
    "BUDGET_PRESETS",
    "DelegationCoordinator",
    "DelegationRequest",
    "DelegationResult",
    "CoordinatorConfig",
    "InterruptManager",
    "InterruptStore",
    "InMemoryInterruptStore",
    "Interrupt",
    "InterruptPayload",
    "HumanResponse",
    "ExecutionRegistry",
    "ExecutionRecord",
    "HandoffError",
    "ConfigurationError",
    "DelegationError",
    "DelegationTimeoutError",
    "DelegationFailedError",
    "InterruptError",
    "InterruptStateError",
    "InterruptPayloadError",
    "InterruptStoreError",
]
