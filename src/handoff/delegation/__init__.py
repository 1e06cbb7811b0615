"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Agent-to-agent delegation with single-flight deduplication.

Quick start::

    from handoff.delegation import DelegationCoordinator, DelegationRequest
    from handoff.events import InMemoryEventBus

    bus = InMemoryEventBus()
    coordinator = DelegationCoordinator(bus)
    result = await coordinator.delegate(
        DelegationRequest(
            source_agent="cleo",
            target_agent="astra",
            task="draft-email",
            source_execution_id="exec-1",
        )
    )
"""

from .coordinator import DelegationCoordinator
from .factory import coordinator_config_from_env
from .history import DelegationHistory
from .metrics import (
    METRIC_DELEGATIONS_COMPLETED,
    METRIC_DELEGATIONS_DEDUPLICATED,
    METRIC_DELEGATIONS_FAILED,
    METRIC_DELEGATIONS_REQUESTED,
    DelegationMetrics,
    NoOpDelegationMetrics,
    PrometheusDelegationMetrics,
)
from .types import (
    CoordinatorConfig,
    DelegationPriority,
    DelegationRequest,
    DelegationResult,
    delegation_key,
    normalize_priority,
)

__all__ = [
    "DelegationCoordinator",
    "DelegationRequest",
    "DelegationResult",
    "DelegationPriority",
    "DelegationHistory",
    "CoordinatorConfig",
    "coordinator_config_from_env",
    "delegation_key",
    "normalize_priority",
    "DelegationMetrics",
    "NoOpDelegationMetrics",
    "PrometheusDelegationMetrics",
    "METRIC_DELEGATIONS_REQUESTED",
    "METRIC_DELEGATIONS_DEDUPLICATED",
    "METRIC_DELEGATIONS_COMPLETED",
    "METRIC_DELEGATIONS_FAILED",
]
