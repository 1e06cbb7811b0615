"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Human-in-the-loop interrupt/resume state that survives process restarts.

Quick start::

    from handoff.interrupts import InMemoryInterruptStore, InterruptManager

    manager = InterruptManager(InMemoryInterruptStore())
    await manager.store_interrupt(
        "exec-1",
        "thread-1",
        {"action_request": {"action": "sendGmailMessage", "args": {}}},
        user_id="user-1",
    )
    await manager.update_interrupt_response("exec-1", {"type": "accept"})
"""

from .adapters import InMemoryInterruptStore, RedisInterruptStore
from .cache import InterruptCache
from .factory import create_interrupt_store_from_env
from .manager import InterruptManager, InterruptManagerConfig
from .server import InterruptServiceHost, InterruptServiceHostError, interrupt_view
from .store import InterruptRecord, InterruptStore
from .types import (
    INTERRUPT_STATUSES,
    RESPONSE_TYPES,
    ActionRequest,
    HumanResponse,
    Interrupt,
    InterruptConfig,
    InterruptPayload,
    InterruptStatus,
    ResponseType,
    validate_interrupt_payload,
)

__all__ = [
    "ActionRequest",
    "InterruptConfig",
    "InterruptPayload",
    "HumanResponse",
    "Interrupt",
    "InterruptStatus",
    "ResponseType",
    "RESPONSE_TYPES",
    "INTERRUPT_STATUSES",
    "validate_interrupt_payload",
    "InterruptStore",
    "InterruptRecord",
    "InMemoryInterruptStore",
    "RedisInterruptStore",
    "InterruptCache",
    "InterruptManager",
    "InterruptManagerConfig",
    "create_interrupt_store_from_env",
    "InterruptServiceHost",
    "InterruptServiceHostError",
    "interrupt_view",
]
