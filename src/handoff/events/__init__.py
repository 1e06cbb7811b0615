"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Process-wide publish/subscribe channel for named events.

Quick start::

    from handoff.events import InMemoryEventBus

    bus = InMemoryEventBus()
    sub = bus.subscribe("delegation.completed", lambda event: print(event.payload))
    bus.publish("delegation.completed", {"targetAgent": "astra"})
    sub.unsubscribe()
"""

from .bus import InMemoryEventBus
from .names import (
    DELEGATION_COMPLETED,
    DELEGATION_EVENTS,
    DELEGATION_FAILED,
    DELEGATION_PROGRESS,
    DELEGATION_REQUESTED,
)
from .types import BusEvent, EventBus, EventHandler, EventPredicate, Subscription

__all__ = [
    "BusEvent",
    "EventBus",
    "EventHandler",
    "EventPredicate",
    "Subscription",
    "InMemoryEventBus",
    "DELEGATION_REQUESTED",
    "DELEGATION_PROGRESS",
    "DELEGATION_COMPLETED",
    "DELEGATION_FAILED",
    "DELEGATION_EVENTS",
]
