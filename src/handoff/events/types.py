"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Event bus types and abstract base.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from ..types import now_ms

# ---------------------------------------------------------------------------
# Event types
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class BusEvent:
    """
    One published event.

    Attributes:
        name: Event name, e.g. ``"delegation.completed"``.
        payload: Arbitrary event payload.
        timestamp_ms: Unix epoch milliseconds when the event was published.
    """

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    timestamp_ms: int = field(default_factory=now_ms)


EventHandler = Callable[[BusEvent], None]
EventPredicate = Callable[[BusEvent], bool]


# ---------------------------------------------------------------------------
# Subscription handle
# ---------------------------------------------------------------------------


class Subscription:
    """
    Handle for one registered handler.

    ``unsubscribe()`` may be called any number of times. The handle is also a
    context manager that unsubscribes on exit.
    """

    def __init__(self, bus: "EventBus", name: str, handler: EventHandler) -> None:
        self._bus = bus
        self._name = name
        self._handler = handler
        self._active = True

    @property
    def name(self) -> str:
        """Event name this subscription listens to."""
        return self._name

    @property
    def handler(self) -> EventHandler:
        return self._handler

    @property
    def active(self) -> bool:
        """Whether the handler still receives events."""
        return self._active

    def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        self._bus.unsubscribe(self)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


# ---------------------------------------------------------------------------
# Event bus abstract base
# ---------------------------------------------------------------------------


class EventBus(ABC):
    """
    Abstract publish/subscribe channel for named events.

    Delivery is synchronous: ``publish`` returns after every current
    subscriber for the name has been called, in subscription order.
    """

    @abstractmethod
    def subscribe(self, name: str, handler: EventHandler) -> Subscription:
        """
        Register a handler for one event name.

        Args:
            name: Event name.
            handler: Callable receiving each ``BusEvent``.

        Returns:
            ``Subscription`` used to unregister the handler.
        """
        ...

    @abstractmethod
    def unsubscribe(self, subscription: Subscription) -> None:
        """Remove a previously registered handler. Unknown handles are ignored."""
        ...

    @abstractmethod
    def publish(self, name: str, payload: dict[str, Any] | None = None) -> BusEvent:
        """
        Publish an event to all current subscribers of ``name``.

        Returns:
            The published ``BusEvent``.
        """
        ...

    @abstractmethod
    def subscriber_count(self, name: str) -> int:
        """Return number of active handlers for ``name``."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Drop every subscription."""
        ...

    def once(
        self,
        name: str,
        handler: EventHandler,
        predicate: EventPredicate | None = None,
    ) -> Subscription:
        """
        Register a handler that fires for the first matching event only.

        Args:
            name: Event name.
            handler: Callable invoked once.
            predicate: Optional filter; non-matching events are skipped.
        """
        subscription: Subscription | None = None

        def _wrapper(event: BusEvent) -> None:
            if predicate is not None and not predicate(event):
                return
            if subscription is not None:
                subscription.unsubscribe()
            handler(event)

        subscription = self.subscribe(name, _wrapper)
        return subscription
