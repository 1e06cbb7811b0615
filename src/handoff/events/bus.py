"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

In-process event bus with synchronous fan-out.
"""

from __future__ import annotations

import logging
from typing import Any

from .types import BusEvent, EventBus, EventHandler, Subscription

logger = logging.getLogger("handoff.events")


class InMemoryEventBus(EventBus):
    """
    In-process event bus backed by per-name subscriber lists.

    Suitable for single-process coordinators and testing. Events are not
    queued or persisted; subscribers registered after a publish never see it.

    Args:
        raise_errors: Re-raise handler exceptions instead of logging them.
    """

    def __init__(self, *, raise_errors: bool = False) -> None:
        self._subscribers: dict[str, list[Subscription]] = {}
        self._raise_errors = raise_errors

    def subscribe(self, name: str, handler: EventHandler) -> Subscription:
        subscription = Subscription(self, name, handler)
        self._subscribers.setdefault(name, []).append(subscription)
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        rows = self._subscribers.get(subscription.name)
        if not rows:
            return
        try:
            rows.remove(subscription)
        except ValueError:
            return
        if not rows:
            self._subscribers.pop(subscription.name, None)
        if subscription.active:
            subscription.unsubscribe()

    def publish(self, name: str, payload: dict[str, Any] | None = None) -> BusEvent:
        """
        Deliver event to every subscriber registered for ``name``.

        Handlers are snapshotted first so handlers may unsubscribe during
        dispatch. A failing handler does not stop delivery to the rest.
        """
        event = BusEvent(name=name, payload=dict(payload or {}))
        for subscription in list(self._subscribers.get(name, ())):
            if not subscription.active:
                continue
            try:
                subscription.handler(event)
            except Exception:
                if self._raise_errors:
                    raise
                logger.exception("Event handler failed for %s", name)
        return event

    def subscriber_count(self, name: str) -> int:
        return sum(1 for sub in self._subscribers.get(name, ()) if sub.active)

    def clear(self) -> None:
        rows = [sub for subs in self._subscribers.values() for sub in subs]
        self._subscribers.clear()
        for subscription in rows:
            subscription.unsubscribe()

    @property
    def event_names(self) -> list[str]:
        """Event names that currently have subscribers."""
        return list(self._subscribers.keys())
