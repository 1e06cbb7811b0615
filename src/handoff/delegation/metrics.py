"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Metrics adapters for delegation coordinator observability.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

METRIC_DELEGATIONS_REQUESTED = "delegations_requested_total"
METRIC_DELEGATIONS_DEDUPLICATED = "delegations_deduplicated_total"
METRIC_DELEGATIONS_COMPLETED = "delegations_completed_total"
METRIC_DELEGATIONS_FAILED = "delegations_failed_total"


class DelegationMetrics(Protocol):
    """Minimal metrics interface for coordinator instrumentation."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""


class NoOpDelegationMetrics:
    """Default metrics sink when no metrics backend is provided."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        _ = name
        _ = value
        _ = tags


class PrometheusDelegationMetrics:
    """
    Prometheus-backed delegation metrics adapter.

    Requires `prometheus_client` package.
    """

    def __init__(self, *, namespace: str = "handoff", registry: object | None = None) -> None:
        try:
            from prometheus_client import Counter
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusDelegationMetrics requires `prometheus_client` to be installed."
            ) from exc

        self._Counter = Counter
        self._namespace = namespace
        self._registry = registry
        self._counters: dict[str, object] = {}

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        label_names = tuple(sorted((tags or {}).keys()))
        key = f"{name}|{','.join(label_names)}"
        counter = self._counters.get(key)
        if counter is None:
            kwargs: dict[str, object] = {}
            if self._registry is not None:
                kwargs["registry"] = self._registry
            counter = self._Counter(
                name=name,
                documentation=f"Delegation metric {name}",
                namespace=self._namespace,
                labelnames=label_names,
                **kwargs,
            )
            self._counters[key] = counter

        if label_names:
            label_values = [str((tags or {})[label]) for label in label_names]
            counter.labels(*label_values).inc(value)  # type: ignore[attr-defined]
        else:
            counter.inc(value)  # type: ignore[attr-defined]
