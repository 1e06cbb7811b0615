"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Bounded-lifetime delegation result history.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from collections.abc import Callable

from .types import DelegationResult


class DelegationHistory:
    """
    Recent delegation outcomes keyed by dedup key, for diagnostics only.

    Entries expire after ``ttl_s`` and the oldest are evicted past
    ``max_entries``. Re-recording a key moves it to the newest position.
    """

    def __init__(
        self,
        *,
        ttl_s: float = 600.0,
        max_entries: int = 1000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl_s = ttl_s
        self._max_entries = max(1, max_entries)
        self._clock = clock
        self._rows: OrderedDict[str, tuple[float, DelegationResult]] = OrderedDict()

    def record(self, key: str, result: DelegationResult) -> None:
        self._rows.pop(key, None)
        self._rows[key] = (self._clock(), result)
        self._prune()

    def get(self, key: str) -> DelegationResult | None:
        self._prune()
        row = self._rows.get(key)
        return row[1] if row is not None else None

    def snapshot(self) -> dict[str, DelegationResult]:
        """Return a copy of live entries, oldest first."""
        self._prune()
        return {key: result for key, (_, result) in self._rows.items()}

    def clear(self) -> None:
        self._rows.clear()

    def _prune(self) -> None:
        cutoff = self._clock() - self._ttl_s
        while self._rows:
            key, (stored_at, _) = next(iter(self._rows.items()))
            if stored_at > cutoff and len(self._rows) <= self._max_entries:
                break
            self._rows.pop(key, None)

    def __len__(self) -> int:
        self._prune()
        return len(self._rows)
