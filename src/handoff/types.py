"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

JSON aliases and small time/id helpers shared across handoff modules.
"""

from __future__ import annotations

import time
import uuid
from typing import TypeAlias

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
JSONObject: TypeAlias = dict[str, JSONValue]


def now_ms() -> int:
    """Return current Unix epoch time in milliseconds."""

    return int(time.time() * 1000)


def new_id(prefix: str = "exec") -> str:
    return f"{prefix}_{uuid.uuid4().hex}"
