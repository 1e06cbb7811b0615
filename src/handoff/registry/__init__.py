"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Execution registry shared by the coordinator and external callers.
"""

from .store import ExecutionRegistry
from .types import TERMINAL_STATUSES, ExecutionRecord, ExecutionStatus, ExecutionStep

__all__ = [
    "ExecutionRegistry",
    "ExecutionRecord",
    "ExecutionStatus",
    "ExecutionStep",
    "TERMINAL_STATUSES",
]
