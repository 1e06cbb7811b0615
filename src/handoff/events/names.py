"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Delegation lifecycle event names.
"""

from __future__ import annotations

DELEGATION_REQUESTED = "delegation.requested"
DELEGATION_PROGRESS = "delegation.progress"
DELEGATION_COMPLETED = "delegation.completed"
DELEGATION_FAILED = "delegation.failed"

DELEGATION_EVENTS = (
    DELEGATION_REQUESTED,
    DELEGATION_PROGRESS,
    DELEGATION_COMPLETED,
    DELEGATION_FAILED,
)
