"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Exception taxonomy for delegation, interrupt, and configuration failures.
"""

from __future__ import annotations


class HandoffError(Exception):
    """Base error for all handoff failures."""


class ConfigurationError(HandoffError, ValueError):
    """Raised when environment or constructor configuration is invalid."""


class DelegationError(HandoffError):
    """Base error for delegation failures carried inside results."""


class DelegationTimeoutError(DelegationError, TimeoutError):
    """Raised when no completion event arrives before the wait ceiling."""

    def __init__(self, key: str, timeout_s: float) -> None:
        super().__init__(f"Delegation {key} timed out after {timeout_s:g}s")
        self.key = key
        self.timeout_s = timeout_s


class DelegationFailedError(DelegationError):
    """Raised when the executing side reports failure for a delegation."""

    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Delegation {key} failed: {reason}")
        self.key = key
        self.reason = reason


class DelegationClosedError(DelegationError):
    """Raised when a delegation is requested on a closed coordinator."""


class InterruptError(HandoffError):
    """Base error for interrupt lifecycle failures."""


class InterruptStateError(InterruptError):
    """Raised when a response targets an interrupt that is no longer pending."""

    def __init__(self, execution_id: str, status: str) -> None:
        super().__init__(
            f"Interrupt for execution '{execution_id}' is already {status}"
        )
        self.execution_id = execution_id
        self.status = status


class InterruptPayloadError(InterruptError, ValueError):
    """Raised for malformed interrupt payloads or disallowed responses."""


class InterruptStoreError(HandoffError):
    """Raised by durable interrupt stores when a read or write fails."""
