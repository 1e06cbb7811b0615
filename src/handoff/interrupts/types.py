"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Human-in-the-loop interrupt types and their durable record form.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Literal, cast

from ..errors import InterruptPayloadError
from ..types import JSONValue, now_ms

logger = logging.getLogger("handoff.interrupts")

InterruptStatus = Literal["pending", "approved", "rejected", "expired"]
ResponseType = Literal["accept", "edit", "response", "ignore"]

RESPONSE_TYPES: tuple[str, ...] = ("accept", "edit", "response", "ignore")
INTERRUPT_STATUSES: tuple[str, ...] = ("pending", "approved", "rejected", "expired")

_STATUS_BY_RESPONSE: dict[str, InterruptStatus] = {
    "accept": "approved",
    "edit": "approved",
    "response": "approved",
    "ignore": "rejected",
}


@dataclass(frozen=True, slots=True)
class ActionRequest:
    """
    Side effect awaiting approval.

    Attributes:
        action: Action/tool name, e.g. ``"sendGmailMessage"``.
        args: Arguments the action would run with.
    """

    action: str
    args: dict[str, JSONValue] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class InterruptConfig:
    """Response kinds the approver may use."""

    allow_accept: bool = True
    allow_edit: bool = True
    allow_respond: bool = True
    allow_ignore: bool = True

    def allows(self, response_type: str) -> bool:
        return {
            "accept": self.allow_accept,
            "edit": self.allow_edit,
            "response": self.allow_respond,
            "ignore": self.allow_ignore,
        }.get(response_type, False)


@dataclass(frozen=True, slots=True)
class InterruptPayload:
    """
    What the paused execution wants approved.

    Attributes:
        action_request: Pending action and its arguments.
        config: Allowed response kinds.
        description: Human-readable summary for the approver.
    """

    action_request: ActionRequest
    config: InterruptConfig = field(default_factory=InterruptConfig)
    description: str | None = None

    def to_dict(self) -> dict[str, JSONValue]:
        return {
            "action_request": {
                "action": self.action_request.action,
                "args": dict(self.action_request.args),
            },
            "config": {
                "allow_accept": self.config.allow_accept,
                "allow_edit": self.config.allow_edit,
                "allow_respond": self.config.allow_respond,
                "allow_ignore": self.config.allow_ignore,
            },
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> InterruptPayload:
        """
        Parse the wire form.

        Raises:
            InterruptPayloadError: If required fields are missing or mistyped.
        """
        if not isinstance(data, dict):
            raise InterruptPayloadError("Interrupt payload must be an object")
        action_raw = data.get("action_request")
        if not isinstance(action_raw, dict):
            raise InterruptPayloadError("Interrupt payload requires 'action_request'")
        action = action_raw.get("action")
        if not isinstance(action, str) or not action.strip():
            raise InterruptPayloadError("'action_request.action' must be a non-empty string")
        args = action_raw.get("args") or {}
        if not isinstance(args, dict):
            raise InterruptPayloadError("'action_request.args' must be an object")

        config_raw = data.get("config") or {}
        if not isinstance(config_raw, dict):
            raise InterruptPayloadError("'config' must be an object")
        flags: dict[str, bool] = {}
        for name in ("allow_accept", "allow_edit", "allow_respond", "allow_ignore"):
            value = config_raw.get(name, True)
            if not isinstance(value, bool):
                raise InterruptPayloadError(f"'config.{name}' must be a boolean")
            flags[name] = value

        description = data.get("description")
        if description is not None and not isinstance(description, str):
            raise InterruptPayloadError("'description' must be a string")

        return cls(
            action_request=ActionRequest(action=action, args=dict(args)),
            config=InterruptConfig(**flags),
            description=description,
        )


def validate_interrupt_payload(raw: Any) -> InterruptPayload | None:
    """Return a parsed payload, or `None` (with a warning) when malformed."""
    if isinstance(raw, InterruptPayload):
        return raw
    try:
        return InterruptPayload.from_dict(raw)
    except InterruptPayloadError as exc:
        logger.warning("Invalid interrupt payload: %s", exc)
        return None


@dataclass(frozen=True, slots=True)
class HumanResponse:
    """
    Human decision for one interrupt.

    Attributes:
        type: `accept`, `edit`, `response`, or `ignore`.
        args: Kind-specific arguments (edited action args, free text, ...).
    """

    type: ResponseType
    args: JSONValue = None

    def __post_init__(self) -> None:
        if self.type not in RESPONSE_TYPES:
            raise InterruptPayloadError(
                f"Unknown response type '{self.type}'; expected one of {list(RESPONSE_TYPES)}"
            )

    def status_for(self) -> InterruptStatus:
        """Map the response kind onto the interrupt's terminal status."""
        return _STATUS_BY_RESPONSE[self.type]

    def to_dict(self) -> dict[str, JSONValue]:
        return {"type": self.type, "args": self.args}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> HumanResponse:
        if not isinstance(data, dict) or not isinstance(data.get("type"), str):
            raise InterruptPayloadError("Human response requires a string 'type'")
        return cls(type=cast(ResponseType, data["type"]), args=data.get("args"))


@dataclass(slots=True)
class Interrupt:
    """
    A paused execution awaiting a human decision.

    Attributes:
        execution_id: Paused execution (unique key).
        thread_id: Conversation thread the execution belongs to.
        payload: Action awaiting approval.
        status: `pending` until a response arrives.
        user_id: Owning user; interrupts without one are never persisted.
        agent_id: Agent that raised the interrupt.
        response: Human response once supplied.
        created_at: Epoch ms when stored.
        updated_at: Epoch ms of the last write.
        resolved_at: Epoch ms when a response was attached.
    """

    execution_id: str
    thread_id: str
    payload: InterruptPayload
    status: InterruptStatus = "pending"
    user_id: str | None = None
    agent_id: str | None = None
    response: HumanResponse | None = None
    created_at: int = field(default_factory=now_ms)
    updated_at: int = field(default_factory=now_ms)
    resolved_at: int | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == "pending"

    @property
    def is_durable(self) -> bool:
        """Whether this interrupt is written to the durable store."""
        return self.user_id is not None

    def to_record(self) -> dict[str, JSONValue]:
        """Serialize to the durable store field set."""
        return {
            "execution_id": self.execution_id,
            "thread_id": self.thread_id,
            "user_id": self.user_id,
            "agent_id": self.agent_id,
            "status": self.status,
            "interrupt_payload": self.payload.to_dict(),
            "response": self.response.to_dict() if self.response is not None else None,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "resolved_at": self.resolved_at,
        }

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Interrupt:
        """
        Rebuild an interrupt from its durable record.

        Raises:
            InterruptPayloadError: If the record is malformed.
        """
        for name in ("execution_id", "thread_id"):
            if not record.get(name):
                raise InterruptPayloadError(f"Interrupt record is missing '{name}'")
        status = record.get("status", "pending")
        if status not in INTERRUPT_STATUSES:
            raise InterruptPayloadError(f"Unknown interrupt status '{status}'")
        response_raw = record.get("response")
        return cls(
            execution_id=str(record["execution_id"]),
            thread_id=str(record["thread_id"]),
            payload=InterruptPayload.from_dict(record.get("interrupt_payload") or {}),
            status=cast(InterruptStatus, status),
            user_id=record.get("user_id"),
            agent_id=record.get("agent_id"),
            response=(
                HumanResponse.from_dict(response_raw)
                if response_raw is not None
                else None
            ),
            created_at=_as_ms(record.get("created_at")),
            updated_at=_as_ms(record.get("updated_at")),
            resolved_at=(
                _as_ms(record.get("resolved_at"))
                if record.get("resolved_at") is not None
                else None
            ),
        )


def _as_ms(value: Any) -> int:
    if value is None:
        return now_ms()
    if isinstance(value, (int, float)):
        return int(value)
    raise InterruptPayloadError(f"Timestamp must be epoch milliseconds, got {value!r}")
