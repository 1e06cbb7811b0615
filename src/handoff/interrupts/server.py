"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

FastAPI host exposing interrupt lookup and human response endpoints.
"""

from __future__ import annotations

from typing import Any

from ..errors import InterruptPayloadError, InterruptStateError
from .manager import InterruptManager
from .types import HumanResponse, Interrupt


class InterruptServiceHostError(RuntimeError):
    """Raised for invalid interrupt service host setup."""


def interrupt_view(interrupt: Interrupt) -> dict[str, Any]:
    """JSON view returned by the HTTP endpoints."""
    return interrupt.to_record()


class InterruptServiceHost:
    """Expose an ``InterruptManager`` over HTTP for approvers and pollers."""

    def __init__(
        self,
        manager: InterruptManager,
        *,
        service_name: str = "handoff-interrupts",
    ) -> None:
        self.manager = manager
        self.service_name = service_name

    def create_app(self):
        """Create and return FastAPI app exposing interrupt endpoints."""
        try:
            from fastapi import Body, FastAPI, HTTPException
        except ModuleNotFoundError as exc:  # pragma: no cover - optional runtime path
            raise InterruptServiceHostError(
                "FastAPI is required to host interrupt endpoints"
            ) from exc

        app = FastAPI(title=self.service_name)
        manager = self.manager

        @app.get("/interrupts")
        async def list_pending() -> dict[str, Any]:
            return {"interrupts": [interrupt_view(i) for i in manager.list_pending()]}

        @app.get("/interrupts/{execution_id}")
        async def get_interrupt(execution_id: str) -> dict[str, Any]:
            interrupt = await manager.get_interrupt(execution_id)
            if interrupt is None:
                raise HTTPException(
                    status_code=404,
                    detail=f"No interrupt for execution '{execution_id}'",
                )
            return interrupt_view(interrupt)

        @app.post("/interrupts/{execution_id}/response")
        async def submit_response(
            execution_id: str, payload: dict[str, Any] = Body(...)
        ) -> dict[str, Any]:
            try:
                response = HumanResponse.from_dict(payload)
                updated = await manager.update_interrupt_response(execution_id, response)
            except InterruptStateError as exc:
                raise HTTPException(status_code=409, detail=str(exc)) from exc
            except InterruptPayloadError as exc:
                raise HTTPException(status_code=422, detail=str(exc)) from exc
            if updated is None:
                raise HTTPException(
                    status_code=404,
                    detail=f"No interrupt for execution '{execution_id}'",
                )
            return interrupt_view(updated)

        return app
