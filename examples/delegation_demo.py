"""
delegation_demo.py - Single-flight delegation example.

A supervising agent delegates the same task twice while the first request is
still running. The stand-in runtime below answers ``delegation.requested``
after a short delay; both callers share one request and one result.

Usage:
    python examples/delegation_demo.py
"""

import asyncio

from handoff.budget import BudgetTracker, ExecutionBudget
from handoff.delegation import DelegationCoordinator, DelegationRequest
from handoff.events import DELEGATION_PROGRESS, DELEGATION_REQUESTED, InMemoryEventBus
from handoff.registry import ExecutionRegistry


async def main() -> None:
    bus = InMemoryEventBus()
    registry = ExecutionRegistry()
    registry.create("exec-1", agent_id="cleo")
    coordinator = DelegationCoordinator(bus, registry=registry)
    budget = BudgetTracker(ExecutionBudget.preset("tight"))

    async def fake_runtime(payload: dict) -> None:
        budget.record_tool_call()
        await asyncio.sleep(0.2)
        coordinator.complete(
            payload["sourceAgent"],
            payload["targetAgent"],
            {"draft": "Hi team, the launch moves to Friday."},
            source_execution_id=payload["sourceExecutionId"],
        )

    bus.subscribe(
        DELEGATION_REQUESTED,
        lambda event: asyncio.get_running_loop().create_task(fake_runtime(event.payload)),
    )
    bus.subscribe(
        DELEGATION_PROGRESS,
        lambda event: print(f"[progress] {event.payload['status']}: {event.payload['message']}"),
    )

    request = DelegationRequest(
        source_agent="cleo",
        target_agent="astra",
        task="Draft the launch email",
        source_execution_id="exec-1",
    )
    first, second = await asyncio.gather(
        coordinator.delegate(request), coordinator.delegate(request)
    )
    budget.record_agent_cycle()

    print(f"Same result object: {first is second}")
    print(f"Result: {first.result}")
    print(f"Steps: {[step.message for step in registry.require('exec-1').steps]}")
    print(f"Budget: {budget.check_budget()}")


if __name__ == "__main__":
    asyncio.run(main())
