"""
interrupt_demo.py - Human approval that survives a restart.

Stores an approval request, throws away the manager (as a process restart
would), and answers the request from a fresh manager over the same store.

Usage:
    python examples/interrupt_demo.py
    HANDOFF_INTERRUPT_BACKEND=redis HANDOFF_REDIS_URL=redis://localhost:6379/0 \
        python examples/interrupt_demo.py
"""

import asyncio

from handoff.interrupts import InterruptManager, create_interrupt_store_from_env


async def main() -> None:
    store = create_interrupt_store_from_env()
    await store.setup()

    before_restart = InterruptManager(store)
    await before_restart.store_interrupt(
        "exec-42",
        "thread-7",
        {
            "action_request": {
                "action": "sendGmailMessage",
                "args": {"to": "team@example.com", "subject": "Launch"},
            },
            "config": {"allow_ignore": True, "allow_edit": True},
            "description": "Send the launch email",
        },
        user_id="user-1",
        agent_id="cleo",
    )

    after_restart = InterruptManager(store)
    pending = await after_restart.get_interrupt("exec-42")
    print(f"Recovered: {pending.execution_id} status={pending.status}")

    updated = await after_restart.update_interrupt_response(
        "exec-42", {"type": "edit", "args": {"subject": "Launch moved to Friday"}}
    )
    print(f"Resolved: status={updated.status} response={updated.response}")
    await store.close()


if __name__ == "__main__":
    asyncio.run(main())
