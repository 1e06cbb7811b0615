from __future__ import annotations

import asyncio

import pytest

from handoff.errors import (
    InterruptPayloadError,
    InterruptStateError,
    InterruptStoreError,
)
from handoff.interrupts import (
    HumanResponse,
    InMemoryInterruptStore,
    InterruptManager,
    InterruptManagerConfig,
    InterruptStore,
)


def run_async(coro):
    return asyncio.run(coro)


def _payload(**config) -> dict:
    return {
        "action_request": {
            "action": "sendGmailMessage",
            "args": {"to": "a@b.c", "subject": "Hi"},
        },
        "config": config,
        "description": "Send the drafted email",
    }


class _BrokenStore(InterruptStore):
    async def insert(self, record):
        raise InterruptStoreError("database unavailable")

    async def get_by_execution_id(self, execution_id):
        raise InterruptStoreError("database unavailable")

    async def update_by_execution_id(self, execution_id, patch):
        raise InterruptStoreError("database unavailable")


def test_store_then_get_returns_pending_interrupt():
    async def scenario():
        manager = InterruptManager(InMemoryInterruptStore())
        stored = await manager.store_interrupt(
            "exec-1", "thread-1", _payload(), user_id="u-1", agent_id="cleo"
        )
        fetched = await manager.get_interrupt("exec-1")
        return stored, fetched

    stored, fetched = run_async(scenario())

    assert fetched is stored
    assert fetched.status == "pending"
    assert fetched.response is None
    assert fetched.payload.action_request.action == "sendGmailMessage"
    assert fetched.payload.action_request.args == {"to": "a@b.c", "subject": "Hi"}


def test_durable_interrupt_survives_restart_and_is_cached_after_first_read():
    async def scenario():
        store = InMemoryInterruptStore()
        before = InterruptManager(store)
        original = await before.store_interrupt(
            "exec-1", "thread-1", _payload(), user_id="u-1", agent_id="cleo"
        )

        baseline = store.get_calls

        after = InterruptManager(store)
        restored = await after.get_interrupt("exec-1")
        first_read_calls = store.get_calls - baseline
        again = await after.get_interrupt("exec-1")
        total_read_calls = store.get_calls - baseline
        return original, restored, again, first_read_calls, total_read_calls

    original, restored, again, first_read_calls, total_read_calls = run_async(
        scenario()
    )

    assert restored == original
    assert restored is not original
    assert again is restored
    assert first_read_calls == 1
    assert total_read_calls == 1


def test_response_after_restart_updates_the_store():
    async def scenario():
        store = InMemoryInterruptStore()
        manager = InterruptManager(store)
        await manager.store_interrupt("exec-1", "thread-1", _payload(), user_id="u-1")
        manager.clear_all()

        updated = await manager.update_interrupt_response(
            "exec-1", {"type": "edit", "args": {"subject": "Hello"}}
        )
        return store, updated

    store, updated = run_async(scenario())
    record = store.records["exec-1"]

    assert updated.status == "approved"
    assert updated.response == HumanResponse(type="edit", args={"subject": "Hello"})
    assert updated.resolved_at is not None
    assert record["status"] == "approved"
    assert record["response"] == {"type": "edit", "args": {"subject": "Hello"}}
    assert record["resolved_at"] == updated.resolved_at


def test_interrupt_without_user_is_memory_only(caplog):
    async def scenario():
        store = InMemoryInterruptStore()
        manager = InterruptManager(store)
        with caplog.at_level("WARNING", logger="handoff.interrupts"):
            await manager.store_interrupt("exec-1", "thread-1", _payload())
        in_memory = await manager.get_interrupt("exec-1")
        manager.clear_all()
        after_restart = await manager.get_interrupt("exec-1")
        return store, in_memory, after_restart

    store, in_memory, after_restart = run_async(scenario())

    assert in_memory is not None
    assert after_restart is None
    assert store.insert_calls == 0
    assert store.records == {}
    assert "will not survive a restart" in caplog.text


def test_manager_without_store_works_in_memory():
    async def scenario():
        manager = InterruptManager()
        await manager.store_interrupt("exec-1", "thread-1", _payload(), user_id="u-1")
        updated = await manager.update_interrupt_response("exec-1", {"type": "accept"})
        return manager, updated

    manager, updated = run_async(scenario())

    assert manager.store is None
    assert updated.status == "approved"


def test_ignore_response_rejects_the_interrupt():
    async def scenario():
        manager = InterruptManager(InMemoryInterruptStore())
        await manager.store_interrupt("exec-1", "thread-1", _payload(), user_id="u-1")
        return await manager.update_interrupt_response(
            "exec-1", HumanResponse(type="ignore")
        )

    assert run_async(scenario()).status == "rejected"


def test_second_response_fails_with_state_error():
    async def scenario():
        manager = InterruptManager(InMemoryInterruptStore())
        await manager.store_interrupt("exec-1", "thread-1", _payload(), user_id="u-1")
        await manager.update_interrupt_response("exec-1", {"type": "accept"})
        await manager.update_interrupt_response("exec-1", {"type": "ignore"})

    with pytest.raises(InterruptStateError, match="already approved"):
        run_async(scenario())


def test_concurrent_responses_resolve_exactly_once():
    async def scenario():
        store = InMemoryInterruptStore()
        manager = InterruptManager(store)
        await manager.store_interrupt("exec-1", "thread-1", _payload(), user_id="u-1")
        outcomes = await asyncio.gather(
            manager.update_interrupt_response("exec-1", {"type": "accept"}),
            manager.update_interrupt_response("exec-1", {"type": "ignore"}),
            return_exceptions=True,
        )
        return store, outcomes

    store, outcomes = run_async(scenario())
    errors = [item for item in outcomes if isinstance(item, InterruptStateError)]
    resolved = [item for item in outcomes if not isinstance(item, BaseException)]

    assert len(errors) == 1
    assert len(resolved) == 1
    assert resolved[0].status == "approved"
    assert store.update_calls == 1


def test_response_for_unknown_execution_returns_none():
    async def scenario():
        manager = InterruptManager(InMemoryInterruptStore())
        return await manager.update_interrupt_response("nope", {"type": "accept"})

    assert run_async(scenario()) is None


def test_disallowed_response_type_is_rejected():
    async def scenario(config: InterruptManagerConfig | None):
        manager = InterruptManager(config=config)
        await manager.store_interrupt(
            "exec-1", "thread-1", _payload(allow_ignore=False), user_id="u-1"
        )
        return await manager.update_interrupt_response("exec-1", {"type": "ignore"})

    with pytest.raises(InterruptPayloadError, match="not allowed"):
        run_async(scenario(None))

    relaxed = InterruptManagerConfig(enforce_allowed_responses=False)
    assert run_async(scenario(relaxed)).status == "rejected"


def test_malformed_inputs_raise_payload_errors():
    async def scenario():
        manager = InterruptManager()
        with pytest.raises(InterruptPayloadError):
            await manager.store_interrupt("exec-1", "thread-1", {"config": {}})
        with pytest.raises(InterruptPayloadError):
            await manager.store_interrupt("", "thread-1", _payload())
        await manager.store_interrupt("exec-1", "thread-1", _payload())
        with pytest.raises(InterruptPayloadError):
            await manager.update_interrupt_response("exec-1", {"type": "maybe"})
        return await manager.get_interrupt("exec-1")

    assert run_async(scenario()).is_pending


def test_store_errors_propagate_and_leave_memory_untouched():
    async def scenario():
        manager = InterruptManager(_BrokenStore())
        with pytest.raises(InterruptStoreError, match="database unavailable"):
            await manager.store_interrupt(
                "exec-1", "thread-1", _payload(), user_id="u-1"
            )
        assert manager.list_pending() == []
        with pytest.raises(InterruptStoreError):
            await manager.get_interrupt("exec-1")

    run_async(scenario())


def test_pending_helpers_and_clear_interrupt():
    async def scenario():
        store = InMemoryInterruptStore()
        manager = InterruptManager(store)
        await manager.store_interrupt("exec-1", "thread-1", _payload(), user_id="u-1")
        await manager.store_interrupt("exec-2", "thread-2", _payload(), user_id="u-1")
        await manager.update_interrupt_response("exec-2", {"type": "accept"})

        pending = [item.execution_id for item in manager.list_pending()]
        has_1 = await manager.has_pending_interrupt("exec-1")
        has_2 = await manager.has_pending_interrupt("exec-2")
        cleared = manager.clear_interrupt("exec-1")
        cleared_again = manager.clear_interrupt("exec-1")
        reloaded = await manager.get_interrupt("exec-1")
        return pending, has_1, has_2, cleared, cleared_again, reloaded

    pending, has_1, has_2, cleared, cleared_again, reloaded = run_async(scenario())

    assert pending == ["exec-1"]
    assert has_1 is True
    assert has_2 is False
    assert cleared is True
    assert cleared_again is False
    assert reloaded is not None and reloaded.is_pending


def test_wait_for_response_returns_once_a_response_lands():
    async def scenario():
        manager = InterruptManager(InMemoryInterruptStore())
        await manager.store_interrupt("exec-1", "thread-1", _payload(), user_id="u-1")
        waiter = asyncio.create_task(
            manager.wait_for_response("exec-1", timeout_s=2.0, poll_interval_s=0.01)
        )
        await asyncio.sleep(0.03)
        await manager.update_interrupt_response(
            "exec-1", {"type": "response", "args": "Please shorten it"}
        )
        return await waiter

    response = run_async(scenario())

    assert response == HumanResponse(type="response", args="Please shorten it")


def test_wait_for_response_times_out_or_notices_missing_interrupt():
    async def scenario():
        manager = InterruptManager(
            config=InterruptManagerConfig(wait_timeout_s=0.05, poll_interval_s=0.01)
        )
        await manager.store_interrupt("exec-1", "thread-1", _payload())
        timed_out = await manager.wait_for_response("exec-1")
        missing = await manager.wait_for_response("exec-404")
        return timed_out, missing

    assert run_async(scenario()) == (None, None)


@pytest.mark.asyncio
async def test_restart_before_response_keeps_the_action_payload():
    store = InMemoryInterruptStore()
    await InterruptManager(store).store_interrupt(
        "exec-9", "thread-9", _payload(allow_edit=False), user_id="u-9"
    )

    restored = await InterruptManager(store).get_interrupt("exec-9")

    assert restored.user_id == "u-9"
    assert restored.payload.description == "Send the drafted email"
    assert restored.payload.config.allow_edit is False
    assert restored.payload.config.allow_accept is True


def test_storing_again_never_resets_a_resolved_interrupt():
    async def scenario():
        store = InMemoryInterruptStore()
        manager = InterruptManager(store)
        await manager.store_interrupt("exec-1", "thread-1", _payload(), user_id="u-1")
        await manager.update_interrupt_response("exec-1", {"type": "accept"})

        with pytest.raises(InterruptStateError, match="already approved"):
            await manager.store_interrupt(
                "exec-1", "thread-1", _payload(), user_id="u-1"
            )
        with pytest.raises(InterruptStateError):
            await manager.update_interrupt_response("exec-1", {"type": "ignore"})

        # The durable row is checked too, not only the in-memory tier.
        manager.clear_all()
        with pytest.raises(InterruptStateError, match="already approved"):
            await manager.store_interrupt(
                "exec-1", "thread-1", _payload(), user_id="u-1"
            )
        return store, await manager.get_interrupt("exec-1")

    store, current = run_async(scenario())

    assert current.status == "approved"
    assert current.response == HumanResponse(type="accept")
    assert store.records["exec-1"]["status"] == "approved"
    assert store.insert_calls == 1


def test_storing_twice_while_pending_is_rejected():
    async def scenario():
        manager = InterruptManager()
        first = await manager.store_interrupt("exec-1", "thread-1", _payload())
        with pytest.raises(InterruptStateError, match="already pending"):
            await manager.store_interrupt("exec-1", "thread-2", _payload())
        return first, await manager.get_interrupt("exec-1")

    first, current = run_async(scenario())

    assert current is first
    assert current.thread_id == "thread-1"


def test_resolution_releases_the_per_execution_lock():
    async def scenario():
        manager = InterruptManager(InMemoryInterruptStore())
        for execution_id in ("exec-1", "exec-2", "exec-3"):
            await manager.store_interrupt(
                execution_id, "thread-1", _payload(), user_id="u-1"
            )
            await manager.update_interrupt_response(execution_id, {"type": "accept"})
        return manager

    manager = run_async(scenario())

    assert manager._locks == {}
