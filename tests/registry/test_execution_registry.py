from __future__ import annotations

import pytest

from handoff.registry import ExecutionRegistry


def test_create_and_lookup():
    registry = ExecutionRegistry()

    record = registry.create("exec-1", user_id="u-1", agent_id="cleo")
    generated = registry.create()

    assert registry.get("exec-1") is record
    assert record.status == "pending"
    assert generated.execution_id.startswith("exec")
    assert generated.execution_id != "exec-1"
    assert len(registry) == 2
    assert "exec-1" in registry
    assert registry.get("missing") is None
    with pytest.raises(KeyError):
        registry.require("missing")


def test_duplicate_ids_are_rejected():
    registry = ExecutionRegistry()
    registry.create("exec-1")

    with pytest.raises(ValueError, match="already registered"):
        registry.create("exec-1")


def test_lifecycle_transitions_and_terminal_guard():
    registry = ExecutionRegistry()
    registry.create("exec-1")

    registry.mark_running("exec-1")
    record = registry.complete("exec-1", {"answer": 42})

    assert record.status == "completed"
    assert record.result == {"answer": 42}
    assert record.is_terminal
    with pytest.raises(ValueError, match="already completed"):
        registry.fail("exec-1", "late failure")

    registry.add_step("exec-1", "post-run note")
    assert record.steps[-1].message == "post-run note"


def test_fail_cancel_and_list_filters():
    registry = ExecutionRegistry()
    for execution_id in ("a", "b", "c"):
        registry.create(execution_id)
    registry.fail("a", "boom")
    registry.cancel("b")

    assert registry.get("a").error == "boom"
    assert [r.execution_id for r in registry.list(status="pending")] == ["c"]
    assert [r.execution_id for r in registry.list(limit=2)] == ["a", "b"]
    assert registry.remove("c") is True
    assert registry.remove("c") is False


def test_steps_keep_append_order_and_metadata():
    registry = ExecutionRegistry()
    registry.create("exec-1")

    registry.add_step("exec-1", "first", metadata={"action": "thinking"})
    registry.add_step("exec-1", "second")

    steps = registry.require("exec-1").steps
    assert [step.message for step in steps] == ["first", "second"]
    assert steps[0].metadata == {"action": "thinking"}
    assert steps[1].metadata == {}
