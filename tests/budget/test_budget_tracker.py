from __future__ import annotations

import pytest

from handoff.budget import (
    BUDGET_PRESETS,
    EXTENDED_BUDGET,
    STANDARD_BUDGET,
    TIGHT_BUDGET,
    BudgetTracker,
    ExecutionBudget,
    budget_from_env,
)
from handoff.errors import ConfigurationError


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def test_presets_differ_only_by_limits():
    assert BUDGET_PRESETS == {
        "tight": TIGHT_BUDGET,
        "standard": STANDARD_BUDGET,
        "extended": EXTENDED_BUDGET,
    }
    assert ExecutionBudget.preset("Standard") == ExecutionBudget(120.0, 20, 15)
    assert TIGHT_BUDGET == ExecutionBudget(30.0, 5, 5)
    assert EXTENDED_BUDGET == ExecutionBudget(300.0, 50, 30)
    with pytest.raises(ValueError, match="Unknown budget preset"):
        ExecutionBudget.preset("huge")


def test_budget_rejects_non_positive_limits():
    with pytest.raises(ValueError):
        ExecutionBudget(0, 1, 1)
    with pytest.raises(ValueError):
        ExecutionBudget(1, 0, 1)
    with pytest.raises(ValueError):
        ExecutionBudget(1, 1, 0)


def test_fresh_tracker_is_within_budget():
    tracker = BudgetTracker(TIGHT_BUDGET, clock=FakeClock())

    status = tracker.check_budget()

    assert status.exceeded is False
    assert status.reason is None
    assert status.recommendations == []
    assert tracker.get_warning() is None


def test_tool_call_limit_is_exceeded_on_reaching_the_limit():
    tracker = BudgetTracker(TIGHT_BUDGET, clock=FakeClock())
    for _ in range(4):
        tracker.record_tool_call()
    assert tracker.check_budget().exceeded is False

    tracker.record_tool_call()
    status = tracker.check_budget()

    assert status.exceeded is True
    assert status.reason == "Tool call limit exceeded (5 / 5)"
    assert "Summarize results from completed tool calls" in status.recommendations


def test_cycle_limit_reason_and_recommendations():
    tracker = BudgetTracker(TIGHT_BUDGET, clock=FakeClock())
    for _ in range(5):
        tracker.record_agent_cycle()

    status = tracker.check_budget()

    assert status.reason == "Agent cycle limit exceeded (5 / 5)"
    assert "Provide final answer with current information" in status.recommendations


def test_time_limit_requires_strictly_more_elapsed_and_wins_over_counters():
    clock = FakeClock()
    tracker = BudgetTracker(TIGHT_BUDGET, clock=clock)
    clock.advance(30.0)
    assert tracker.check_budget().exceeded is False

    for _ in range(5):
        tracker.record_tool_call()
    clock.advance(1.0)
    status = tracker.check_budget()

    assert status.exceeded is True
    assert status.reason == "Time limit exceeded (31s / 30s)"
    assert status.recommendations[0] == "Finalize with available results"


def test_utilization_is_monotonic_and_clamped():
    clock = FakeClock()
    tracker = BudgetTracker(TIGHT_BUDGET, clock=clock)
    previous = tracker.get_utilization()

    for step in range(40):
        if step % 2:
            tracker.record_tool_call()
        else:
            tracker.record_agent_cycle()
        clock.advance(1.5)
        current = tracker.get_utilization()
        assert current.time >= previous.time
        assert current.tool_calls >= previous.tool_calls
        assert current.cycles >= previous.cycles
        for value in (current.time, current.tool_calls, current.cycles):
            assert 0.0 <= value <= 100.0
        previous = current

    assert previous.time == previous.tool_calls == previous.cycles == 100.0


def test_approaching_limit_is_strictly_above_eighty_percent():
    tracker = BudgetTracker(STANDARD_BUDGET, clock=FakeClock())
    for _ in range(16):
        tracker.record_tool_call()
    assert tracker.get_utilization().tool_calls == pytest.approx(80.0)
    assert tracker.is_approaching_limit() is False

    tracker.record_tool_call()

    assert tracker.is_approaching_limit() is True
    assert tracker.get_warning() == "Budget warning - Tool calls: 85.0%"


def test_warning_lists_every_limit_over_threshold():
    clock = FakeClock()
    tracker = BudgetTracker(TIGHT_BUDGET, clock=clock)
    clock.advance(27.0)
    for _ in range(5):
        tracker.record_agent_cycle()

    assert tracker.get_warning() == "Budget warning - Time: 90.0%, Cycles: 100.0%"


def test_remaining_and_stats_snapshot():
    clock = FakeClock()
    tracker = BudgetTracker(STANDARD_BUDGET, clock=clock)
    clock.advance(200.0)
    for _ in range(3):
        tracker.record_tool_call()
    tracker.record_agent_cycle()

    remaining = tracker.get_remaining()
    stats = tracker.get_stats()

    assert remaining.time_s == 0.0
    assert remaining.tool_calls == 17
    assert remaining.cycles == 14
    assert stats.elapsed_s == pytest.approx(200.0)
    assert stats.tool_calls == 3
    assert stats.cycles == 1
    assert stats.budget is STANDARD_BUDGET
    assert stats.utilization.time == 100.0


def test_budget_from_env_uses_preset_and_overrides(monkeypatch):
    monkeypatch.setenv("HANDOFF_BUDGET_PRESET", "tight")
    monkeypatch.setenv("HANDOFF_BUDGET_MAX_TOOL_CALLS", "9")
    monkeypatch.delenv("HANDOFF_BUDGET_MAX_EXECUTION_S", raising=False)
    monkeypatch.delenv("HANDOFF_BUDGET_MAX_AGENT_CYCLES", raising=False)

    budget = budget_from_env()

    assert budget == ExecutionBudget(30.0, 9, 5)


def test_budget_from_env_defaults_to_standard(monkeypatch):
    for name in (
        "HANDOFF_BUDGET_PRESET",
        "HANDOFF_BUDGET_MAX_EXECUTION_S",
        "HANDOFF_BUDGET_MAX_TOOL_CALLS",
        "HANDOFF_BUDGET_MAX_AGENT_CYCLES",
    ):
        monkeypatch.delenv(name, raising=False)

    assert budget_from_env() == STANDARD_BUDGET


def test_budget_from_env_rejects_bad_values(monkeypatch):
    monkeypatch.setenv("HANDOFF_BUDGET_PRESET", "nope")
    with pytest.raises(ConfigurationError):
        budget_from_env()

    monkeypatch.setenv("HANDOFF_BUDGET_PRESET", "standard")
    monkeypatch.setenv("HANDOFF_BUDGET_MAX_AGENT_CYCLES", "many")
    with pytest.raises(ConfigurationError, match="HANDOFF_BUDGET_MAX_AGENT_CYCLES"):
        budget_from_env()

    monkeypatch.setenv("HANDOFF_BUDGET_MAX_AGENT_CYCLES", "0")
    with pytest.raises(ConfigurationError):
        budget_from_env()
