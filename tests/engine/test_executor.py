"""Unit tests for src/engine/executor.py"""

import pytest

from src.core.exceptions import ExecutionLimitExceededError, GameError
from src.engine.executor import apply, apply_action, apply_many


# --- MOCK REDUCERS ----
def counter(state: int, action: str) -> tuple[int, list[str]]:
    """Adds one per action, never emits follow-ups"""
    return state + 1, []


def loop_forever(state: int, action: str) -> tuple[int, list[str]]:
    """Always emits itself again"""
    return state + 1, [action]


# Each action name maps to the follow-ups it emits
TREE = {
    "root": ["a", "b"],
    "a": ["a1", "a2"],
    "a1": [],
    "a2": [],
    "b": ["b1"],
    "b1": [],
}


def recorder(state: list[str], action: str) -> tuple[list[str], list[str]]:
    """Records the order in which actions are applied"""
    return [*state, action], TREE[action]


# --- APPLY ---
def test_apply_without_follow_ups() -> None:
    assert apply(0, "inc", counter) == 1


def test_apply_action_counts_steps() -> None:
    acc = apply_action([], "root", recorder)

    assert acc.count == 6
    assert acc.next_state == ["root", "a", "a1", "a2", "b", "b1"]


def test_follow_ups_are_applied_depth_first_in_emission_order() -> None:
    """The follow-ups of 'a' are resolved before its sibling 'b' runs"""
    assert apply([], "root", recorder) == ["root", "a", "a1", "a2", "b", "b1"]


def test_apply_does_not_change_input_state() -> None:
    state: list[str] = []
    _ = apply(state, "root", recorder)
    assert state == []


def test_apply_many_folds_actions() -> None:
    assert apply_many(0, ["inc"] * 5, counter) == 5


# --- STEP BUDGET ---
def test_loop_forever_fails_instead_of_hanging() -> None:
    with pytest.raises(ExecutionLimitExceededError) as exc_info:
        apply(0, "again", loop_forever)

    assert exc_info.value.limit == 10_000
    assert "infinite loop" in str(exc_info.value)


def test_loop_forever_with_custom_limit() -> None:
    with pytest.raises(ExecutionLimitExceededError):
        apply(0, "again", loop_forever, limit=25)


def test_budget_is_shared_by_the_whole_cascade() -> None:
    """6 reducer calls in the tree: a budget of 6 is enough, 5 is not"""
    assert len(apply([], "root", recorder, limit=6)) == 6

    with pytest.raises(ExecutionLimitExceededError):
        apply([], "root", recorder, limit=5)


def test_budget_is_per_apply_call() -> None:
    """apply_many gives every top level action a fresh budget"""
    state = apply_many([], ["root", "root"], recorder, limit=6)
    assert state == ["root", "a", "a1", "a2", "b", "b1"] * 2


def test_limit_from_settings(monkeypatch: pytest.MonkeyPatch) -> None:
    from src.engine import executor

    monkeypatch.setattr(executor.settings, "execution_limit", 3)
    with pytest.raises(ExecutionLimitExceededError) as exc_info:
        apply(0, "again", loop_forever)
    assert exc_info.value.limit == 3


def test_limit_exceeded_is_not_a_game_error() -> None:
    """Hosts catching gameplay errors must not swallow a runaway reducer"""
    with pytest.raises(ExecutionLimitExceededError) as exc_info:
        apply(0, "again", loop_forever, limit=1)

    assert not isinstance(exc_info.value, GameError)
    assert isinstance(exc_info.value, RuntimeError)
