"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from src.chess.game import GameAction, GameReducer, GameState
from src.chess.rules import PythonChessRules
from src.engine.executor import apply_many

START = datetime(2024, 1, 1, 10, 0, 0, tzinfo=timezone.utc)


class StepClock:
    """Deterministic time source: every call returns the next instant, `step_seconds` apart."""

    def __init__(self, start: datetime = START, step_seconds: float = 1.0) -> None:
        self.start = start
        self.step = timedelta(seconds=step_seconds)
        self.calls = 0

    def __call__(self) -> str:
        moment = self.start + self.step * self.calls
        self.calls += 1
        return moment.isoformat()

    def at(self, seconds: float) -> str:
        """The instant `seconds` after the start (does not advance the clock)"""
        return (self.start + timedelta(seconds=seconds)).isoformat()


@pytest.fixture
def step_clock() -> StepClock:
    return StepClock()


@pytest.fixture
def rules() -> PythonChessRules:
    return PythonChessRules()


@pytest.fixture
def reducer(rules: PythonChessRules, step_clock: StepClock) -> GameReducer:
    return GameReducer(rules=rules, now=step_clock)


@pytest.fixture
def zero_state(rules: PythonChessRules) -> GameState:
    return GameState.zero(rules=rules)


@pytest.fixture
def play(
    reducer: GameReducer, zero_state: GameState
) -> Callable[[list[GameAction]], GameState]:
    """Apply a list of actions, starting from a fresh game"""

    def _play(actions: list[GameAction], state: GameState | None = None) -> GameState:
        return apply_many(state or zero_state, actions, reducer)

    return _play
