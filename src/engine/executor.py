"""
Applies an action and every follow-up action the reducer emits, for any reducer of the shape
(state, action) -> (state, [actions]).

Follow-ups are applied depth-first in the order they were emitted: the follow-ups of an action are fully resolved
before its next sibling runs. One step counter is shared by the whole cascade. A cascade that needs more than
`limit` reducer calls is treated as a bug in the reducer and stops with ExecutionLimitExceededError.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Optional, TypeVar

from src.core.config import settings
from src.core.exceptions import ExecutionLimitExceededError

logger = logging.getLogger(__name__)

TState = TypeVar("TState")
TAction = TypeVar("TAction")

Reducer = Callable[[TState, TAction], tuple[TState, list[TAction]]]


@dataclass
class Accumulator(Generic[TState]):
    """Threaded through one cascade: number of reducer calls so far + the latest state"""

    count: int
    next_state: TState


def apply_action(
    state: TState,
    action: TAction,
    reduce: Reducer[TState, TAction],
    limit: Optional[int] = None,
) -> Accumulator[TState]:
    """
    Run the cascade started by `action`.
    ----

    ----
    Uses an explicit stack instead of recursion: a runaway reducer has to hit the step budget,
    not the interpreter's recursion limit.
    """
    limit = settings.execution_limit if limit is None else limit
    acc = Accumulator(count=0, next_state=state)
    pending: list[TAction] = [action]

    while pending:
        if acc.count >= limit:
            logger.error("Execution limit of %d steps exceeded", limit)
            raise ExecutionLimitExceededError(limit)

        current = pending.pop()
        acc.next_state, follow_ups = reduce(acc.next_state, current)
        acc.count += 1

        # reversed, so the first follow-up is popped first
        pending.extend(reversed(follow_ups))

    return acc


def apply(
    state: TState,
    action: TAction,
    reduce: Reducer[TState, TAction],
    limit: Optional[int] = None,
) -> TState:
    """The state after `action` and all of its follow-ups"""
    return apply_action(state, action, reduce, limit).next_state


def apply_many(
    state: TState,
    actions: Iterable[TAction],
    reduce: Reducer[TState, TAction],
    limit: Optional[int] = None,
) -> TState:
    """Apply actions one after the other (each with its own step budget). Used to replay a history."""
    for action in actions:
        state = apply(state, action, reduce, limit)
    return state
