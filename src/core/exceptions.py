"""
Custom exceptions.

GameError and its subclasses describe problems with a game or with the input handed to it.
ExecutionLimitExceededError is not a GameError: it signals a broken reducer, not a gameplay outcome.
"""


class GameError(Exception):
    """Top-level exception for anything that goes wrong inside a game"""


class GameStateError(GameError):
    """The state of the game does not allow the request / a stored state is inconsistent"""


class IllegalMoveError(GameError):
    """The rules do not allow this move in the current position"""


class InvalidActionError(GameError):
    """The reducer was handed something that is not a GameAction"""


class InvalidRequestError(GameError):
    """Input at the boundary could not be interpreted"""


class InvalidTimeControlError(GameError):
    """Time control values that cannot be used to run a clock"""


class InvalidTimestampError(GameError):
    """A move time that cannot be parsed as an ISO-8601 instant"""


class ExecutionLimitExceededError(RuntimeError):
    """Raised by the executor when a cascade of follow-up actions does not terminate"""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(
            f"Execution limit exceeded ({limit} iterations). "
            "This is likely due to an infinite loop in the reducer."
        )
