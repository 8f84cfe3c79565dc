"""
The GameReducer is the entrypoint into the domain layer.
It maps (state, action) to (new state, follow-up actions) and is the only code that changes a GameState.
Legality of moves is asked from the rules oracle, the reducer itself knows nothing about how pieces move.
The executor (src/engine/executor.py) applies the follow-up actions.
"""

import logging
from copy import deepcopy
from dataclasses import dataclass, field
from typing import Callable, ClassVar, Optional, Self, Union

from src.chess.clock import TimeControl, utc_now_iso
from src.chess.rules import PythonChessRules, RulesOracle
from src.core.exceptions import GameStateError, IllegalMoveError, InvalidActionError
from src.core.models import GameModel, MoveModel, TimeControlModel
from src.core.shared_types import (
    DRAW_REASONS,
    RESIGNATION_REASONS,
    TIMEOUT_REASONS,
    Color,
    GameOverReason,
    GameStatus,
    PieceType,
    Variant,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], str]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    source: str
    target: str
    promotion: Optional[PieceType] = None

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        Universal Chess Interface:
        ---
        ---
        examples:
        * "e2e4": move the piece that was on e2 to e4
        * "e7e8q" : (pawn) moves from e7 to e8 and promotes to a queen (the q)
        """
        promotion = PieceType(uci[4]) if len(uci) == 5 else None
        return cls(source=uci[:2], target=uci[2:4], promotion=promotion)

    def to_uci(self) -> str:
        return f"{self.source}{self.target}{self.promotion or ''}"


# --- ACTIONS ---
@dataclass(frozen=True)
class GameCreated:
    players: dict[Color, str]
    type: ClassVar[str] = "game-created"


@dataclass(frozen=True)
class MoveMade:
    move: Move
    type: ClassVar[str] = "move-made"


@dataclass(frozen=True)
class TakebackRequested:
    player: Color
    move_number: int
    type: ClassVar[str] = "takeback-requested"


@dataclass(frozen=True)
class TakebackAccepted:
    type: ClassVar[str] = "takeback-accepted"


@dataclass(frozen=True)
class PlayerResigned:
    player: Color
    type: ClassVar[str] = "player-resigned"


@dataclass(frozen=True)
class GameOver:
    reason: GameOverReason
    type: ClassVar[str] = "game-over"


GameAction = Union[
    GameCreated,
    MoveMade,
    TakebackRequested,
    TakebackAccepted,
    PlayerResigned,
    GameOver,
]


# --- STATE ---
@dataclass
class GameState:
    """
    Everything there is to know about one game.
    ----
    boards[0] is the starting position and boards[i] the position after moves[i - 1].
    moves, moves_with_notation and move_times always have one entry less than boards.
    """

    boards: list[str]
    variant: Variant = Variant.STANDARD
    players: Optional[dict[Color, str]] = None
    moves: list[Move] = field(default_factory=list)
    moves_with_notation: list[str] = field(default_factory=list)
    move_times: list[str] = field(default_factory=list)
    status: GameStatus = GameStatus.WAITING
    game_over_reason: Optional[GameOverReason] = None
    time_control: Optional[TimeControl] = None

    @classmethod
    def zero(
        cls,
        time_control: Optional[TimeControl] = None,
        rules: Optional[RulesOracle] = None,
    ) -> Self:
        """A game nobody has joined or moved in yet."""
        rules = rules or PythonChessRules()
        return cls(boards=[rules.initial_position()], time_control=time_control)

    @property
    def current_board(self) -> str:
        return self.boards[-1]

    @property
    def color_to_move(self) -> Color:
        return Color.WHITE if len(self.moves) % 2 == 0 else Color.BLACK

    @property
    def is_over(self) -> bool:
        return self.status == GameStatus.COMPLETE

    @property
    def winner(self) -> Optional[str]:
        """Name of the player who won. None while playing, for draws, or when players were never registered."""
        reason = self.game_over_reason
        if not self.is_over or reason is None or reason in DRAW_REASONS:
            return None
        if reason == GameOverReason.CHECKMATE:
            # the side to move is the one that got mated
            winning_color = self.color_to_move.opponent
        else:
            losing_color = next(
                color
                for color in Color
                if reason in (RESIGNATION_REASONS[color], TIMEOUT_REASONS[color])
            )
            winning_color = losing_color.opponent
        return (self.players or {}).get(winning_color)

    def to_model(self) -> GameModel:
        """Encode into the flat format handed to storage / sync"""
        return GameModel(
            variant=self.variant.value,
            players=(
                {color.value: name for color, name in self.players.items()}
                if self.players is not None
                else None
            ),
            moves=[
                MoveModel(
                    source=move.source,
                    target=move.target,
                    promotion=move.promotion.value if move.promotion else None,
                )
                for move in self.moves
            ],
            moves_with_notation=list(self.moves_with_notation),
            move_times=list(self.move_times),
            boards=list(self.boards),
            status=self.status.value,
            game_over_reason=(
                self.game_over_reason.value if self.game_over_reason else None
            ),
            time_control=(
                TimeControlModel(
                    base_minutes=self.time_control.base_minutes,
                    increment_seconds=self.time_control.increment_seconds,
                )
                if self.time_control
                else None
            ),
        )

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Rebuild a GameState from its flat format. Raises GameStateError if the model breaks the invariants."""
        try:
            variant = Variant(model.variant)
            status = GameStatus(model.status)
            reason = (
                GameOverReason(model.game_over_reason)
                if model.game_over_reason is not None
                else None
            )
            players = (
                {Color(color): name for color, name in model.players.items()}
                if model.players is not None
                else None
            )
            moves = [
                Move(
                    source=move.source,
                    target=move.target,
                    promotion=PieceType(move.promotion) if move.promotion else None,
                )
                for move in model.moves
            ]
        except ValueError as e:
            raise GameStateError(f"Invalid value in stored game: {e}") from e

        if not model.boards:
            raise GameStateError("A game needs at least its starting position.")
        expected = len(model.boards) - 1
        lengths = (len(moves), len(model.moves_with_notation), len(model.move_times))
        if any(length != expected for length in lengths):
            raise GameStateError(
                f"Move logs out of step: {len(model.boards)} boards, moves/notation/times = {lengths}"
            )
        if (status == GameStatus.COMPLETE) != (reason is not None):
            raise GameStateError(
                f"Game over reason {reason!r} does not match status {status.value!r}"
            )

        time_control = (
            TimeControl(
                model.time_control.base_minutes, model.time_control.increment_seconds
            )
            if model.time_control
            else None
        )
        return cls(
            boards=list(model.boards),
            variant=variant,
            players=players,
            moves=moves,
            moves_with_notation=list(model.moves_with_notation),
            move_times=list(model.move_times),
            status=status,
            game_over_reason=reason,
            time_control=time_control,
        )


# --- REDUCER ---
class GameReducer:
    """
    (state, action) -> (new state, follow-up actions)
    ----

    ----
    The incoming state is never changed: every call works on a copy.
    The only outside input is the `now` callable, used to timestamp accepted moves.
    Inject a fixed clock to replay a game with identical results.
    """

    def __init__(
        self, rules: Optional[RulesOracle] = None, now: Clock = utc_now_iso
    ) -> None:
        self.rules = rules or PythonChessRules()
        self.now = now

    def __call__(
        self, state: GameState, action: GameAction
    ) -> tuple[GameState, list[GameAction]]:
        new_state = deepcopy(state)

        if isinstance(action, GameCreated):
            follow_ups = self._game_created(new_state, action)
        elif isinstance(action, MoveMade):
            follow_ups = self._move_made(new_state, action)
        elif isinstance(action, (TakebackRequested, TakebackAccepted)):
            # not implemented (yet): accepted, but nothing happens
            logger.debug("Ignoring %s", action.type)
            follow_ups = []
        elif isinstance(action, PlayerResigned):
            follow_ups = self._player_resigned(new_state, action)
        elif isinstance(action, GameOver):
            follow_ups = self._game_over(new_state, action)
        else:
            raise InvalidActionError(f"Not a game action: {action!r}")

        return new_state, follow_ups

    # -- ACTION HANDLERS ---
    def _game_created(self, state: GameState, action: GameCreated) -> list[GameAction]:
        state.players = dict(action.players)
        return []

    def _move_made(self, state: GameState, action: MoveMade) -> list[GameAction]:
        """
        1. ask the oracle to play the move on the latest board (illegal? -> nothing happens)
        2. first move of the game? -> the game is now in progress
        3. game not in progress? -> nothing happens
        4. record time, move, notation and new board
        5. check if the new position ends the game
        """
        move = action.move
        try:
            accepted = self.rules.apply(
                state.current_board, move.source, move.target, move.promotion
            )
        except IllegalMoveError as e:
            logger.info("Rejected move %s: %s", move.to_uci(), e)
            return []

        if not state.moves and state.status == GameStatus.WAITING:
            state.status = GameStatus.IN_PROGRESS

        if state.status != GameStatus.IN_PROGRESS:
            logger.info(
                "Ignoring move %s, game is not in progress. status: %s",
                move.to_uci(),
                state.status.value,
            )
            return []

        state.move_times.append(self.now())
        state.moves.append(move)
        state.moves_with_notation.append(accepted.notation)
        state.boards.append(accepted.position)

        reason = self._terminal_reason(state)
        if reason is None:
            return []
        return [GameOver(reason)]

    def _player_resigned(
        self, state: GameState, action: PlayerResigned
    ) -> list[GameAction]:
        return [GameOver(RESIGNATION_REASONS[action.player])]

    def _game_over(self, state: GameState, action: GameOver) -> list[GameAction]:
        # first game over wins
        if state.status == GameStatus.COMPLETE:
            return []
        state.status = GameStatus.COMPLETE
        state.game_over_reason = action.reason
        logger.info("Game over: %s", action.reason.value)
        return []

    # -- HELPERS ---
    def _terminal_reason(self, state: GameState) -> Optional[GameOverReason]:
        """Checked in order of priority, the first match ends the game."""
        position = state.current_board
        if self.rules.is_checkmate(position):
            return GameOverReason.CHECKMATE
        if self.rules.is_stalemate(position):
            return GameOverReason.STALEMATE
        if self.rules.is_insufficient_material(position):
            return GameOverReason.INSUFFICIENT_MATERIAL
        if self.rules.is_threefold_repetition(state.boards):
            return GameOverReason.THREEFOLD_REPETITION
        return None
