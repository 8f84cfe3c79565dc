"""Orchestration between the host (UI, timers, sync layer) and the engine: owns the one GameState and is the only caller of the executor."""

import logging
from typing import Optional, Self

from src.api.models import (
    ClockResponse,
    CreateGameRequest,
    GameResponse,
    MoveRequest,
    ResignRequest,
)
from src.chess.clock import (
    PlayerTimes,
    TimeControl,
    default_time_control,
    tick_interval_ms,
    time_remaining,
    timeout_reason,
    utc_now_iso,
)
from src.chess.cursor import MoveCursor
from src.chess.game import (
    Clock,
    GameAction,
    GameOver,
    GameReducer,
    GameState,
)
from src.chess.rules import PythonChessRules, RulesOracle
from src.core.models import GameModel
from src.core.shared_types import GameStatus
from src.engine.executor import apply

logger = logging.getLogger(__name__)


class GameSession:
    """
    One game as seen by a host application.
    ----

    ----
    * send(): the single entry point that changes the game (one call at a time)
    * tick(): called on a timer, turns a fallen flag into a game-over action
    * clock(): remaining time per player, frozen once the game is over
    * cursor: the viewer's position in the history

    `now` timestamps moves. `timer` is read by clock() and tick() when no current_time is given
    and defaults to `now`. Pass a separate timer (or current_time) when `now` is a replay clock
    that advances on every read.
    """

    def __init__(
        self,
        state: Optional[GameState] = None,
        rules: Optional[RulesOracle] = None,
        now: Clock = utc_now_iso,
        execution_limit: Optional[int] = None,
        timer: Optional[Clock] = None,
    ) -> None:
        self.rules = rules or PythonChessRules()
        self.now = now
        self.timer = timer or now
        self.reducer = GameReducer(rules=self.rules, now=now)
        self.execution_limit = execution_limit
        self.state = state or GameState.zero(rules=self.rules)
        self.cursor = MoveCursor.for_game(self.state)
        # instant the game was completed, used to freeze the clocks
        self.completed_at: Optional[str] = None

    @classmethod
    def from_model(
        cls,
        model: GameModel,
        rules: Optional[RulesOracle] = None,
        now: Clock = utc_now_iso,
        execution_limit: Optional[int] = None,
        timer: Optional[Clock] = None,
    ) -> Self:
        """Resume a game handed over by the storage / sync layer"""
        return cls(
            state=GameState.from_model(model),
            rules=rules,
            now=now,
            execution_limit=execution_limit,
            timer=timer,
        )

    def to_model(self) -> GameModel:
        return self.state.to_model()

    # -- Dispatch ---
    def send(self, action: GameAction, at: Optional[str] = None) -> GameState:
        """
        Apply an action and its follow-ups. ExecutionLimitExceededError propagates to the caller.

        `at` is the instant the action happened, used to freeze the clocks if it ends the game.
        Without it, a game ended by a move is frozen at that move's time.
        """
        was_over = self.state.is_over
        moves_before = len(self.state.moves)
        self.state = apply(self.state, action, self.reducer, self.execution_limit)
        if self.state.is_over and not was_over:
            if at is not None:
                self.completed_at = at
            elif len(self.state.moves) > moves_before:
                self.completed_at = self.state.move_times[-1]
            else:
                self.completed_at = self.now()
        self.cursor.sync(len(self.state.boards))
        return self.state

    # -- Host requests ---
    def new_game(self, request: CreateGameRequest) -> GameState:
        """Replace whatever game this session held with a fresh one for the two players"""
        time_control = (
            TimeControl(
                request.time_control.base_minutes,
                request.time_control.increment_seconds,
            )
            if request.time_control is not None
            else None
        )
        self.state = GameState.zero(time_control=time_control, rules=self.rules)
        self.cursor = MoveCursor.for_game(self.state)
        self.completed_at = None
        return self.send(request.to_action())

    def make_move(self, request: MoveRequest) -> bool:
        """
        Attempt a move. Returns False if the move was not recorded
        (illegal, game already over, or the viewer is looking at an older position).
        """
        if not self.cursor.can_interact_with_board:
            logger.info(
                "Ignoring move %s%s, viewer is not on the latest position",
                request.source,
                request.target,
            )
            return False
        moves_before = len(self.state.moves)
        self.send(request.to_action())
        return len(self.state.moves) > moves_before

    def resign(self, request: ResignRequest) -> GameState:
        return self.send(request.to_action())

    # -- Clock ---
    @property
    def time_control(self) -> TimeControl:
        """Games created without a time control use the configured default"""
        return self.state.time_control or default_time_control()

    def clock(self, current_time: Optional[str] = None) -> PlayerTimes:
        """
        Remaining time per player.
        ----
        * waiting: nobody's clock runs, both players have the full base time
        * in progress: counts up to current_time (defaults to the timer)
        * complete: frozen at the moment the game ended
        """
        if self.state.status == GameStatus.WAITING:
            return time_remaining(self.time_control, [])
        if self.state.status == GameStatus.COMPLETE:
            return time_remaining(
                self.time_control, self.state.move_times, self.completed_at
            )
        return time_remaining(
            self.time_control, self.state.move_times, current_time or self.timer()
        )

    def tick(self, current_time: Optional[str] = None) -> GameState:
        """Timer callback: ends the game when a player ran out of time"""
        if self.state.status != GameStatus.IN_PROGRESS:
            return self.state
        current_time = current_time or self.timer()
        reason = timeout_reason(self.time_control, self.state.move_times, current_time)
        if reason is None:
            return self.state
        logger.info("Flag fell: %s", reason.value)
        return self.send(GameOver(reason), at=current_time)

    # -- Response ---
    def snapshot(self, current_time: Optional[str] = None) -> GameResponse:
        remaining = self.clock(current_time)
        return GameResponse(
            game=self.state.to_model(),
            color_to_move=self.state.color_to_move,
            winner=self.state.winner,
            clock=ClockResponse(
                white_ms=remaining.white,
                black_ms=remaining.black,
                tick_interval_ms=tick_interval_ms(remaining),
            ),
        )
