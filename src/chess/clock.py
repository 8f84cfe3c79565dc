"""
Clock accounting with Fischer increment support.

Pure functions of the move-time log: nothing here keeps time by itself.
Index 0 of the log is White's first move, odd indices are Black's moves.
All durations are in milliseconds.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import NamedTuple, Optional, Self, Sequence

from src.core.config import settings
from src.core.exceptions import InvalidTimeControlError, InvalidTimestampError
from src.core.shared_types import TIMEOUT_REASONS, Color, GameOverReason

MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND

# Display refresh cadence: tick faster once a player is in the last seconds
NORMAL_TICK_MS = 1000
FAST_TICK_MS = 10
LOW_TIME_THRESHOLD_MS = 10 * MS_PER_SECOND


@dataclass(frozen=True)
class TimeControl:
    """Base allotment per player (minutes) + increment per completed move (seconds)."""

    base_minutes: float
    increment_seconds: float = 0

    def __post_init__(self) -> None:
        if self.base_minutes < 0 or self.increment_seconds < 0:
            raise InvalidTimeControlError(
                f"Time control cannot be negative: {self.base_minutes}m+{self.increment_seconds}s"
            )

    @property
    def base_ms(self) -> int:
        return round(self.base_minutes * MS_PER_MINUTE)

    @property
    def increment_ms(self) -> int:
        return round(self.increment_seconds * MS_PER_SECOND)

    # Common presets
    @classmethod
    def bullet_1m(cls) -> Self:
        return cls(1)

    @classmethod
    def blitz_3m2s(cls) -> Self:
        return cls(3, 2)

    @classmethod
    def blitz_5m3s(cls) -> Self:
        return cls(5, 3)

    @classmethod
    def rapid_10m(cls) -> Self:
        return cls(10)

    @classmethod
    def rapid_15m10s(cls) -> Self:
        return cls(15, 10)

    @classmethod
    def classical_30m(cls) -> Self:
        return cls(30)

    def __str__(self) -> str:
        """Usual notation, e.g. 5+3"""
        return f"{self.base_minutes:g}+{self.increment_seconds:g}"


class PlayerTimes(NamedTuple):
    white: int
    black: int

    def for_color(self, color: Color) -> int:
        return self.white if color == Color.WHITE else self.black


def default_time_control() -> TimeControl:
    return TimeControl(settings.default_base_minutes, settings.default_increment_seconds)


def utc_now_iso() -> str:
    """Current instant as a sortable ISO-8601 string. The default time source of the reducer."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace(
        "+00:00", "Z"
    )


def parse_timestamp(timestamp: str) -> datetime:
    try:
        moment = datetime.fromisoformat(timestamp)
    except (TypeError, ValueError) as e:
        raise InvalidTimestampError(f"Not an ISO-8601 timestamp: {timestamp!r}") from e
    if moment.tzinfo is None:
        # naive timestamps are read as UTC
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def elapsed_ms(start: str, end: str) -> int:
    """Whole milliseconds from start to end (negative if end is earlier)."""
    delta = parse_timestamp(end) - parse_timestamp(start)
    return delta // timedelta(milliseconds=1)


def thinking_time(
    move_times: Sequence[str], current_time: Optional[str] = None
) -> PlayerTimes:
    """
    Time each player spent thinking.
    ----

    ----
    * The gap ending at move i (i >= 1) belongs to the player who made move i:
      i even -> White, i odd -> Black.
    * With current_time, the gap since the last move is charged to the side to move
      (an even number of moves means White is to move).
    * Before the first move nobody's clock runs.
    """
    white = 0
    black = 0

    for index in range(1, len(move_times)):
        duration = elapsed_ms(move_times[index - 1], move_times[index])
        if index % 2 == 0:
            white += duration
        else:
            black += duration

    if current_time is not None and move_times:
        ongoing = elapsed_ms(move_times[-1], current_time)
        if len(move_times) % 2 == 0:
            white += ongoing
        else:
            black += ongoing

    return PlayerTimes(white=white, black=black)


def completed_moves(move_count: int) -> PlayerTimes:
    """Moves made by each color after move_count half-moves. White moves first."""
    return PlayerTimes(white=(move_count + 1) // 2, black=move_count // 2)


def time_remaining(
    time_control: TimeControl,
    move_times: Sequence[str],
    current_time: Optional[str] = None,
) -> PlayerTimes:
    """
    base - thinking time + increment for every move the player completed, never below zero.
    """
    thinking = thinking_time(move_times, current_time)
    moves = completed_moves(len(move_times))
    base = time_control.base_ms
    increment = time_control.increment_ms

    return PlayerTimes(
        white=max(0, base - thinking.white + moves.white * increment),
        black=max(0, base - thinking.black + moves.black * increment),
    )


def timeout_reason(
    time_control: TimeControl,
    move_times: Sequence[str],
    current_time: Optional[str] = None,
) -> Optional[GameOverReason]:
    """The timeout a host should report, if any. White's flag is checked first."""
    remaining = time_remaining(time_control, move_times, current_time)
    for color in (Color.WHITE, Color.BLACK):
        if remaining.for_color(color) <= 0:
            return TIMEOUT_REASONS[color]
    return None


def tick_interval_ms(remaining: PlayerTimes) -> int:
    """How often a display should recompute the clocks."""
    if min(remaining) < LOW_TIME_THRESHOLD_MS:
        return FAST_TICK_MS
    return NORMAL_TICK_MS
