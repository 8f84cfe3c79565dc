"""
Type definitions used across layers
"""

from enum import StrEnum


class Variant(StrEnum):
    STANDARD = "standard"


class GameStatus(StrEnum):
    WAITING = "waiting"
    IN_PROGRESS = "in-progress"
    COMPLETE = "complete"


class GameOverReason(StrEnum):
    CHECKMATE = "checkmate"
    WHITE_RESIGNATION = "white-resignation"
    BLACK_RESIGNATION = "black-resignation"
    STALEMATE = "stalemate"
    INSUFFICIENT_MATERIAL = "insufficient-material"
    THREEFOLD_REPETITION = "threefold-repetition"
    WHITE_TIMEOUT = "white-timeout"
    BLACK_TIMEOUT = "black-timeout"


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


# --- Only the piece types a pawn can promote into. Uses the single letter codes of UCI / FEN.
class PieceType(StrEnum):
    QUEEN = "q"
    ROOK = "r"
    BISHOP = "b"
    KNIGHT = "n"


RESIGNATION_REASONS: dict[Color, GameOverReason] = {
    Color.WHITE: GameOverReason.WHITE_RESIGNATION,
    Color.BLACK: GameOverReason.BLACK_RESIGNATION,
}

TIMEOUT_REASONS: dict[Color, GameOverReason] = {
    Color.WHITE: GameOverReason.WHITE_TIMEOUT,
    Color.BLACK: GameOverReason.BLACK_TIMEOUT,
}

DRAW_REASONS: frozenset[GameOverReason] = frozenset(
    {
        GameOverReason.STALEMATE,
        GameOverReason.INSUFFICIENT_MATERIAL,
        GameOverReason.THREEFOLD_REPETITION,
    }
)
