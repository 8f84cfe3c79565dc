"""
Rules oracle: everything the reducer needs to know about the rules of chess.

Key idea: the reducer only depends on the RulesOracle protocol. The default implementation delegates to python-chess.
Positions are plain FEN strings. A fresh chess.Board is built from the FEN for every call, so the oracle holds no state between calls.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

import chess
import chess.polyglot

from src.core.exceptions import GameStateError, IllegalMoveError
from src.core.shared_types import PieceType


@dataclass(frozen=True)
class AcceptedMove:
    """What the oracle returns for a legal move"""

    notation: str  # SAN, relative to the position the move was played in
    position: str  # FEN after the move


class RulesOracle(Protocol):
    """Just the parts of the rules the reducer needs"""

    def initial_position(self) -> str: ...
    def apply(
        self,
        position: str,
        source: str,
        target: str,
        promotion: Optional[PieceType] = None,
    ) -> AcceptedMove: ...
    def in_check(self, position: str) -> bool: ...
    def is_checkmate(self, position: str) -> bool: ...
    def is_stalemate(self, position: str) -> bool: ...
    def is_insufficient_material(self, position: str) -> bool: ...
    def is_threefold_repetition(self, history: Sequence[str]) -> bool: ...


class PythonChessRules:
    """Standard chess rules backed by python-chess"""

    def initial_position(self) -> str:
        return chess.Board().fen()

    def apply(
        self,
        position: str,
        source: str,
        target: str,
        promotion: Optional[PieceType] = None,
    ) -> AcceptedMove:
        """
        Play source -> target on the position.

        * A pawn reaching the last rank promotes to a queen unless another piece is requested.
        * A promotion piece supplied for any other move is ignored.
        * Castling is given as the king's move, e.g. e1g1.

        Raises IllegalMoveError if the squares cannot be parsed or the move is not legal.
        """
        board = _board(position)
        try:
            from_square = chess.parse_square(source)
            to_square = chess.parse_square(target)
        except ValueError as e:
            raise IllegalMoveError(f"Unknown square in move {source}{target}") from e

        promote_to = None
        if promotion is not None and _is_promotion_push(board, from_square, to_square):
            promote_to = chess.Piece.from_symbol(promotion.value).piece_type

        try:
            move = board.find_move(from_square, to_square, promote_to)
        except ValueError as e:
            # chess.IllegalMoveError is a ValueError
            raise IllegalMoveError(
                f"Move not allowed: {source}{target} in {position!r}"
            ) from e

        notation = board.san(move)
        board.push(move)
        return AcceptedMove(notation=notation, position=board.fen())

    def in_check(self, position: str) -> bool:
        return _board(position).is_check()

    def is_checkmate(self, position: str) -> bool:
        return _board(position).is_checkmate()

    def is_stalemate(self, position: str) -> bool:
        return _board(position).is_stalemate()

    def is_insufficient_material(self, position: str) -> bool:
        return _board(position).is_insufficient_material()

    def is_threefold_repetition(self, history: Sequence[str]) -> bool:
        """
        The last position of the history occurred at least three times.
        ---
        Positions are compared by their polyglot hash: piece placement, side to move, castling rights and
        (only when a capture is actually possible) the en passant square. Move counters do not count.
        """
        if not history:
            return False
        keys = [chess.polyglot.zobrist_hash(_board(fen)) for fen in history]
        return keys.count(keys[-1]) >= 3


# --- HELPERS ---
def _board(position: str) -> chess.Board:
    try:
        return chess.Board(position)
    except ValueError as e:
        raise GameStateError(f"Cannot interpret position {position!r}") from e


def _is_promotion_push(
    board: chess.Board, from_square: chess.Square, to_square: chess.Square
) -> bool:
    return board.piece_type_at(from_square) == chess.PAWN and chess.square_rank(
        to_square
    ) in (0, 7)
