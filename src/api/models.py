"""Requests and Response models at the boundary between the host (UI, sync layer) and the engine"""

from typing import Optional

from pydantic import BaseModel, field_validator, model_validator

from src.chess.game import GameCreated, Move, MoveMade, PlayerResigned
from src.core.exceptions import InvalidRequestError
from src.core.models import GameModel, TimeControlModel
from src.core.shared_types import Color, PieceType

PlayerName = str

FILES = "abcdefgh"
RANKS = "12345678"


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    white: PlayerName
    black: PlayerName
    time_control: Optional[TimeControlModel] = None

    @model_validator(mode="after")
    def validate_players(self) -> "CreateGameRequest":
        if not self.white.strip() or not self.black.strip():
            raise InvalidRequestError("Both players need a name.")
        return self

    def to_action(self) -> GameCreated:
        return GameCreated(players={Color.WHITE: self.white, Color.BLACK: self.black})


class MoveRequest(BaseModel):
    """A drag-and-drop gesture: the square the piece was picked up from and the square it was dropped on."""

    source: str
    target: str
    promotion: Optional[PieceType] = None

    @field_validator(*["source", "target"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        def _is_algebraic_notation(value: str) -> bool:
            if len(value) != 2:
                return False
            return value[0] in FILES and value[1] in RANKS

        value = value.strip().lower()
        if not _is_algebraic_notation(value):
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a valid square name."
            )
        return value

    def to_action(self) -> MoveMade:
        return MoveMade(
            Move(source=self.source, target=self.target, promotion=self.promotion)
        )


class ResignRequest(BaseModel):
    player: Color

    def to_action(self) -> PlayerResigned:
        return PlayerResigned(self.player)


# --- RESPONSE MODELS ---
class ClockResponse(BaseModel):
    white_ms: int
    black_ms: int
    tick_interval_ms: int


class GameResponse(BaseModel):
    game: GameModel
    color_to_move: Color
    winner: Optional[PlayerName]
    clock: ClockResponse
