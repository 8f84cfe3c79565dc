"""
Boundary layer data model(s).

These objects can be used to hand a game to whatever stores or replicates it.
The engine never talks to storage itself: the host converts GameState <-> GameModel and passes the model on.
(Decouples the persisted/replicated shape from the domain objects used by the reducer)
"""

from typing import Optional

from pydantic import BaseModel, Field

# Type aliases to make GameModel easier to read
PieceColor = str
PlayerName = str


class MoveModel(BaseModel):
    source: str
    target: str
    promotion: Optional[str] = None


class TimeControlModel(BaseModel):
    base_minutes: float = Field(ge=0)
    increment_seconds: float = Field(default=0, ge=0)


class GameModel(BaseModel):
    """Transport-safe, flat representation of a GameState. Enum values are stored as their strings."""

    variant: str = "standard"
    players: Optional[dict[PieceColor, PlayerName]] = None
    moves: list[MoveModel] = Field(default_factory=list)
    moves_with_notation: list[str] = Field(default_factory=list)
    move_times: list[str] = Field(default_factory=list)
    boards: list[str]
    status: str
    game_over_reason: Optional[str] = None
    time_control: Optional[TimeControlModel] = None
