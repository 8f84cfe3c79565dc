"""
Cursor to browse through the positions of a game (time travel), without touching the game itself.

While pinned, the cursor follows the latest position as moves come in.
Looking at an older position un-pins it, and the board cannot be played on until the viewer returns to the latest position.
"""

from dataclasses import dataclass
from typing import Optional, Self

from src.chess.game import GameState, Move


@dataclass
class MoveCursor:
    index: int = 0
    latest: int = 0
    pinned: bool = True

    @classmethod
    def for_game(cls, state: GameState) -> Self:
        """A cursor pinned to the latest position of the game"""
        latest = len(state.boards) - 1
        return cls(index=latest, latest=latest, pinned=True)

    # --- capability flags ---
    @property
    def can_move_forward(self) -> bool:
        return self.index < self.latest

    @property
    def can_move_backward(self) -> bool:
        return self.index > 0

    @property
    def can_interact_with_board(self) -> bool:
        return self.pinned

    # --- follow the game ---
    def sync(self, board_count: int) -> None:
        """Call whenever the number of boards changes. Only a pinned cursor moves along."""
        self.latest = max(0, board_count - 1)
        if self.pinned:
            self.index = self.latest
        else:
            self.index = min(self.index, self.latest)

    # --- navigation ---
    def select(self, index: int) -> None:
        self.index = max(0, min(index, self.latest))
        self.pinned = self.index == self.latest

    def to_beginning(self) -> None:
        self.select(0)

    def backward(self) -> None:
        self.select(self.index - 1)

    def forward(self) -> None:
        self.select(self.index + 1)

    def to_latest(self) -> None:
        self.select(self.latest)

    # --- read the game ---
    def board(self, state: GameState) -> str:
        return state.boards[self.index]

    def last_move(self, state: GameState) -> Optional[Move]:
        """The move that led to the selected position (None for the starting position)"""
        if self.index == 0:
            return None
        return state.moves[self.index - 1]

    def notation(self, state: GameState) -> Optional[str]:
        if self.index == 0:
            return None
        return state.moves_with_notation[self.index - 1]
