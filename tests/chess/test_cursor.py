"""Unit tests for src/chess/cursor.py"""

import pytest

from src.chess.cursor import MoveCursor
from src.chess.game import GameState, Move, MoveMade
from src.engine.executor import apply


@pytest.fixture
def cursor() -> MoveCursor:
    """Pinned cursor over a game with 4 moves (5 boards)"""
    cursor = MoveCursor()
    cursor.sync(5)
    return cursor


def test_new_cursor_is_pinned_to_start() -> None:
    cursor = MoveCursor()
    assert cursor.index == 0
    assert cursor.pinned
    assert cursor.can_interact_with_board
    assert not cursor.can_move_backward
    assert not cursor.can_move_forward


def test_pinned_cursor_follows_new_moves() -> None:
    cursor = MoveCursor()
    for board_count in range(2, 8):
        cursor.sync(board_count)
        assert cursor.index == board_count - 1
        assert cursor.pinned


def test_unpinned_cursor_stays_put(cursor: MoveCursor) -> None:
    cursor.select(2)
    cursor.sync(6)

    assert cursor.index == 2
    assert cursor.latest == 5
    assert not cursor.pinned


def test_select_earlier_position_unpins(cursor: MoveCursor) -> None:
    cursor.select(1)

    assert cursor.index == 1
    assert not cursor.pinned
    assert not cursor.can_interact_with_board
    assert cursor.can_move_backward
    assert cursor.can_move_forward


def test_select_latest_repins(cursor: MoveCursor) -> None:
    cursor.select(1)
    cursor.select(4)

    assert cursor.pinned
    assert cursor.can_interact_with_board


@pytest.mark.parametrize("index, expected", [(-3, 0), (0, 0), (4, 4), (99, 4)])
def test_select_is_clamped(cursor: MoveCursor, index: int, expected: int) -> None:
    cursor.select(index)
    assert cursor.index == expected


def test_navigation(cursor: MoveCursor) -> None:
    cursor.to_beginning()
    assert cursor.index == 0
    assert not cursor.pinned

    cursor.backward()
    assert cursor.index == 0

    cursor.forward()
    cursor.forward()
    assert cursor.index == 2
    assert not cursor.can_interact_with_board

    cursor.to_latest()
    assert cursor.index == 4
    assert cursor.pinned

    cursor.forward()
    assert cursor.index == 4

    cursor.backward()
    assert cursor.index == 3
    assert not cursor.pinned


def test_stepping_forward_onto_latest_repins(cursor: MoveCursor) -> None:
    cursor.select(3)
    cursor.forward()
    assert cursor.pinned


def test_cursor_reads_game_without_changing_it(reducer, zero_state: GameState) -> None:
    state = zero_state
    for uci in ("e2e4", "e7e5"):
        state = apply(state, MoveMade(Move.from_uci(uci)), reducer)
    cursor = MoveCursor.for_game(state)
    assert cursor.index == 2

    cursor.select(1)
    assert cursor.board(state) == state.boards[1]
    assert cursor.last_move(state) == Move("e2", "e4")
    assert cursor.notation(state) == "e4"

    cursor.to_beginning()
    assert cursor.last_move(state) is None
    assert cursor.notation(state) is None
    assert len(state.boards) == 3
