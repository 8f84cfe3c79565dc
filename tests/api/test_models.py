import pytest

from src.api.models import CreateGameRequest, MoveRequest, ResignRequest
from src.chess.game import GameCreated, Move, MoveMade, PlayerResigned
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, PieceType


# -- Validation - CreateGameRequest --
def test_create_game_request_to_action() -> None:
    request = CreateGameRequest(white="zan", black="zhenya")
    assert request.time_control is None
    assert request.to_action() == GameCreated(
        players={Color.WHITE: "zan", Color.BLACK: "zhenya"}
    )


@pytest.mark.parametrize("white, black", [("", "zhenya"), ("zan", "   ")])
def test_players_need_a_name(white: str, black: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = CreateGameRequest(white=white, black=black)


# -- Validation - MoveRequest --
def test_valid_square_names() -> None:
    """Test that MoveRequest accepts correctly written squares in algebraic notation."""
    request = MoveRequest(source="e2", target="E4")

    assert request.source == "e2"
    assert request.target == "e4"
    assert request.promotion is None


@pytest.mark.parametrize(
    "invalid_square",
    [
        "e",  # too short
        "e22",  # too long
        "2e",  # wrong order
        "i1",  # file outside the board
        "a9",  # rank outside the board
        "a0",
    ],
)
def test_invalid_square_names(invalid_square: str) -> None:
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(source=invalid_square, target="e4")
    with pytest.raises(InvalidRequestError):
        _ = MoveRequest(source="e2", target=invalid_square)


def test_move_request_to_action() -> None:
    request = MoveRequest(source="e7", target="e8", promotion="n")

    assert request.promotion == PieceType.KNIGHT
    assert request.to_action() == MoveMade(Move("e7", "e8", PieceType.KNIGHT))


# -- ResignRequest --
def test_resign_request_to_action() -> None:
    assert ResignRequest(player="black").to_action() == PlayerResigned(Color.BLACK)
