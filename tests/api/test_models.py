"""Unit tests for chessledger/api/models.py"""

import pytest
from pydantic import ValidationError

from chessledger.api.models import CreateChallengeRequest, GameResponse, TurnRequest
from chessledger.core.exceptions import InvalidRequestError
from chessledger.core.models import GameModel, TurnRecord
from chessledger.core.shared_types import Color
from chessledger.ledger.actions import AcceptDraw, MakeMove, Resign


# -- Validation - CreateChallengeRequest --
def test_challenge_defaults() -> None:
    """Open challenge, no color preference, no block limit."""
    request = CreateChallengeRequest()
    assert request.opponent is None
    assert request.play_as is None
    assert request.block_limit is None


def test_challenge_color_by_name() -> None:
    request = CreateChallengeRequest(opponent="bob", play_as="black", block_limit=30)
    assert request.play_as == Color.BLACK


@pytest.mark.parametrize(
    "fields",
    [
        {"block_limit": 0},
        {"opponent": ""},
        {"play_as": "purple"},
    ],
)
def test_invalid_challenge(fields: dict) -> None:
    with pytest.raises(ValidationError):
        CreateChallengeRequest(**fields)


# -- Validation - TurnRequest --
@pytest.mark.parametrize(
    "fields, action",
    [
        ({"action": "move", "move": "e2e4"}, MakeMove("e2e4")),
        ({"action": "move", "move": "e7e8q"}, MakeMove("e7e8q")),
        ({"action": "resign"}, Resign()),
        ({"action": "accept_draw"}, AcceptDraw()),
    ],
)
def test_turn_request_to_action(fields: dict, action: object) -> None:
    assert TurnRequest(**fields).to_action() == action


@pytest.mark.parametrize(
    "move",
    [
        "nonsense",  # not UCI at all
        "e2e9",  # rank out of bounds
        "e7e8k",  # cannot promote to a king
    ],
)
def test_invalid_move_notation(move: str) -> None:
    with pytest.raises(InvalidRequestError):
        TurnRequest(action="move", move=move)


@pytest.mark.parametrize(
    "fields",
    [
        {"action": "move"},  # a move without the move
        {"action": "resign", "move": "e2e4"},  # a move where none belongs
    ],
)
def test_move_only_with_move_action(fields: dict) -> None:
    with pytest.raises(InvalidRequestError):
        TurnRequest(**fields)


def test_unknown_action() -> None:
    with pytest.raises(ValidationError):
        TurnRequest(action="castle")


# -- Responses --
def test_game_response_from_model() -> None:
    model = GameModel(
        game_id=3,
        player1="alice",
        player2="bob",
        block_limit=None,
        block_start=10,
        turn_block=12,
        moves=[TurnRecord(12, "offer_draw")],
        draw_offer=Color.WHITE,
    )
    response = GameResponse.from_model(model)
    assert response.moves[0].action == "offer_draw"
    assert response.draw_offer == Color.WHITE
    assert response.status is None
    assert response.model_dump()["draw_offer"] == "white"
