"""Requests and Response models"""

from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from chessledger.chess.moves import UCI_PATTERN
from chessledger.core.exceptions import InvalidRequestError
from chessledger.core.models import (
    ChallengeModel,
    GameModel,
    GameSummary,
    RatingModel,
)
from chessledger.core.shared_types import Color, GameStatus
from chessledger.ledger.actions import KEYWORD_ACTIONS, Action, MakeMove

PlayerName = str


# --- REQUEST MODELS ---
class InitializeRequest(BaseModel):
    owner: PlayerName = Field(min_length=1)


class CreateChallengeRequest(BaseModel):
    opponent: Optional[PlayerName] = Field(default=None, min_length=1)
    play_as: Optional[Color] = None
    block_limit: Optional[int] = Field(default=None, ge=1)


class TurnRequest(BaseModel):
    action: Literal["move", "resign", "offer_draw", "accept_draw", "decline_draw"]
    move: Optional[str] = None

    @field_validator("move")
    @classmethod
    def validate_move(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not UCI_PATTERN.match(value):
            raise InvalidRequestError(f"Cannot interpret move: {value!r} as UCI notation.")
        return value

    @model_validator(mode="after")
    def move_only_with_move_action(self) -> "TurnRequest":
        if (self.action == "move") != (self.move is not None):
            raise InvalidRequestError("'move' is required for action 'move' and not allowed otherwise.")
        return self

    def to_action(self) -> Action:
        if self.move is not None:
            return MakeMove(self.move)
        return KEYWORD_ACTIONS[self.action]


# --- RESPONSE MODELS ---
class StateResponse(BaseModel):
    owner: PlayerName


class ChallengeResponse(BaseModel):
    challenge_id: int
    created_by: PlayerName
    opponent: Optional[PlayerName]
    play_as: Optional[Color]
    block_limit: Optional[int]
    block_created: int

    @classmethod
    def from_model(cls, model: ChallengeModel) -> "ChallengeResponse":
        return cls(
            challenge_id=model.challenge_id,
            created_by=model.created_by,
            opponent=model.opponent,
            play_as=model.play_as,
            block_limit=model.block_limit,
            block_created=model.block_created,
        )


class TurnRecordResponse(BaseModel):
    block_height: int
    action: str


class GameResponse(BaseModel):
    game_id: int
    player1: PlayerName
    player2: PlayerName
    block_limit: Optional[int]
    block_start: int
    fen: str
    moves: list[TurnRecordResponse]
    draw_offer: Optional[Color]
    status: Optional[GameStatus]

    @classmethod
    def from_model(cls, model: GameModel) -> "GameResponse":
        return cls(
            game_id=model.game_id,
            player1=model.player1,
            player2=model.player2,
            block_limit=model.block_limit,
            block_start=model.block_start,
            fen=model.fen,
            moves=[
                TurnRecordResponse(block_height=m.block_height, action=m.action)
                for m in model.moves
            ],
            draw_offer=model.draw_offer,
            status=model.status,
        )


class GameSummaryResponse(BaseModel):
    game_id: int
    player1: PlayerName
    player2: PlayerName
    block_limit: Optional[int]
    block_start: int
    status: Optional[GameStatus]
    color_to_move: Optional[Color]

    @classmethod
    def from_model(cls, model: GameSummary) -> "GameSummaryResponse":
        return cls(
            game_id=model.game_id,
            player1=model.player1,
            player2=model.player2,
            block_limit=model.block_limit,
            block_start=model.block_start,
            status=model.status,
            color_to_move=model.color_to_move,
        )


class RatingResponse(BaseModel):
    player: PlayerName
    rating: int

    @classmethod
    def from_model(cls, model: RatingModel) -> "RatingResponse":
        return cls(player=model.player, rating=model.rating)


class TurnResponse(BaseModel):
    """Result of a Turn: the status if the game ended, otherwise the color that is to move next."""

    game_id: int
    status: Optional[GameStatus]
    color_to_move: Optional[Color]


class AcceptChallengeResponse(BaseModel):
    game_id: int
    player1: PlayerName
    player2: PlayerName


class CheckResponse(BaseModel):
    result: bool
