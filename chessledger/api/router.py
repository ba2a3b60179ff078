"""
HTTP routes. Thin glue: parse the request, call the service, shape the response.

The caller identity comes from the authentication layer in front of this service (X-Player header), and
the logical clock is supplied per call (X-Block-Height header).
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.orm import Session

from chessledger.api.models import (
    AcceptChallengeResponse,
    ChallengeResponse,
    CheckResponse,
    CreateChallengeRequest,
    GameResponse,
    GameSummaryResponse,
    InitializeRequest,
    RatingResponse,
    StateResponse,
    TurnRequest,
    TurnResponse,
)
from chessledger.core.config import get_config
from chessledger.core.models import GameSummary
from chessledger.db.database import get_db
from chessledger.db.sql_repository import SQLLedgerRepository
from chessledger.services.ledger_service import LedgerService


def get_service(db: Annotated[Session, Depends(get_db)]) -> LedgerService:
    return LedgerService(SQLLedgerRepository(db), get_config())


def caller_identity(x_player: Annotated[str, Header(min_length=1)]) -> str:
    return x_player


def block_height(x_block_height: Annotated[int, Header(ge=0)]) -> int:
    return x_block_height


Service = Annotated[LedgerService, Depends(get_service)]
Caller = Annotated[str, Depends(caller_identity)]
Now = Annotated[int, Depends(block_height)]

router = APIRouter()


# --- SETUP ---
@router.post("/state", response_model=StateResponse, status_code=status.HTTP_201_CREATED)
def initialize(request: InitializeRequest, service: Service) -> StateResponse:
    state = service.initialize(request.owner)
    return StateResponse(owner=state.owner)


@router.get("/state", response_model=StateResponse)
def get_state(service: Service) -> StateResponse:
    return StateResponse(owner=service.get_state().owner)


# --- CHALLENGES ---
@router.post(
    "/challenges", response_model=ChallengeResponse, status_code=status.HTTP_201_CREATED
)
def create_challenge(
    request: CreateChallengeRequest, caller: Caller, now: Now, service: Service
) -> ChallengeResponse:
    challenge = service.create_challenge(
        creator=caller,
        now=now,
        opponent=request.opponent,
        play_as=request.play_as,
        block_limit=request.block_limit,
    )
    return ChallengeResponse.from_model(challenge)


@router.post("/challenges/{challenge_id}/accept", response_model=AcceptChallengeResponse)
def accept_challenge(
    challenge_id: int, caller: Caller, now: Now, service: Service
) -> AcceptChallengeResponse:
    game = service.accept_challenge(caller, challenge_id, now)
    return AcceptChallengeResponse(
        game_id=game.game_id, player1=game.player1, player2=game.player2
    )


@router.delete("/challenges/{challenge_id}", status_code=status.HTTP_204_NO_CONTENT)
def cancel_challenge(challenge_id: int, caller: Caller, service: Service) -> None:
    service.cancel_challenge(caller, challenge_id)


@router.get("/challenges/{challenge_id}", response_model=ChallengeResponse)
def get_challenge(challenge_id: int, service: Service) -> ChallengeResponse:
    return ChallengeResponse.from_model(service.get_challenge(challenge_id))


@router.get("/challenges", response_model=list[ChallengeResponse])
def get_challenges(
    service: Service,
    after: Annotated[Optional[int], Query(ge=0)] = None,
    player: Annotated[Optional[str], Query(min_length=1)] = None,
) -> list[ChallengeResponse]:
    return [
        ChallengeResponse.from_model(challenge)
        for challenge in service.get_challenges(after=after, player=player)
    ]


# --- GAMES ---
@router.post("/games/{game_id}/turn", response_model=TurnResponse)
def turn(
    game_id: int, request: TurnRequest, caller: Caller, now: Now, service: Service
) -> TurnResponse:
    game = service.turn(caller, game_id, request.to_action(), now)
    summary = GameSummary.from_game(game)
    return TurnResponse(
        game_id=game.game_id, status=summary.status, color_to_move=summary.color_to_move
    )


@router.post("/games/{game_id}/timeout", response_model=GameResponse)
def declare_timeout(game_id: int, now: Now, service: Service) -> GameResponse:
    return GameResponse.from_model(service.declare_timeout(game_id, now))


@router.get("/games/{game_id}", response_model=GameResponse)
def get_game(game_id: int, service: Service) -> GameResponse:
    return GameResponse.from_model(service.get_game(game_id))


@router.get("/games", response_model=list[GameSummaryResponse])
def get_games(
    service: Service,
    after: Annotated[Optional[int], Query(ge=0)] = None,
    game_over: bool = False,
    player: Annotated[Optional[str], Query(min_length=1)] = None,
) -> list[GameSummaryResponse]:
    return [
        GameSummaryResponse.from_model(summary)
        for summary in service.get_games(after=after, game_over=game_over, player=player)
    ]


@router.get("/games/{game_id}/valid-move", response_model=CheckResponse)
def valid_move(game_id: int, player: str, move: str, service: Service) -> CheckResponse:
    return CheckResponse(result=service.valid_move(game_id, player, move))


@router.get("/games/{game_id}/turn", response_model=CheckResponse)
def get_turn(game_id: int, player: str, service: Service) -> CheckResponse:
    return CheckResponse(result=service.get_turn(game_id, player))


# --- RATINGS ---
@router.get("/ratings", response_model=list[RatingResponse])
def get_ratings(service: Service) -> list[RatingResponse]:
    return [RatingResponse.from_model(rating) for rating in service.get_ratings()]
