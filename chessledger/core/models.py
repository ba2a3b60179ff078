"""
Boundary layer data model(s).

These objects are used to communicate with the Service.
Both the API layer (higher) and the domain/db layers (lower) use the models defined here to send to/receive from the Service
(Decouples the data model specific to the DB layer, API layer, or domain layer from the information needed to send across boundaries)
"""

from dataclasses import dataclass, field
from typing import Optional

from chessledger.chess.fen import STARTING_FEN
from chessledger.core.shared_types import Color, GameStatus

# Type aliases to make the models easier to read
PlayerName = str
BlockHeight = int


@dataclass
class ChallengeModel:
    """A proposed game awaiting acceptance."""

    challenge_id: int
    created_by: PlayerName
    opponent: Optional[PlayerName]
    play_as: Optional[Color]
    block_limit: Optional[int]
    block_created: BlockHeight


@dataclass(frozen=True)
class TurnRecord:
    """One entry of the append-only action log: a UCI move, or one of the keywords in chessledger/ledger/actions.py"""

    block_height: BlockHeight
    action: str


@dataclass
class GameModel:
    """Transport-safe representation of a ledger game used between API, Service, DB, and domain layers."""

    game_id: int
    player1: PlayerName  # white
    player2: PlayerName  # black
    block_limit: Optional[int]
    block_start: BlockHeight
    turn_block: BlockHeight
    fen: str = STARTING_FEN
    moves: list[TurnRecord] = field(default_factory=list)
    history_fen: list[str] = field(default_factory=list)
    draw_offer: Optional[Color] = None
    status: Optional[GameStatus] = None


@dataclass
class RatingModel:
    player: PlayerName
    rating: int


@dataclass
class StateModel:
    """Process-wide configuration record, written once at initialization."""

    owner: PlayerName


@dataclass
class GameSummary:
    """A game without its logs, for listings."""

    game_id: int
    player1: PlayerName
    player2: PlayerName
    block_limit: Optional[int]
    block_start: BlockHeight
    status: Optional[GameStatus]
    color_to_move: Optional[Color]  # None once the game is over

    @classmethod
    def from_game(cls, game: GameModel) -> "GameSummary":
        color_to_move = None
        if game.status is None:
            color_to_move = Color.WHITE if game.fen.split(" ")[1] == "w" else Color.BLACK
        return cls(
            game_id=game.game_id,
            player1=game.player1,
            player2=game.player2,
            block_limit=game.block_limit,
            block_start=game.block_start,
            status=game.status,
            color_to_move=color_to_move,
        )
