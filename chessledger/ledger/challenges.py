"""
Challenge lifecycle rules: who may create, accept, or cancel a challenge, and how an accepted challenge
resolves into a game.

The functions here are pure. Loading/persisting the records (and assigning ids) is done by the service
inside a single unit of work.
"""

from typing import Optional

from chessledger.chess.fen import STARTING_FEN
from chessledger.core.exceptions import (
    CannotPlaySelfError,
    InvalidRequestError,
    NotYourChallengeError,
)
from chessledger.core.models import BlockHeight, ChallengeModel, GameModel, PlayerName
from chessledger.core.shared_types import Color


def new_challenge(
    challenge_id: int,
    creator: PlayerName,
    opponent: Optional[PlayerName],
    play_as: Optional[Color],
    block_limit: Optional[int],
    now: BlockHeight,
) -> ChallengeModel:
    if opponent is not None and opponent == creator:
        raise CannotPlaySelfError("You cannot challenge yourself.")
    if block_limit is not None and block_limit < 1:
        raise InvalidRequestError(f"block_limit must be at least 1, got {block_limit}.")
    return ChallengeModel(
        challenge_id=challenge_id,
        created_by=creator,
        opponent=opponent,
        play_as=play_as,
        block_limit=block_limit,
        block_created=now,
    )


def check_can_accept(challenge: ChallengeModel, acceptor: PlayerName) -> None:
    """Not your own challenge, and if it is directed, it has to be directed at you."""
    if challenge.created_by == acceptor:
        raise CannotPlaySelfError("You cannot accept your own challenge.")
    if challenge.opponent is not None and challenge.opponent != acceptor:
        raise NotYourChallengeError(
            f"Challenge {challenge.challenge_id} is directed at another player."
        )


def check_can_cancel(challenge: ChallengeModel, caller: PlayerName) -> None:
    if challenge.created_by != caller:
        raise NotYourChallengeError(
            f"Only the creator may cancel challenge {challenge.challenge_id}."
        )


def player_order(
    creator: PlayerName,
    acceptor: PlayerName,
    play_as: Optional[Color],
    now: BlockHeight,
) -> tuple[PlayerName, PlayerName]:
    """
    Color assignment: (player1, player2) = (white, black)
    ----

    * creator asked for a color --> creator gets it.
    * no preference --> parity of the block height at acceptance: even means the creator plays white.

    The block height is public state, neither player picks it, and replaying the same inputs gives the same order.
    """
    if play_as is None:
        play_as = Color.WHITE if now % 2 == 0 else Color.BLACK
    if play_as == Color.WHITE:
        return creator, acceptor
    return acceptor, creator


def start_game(
    game_id: int, challenge: ChallengeModel, acceptor: PlayerName, now: BlockHeight
) -> GameModel:
    """The game an accepted challenge resolves into. The clock for white's first move starts now."""
    player1, player2 = player_order(
        challenge.created_by, acceptor, challenge.play_as, now
    )
    return GameModel(
        game_id=game_id,
        player1=player1,
        player2=player2,
        block_limit=challenge.block_limit,
        block_start=now,
        turn_block=now,
        fen=STARTING_FEN,
    )
