"""Elo rating update applied to both players once a game has finished."""

from dataclasses import dataclass

from chessledger.core.shared_types import GameStatus, Outcome

ACTUAL_SCORES: dict[Outcome, float] = {
    Outcome.WIN: 1.0,
    Outcome.DRAW: 0.5,
    Outcome.LOSS: 0.0,
}

PLAYER1_WINS = {
    GameStatus.WHITE_CHECKMATES,
    GameStatus.BLACK_RESIGNS,
    GameStatus.BLACK_TIMEOUT,
}
PLAYER1_LOSES = {
    GameStatus.BLACK_CHECKMATES,
    GameStatus.WHITE_RESIGNS,
    GameStatus.WHITE_TIMEOUT,
}


@dataclass(frozen=True)
class EloConfig:
    k: int = 32
    scale: int = 400
    floor: int = 100


def outcome_for(status: GameStatus) -> Outcome:
    """Outcome from player1's (White's) perspective."""
    if status in PLAYER1_WINS:
        return Outcome.WIN
    if status in PLAYER1_LOSES:
        return Outcome.LOSS
    return Outcome.DRAW


def expected_score(rating: int, opponent_rating: int, scale: int = 400) -> float:
    """Probability the player wins, given both ratings."""
    return 1.0 / (1.0 + 10.0 ** ((opponent_rating - rating) / scale))


def elo(
    rating1: int, rating2: int, outcome: Outcome, config: EloConfig = EloConfig()
) -> tuple[int, int]:
    """
    New ratings for player1 and player2.

    The points player1 wins are the points player2 loses (rounded once, so the exchange is exact),
    and neither rating drops below the configured floor.
    """
    expected = expected_score(rating1, rating2, config.scale)
    delta = round(config.k * (ACTUAL_SCORES[outcome] - expected))
    return max(config.floor, rating1 + delta), max(config.floor, rating2 - delta)
