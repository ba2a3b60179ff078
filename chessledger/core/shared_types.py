"""
Type definitions used across layers
"""

from enum import StrEnum


# --- Color here does NOT contain an option for empty squares. The chess engine has its own version in chessledger/chess/pieces.py
# --- Convert between the two by name: Color[engine_color.name]
class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class GameStatus(StrEnum):
    """Terminal outcomes. A game without a status is still ongoing."""

    WHITE_CHECKMATES = "white_checkmates"
    BLACK_CHECKMATES = "black_checkmates"
    WHITE_RESIGNS = "white_resigns"
    BLACK_RESIGNS = "black_resigns"
    WHITE_TIMEOUT = "white_timeout"
    BLACK_TIMEOUT = "black_timeout"
    DRAW_ACCEPTED = "draw_accepted"
    DRAW_DECLARED = "draw_declared"
    STALEMATE = "stalemate"


class Outcome(StrEnum):
    """Result of a finished game from player1's (White's) perspective."""

    WIN = "win"
    LOSS = "loss"
    DRAW = "draw"


CHECKMATES: dict[Color, GameStatus] = {
    Color.WHITE: GameStatus.WHITE_CHECKMATES,
    Color.BLACK: GameStatus.BLACK_CHECKMATES,
}
RESIGNS: dict[Color, GameStatus] = {
    Color.WHITE: GameStatus.WHITE_RESIGNS,
    Color.BLACK: GameStatus.BLACK_RESIGNS,
}
TIMEOUTS: dict[Color, GameStatus] = {
    Color.WHITE: GameStatus.WHITE_TIMEOUT,
    Color.BLACK: GameStatus.BLACK_TIMEOUT,
}
