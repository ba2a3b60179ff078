"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from string import ascii_lowercase

BOARD_DIMENSIONS = (8, 8)
FILE_NAMES = ascii_lowercase[: BOARD_DIMENSIONS[0]]


def is_algebraic(sq: str) -> bool:
    """'a1' - 'h8' only. Anything else cannot name a square on the board."""
    if len(sq) != 2:
        return False
    file_char, rank_char = sq[0], sq[1]
    return (
        file_char in FILE_NAMES
        and rank_char.isdigit()
        and 1 <= int(rank_char) <= BOARD_DIMENSIONS[1]
    )


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a1' - 'h8' get converted to (1,1) - (8,8)"""
        if not is_algebraic(sq):
            raise ValueError(f"Not a square on the board: {sq!r}")
        file = ord(sq[0]) - ord("a") + 1
        rank = int(sq[1])
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def offset(self, df: int, dr: int) -> Square:
        """The square df files and dr ranks away (might be off the board)."""
        return Square(self.file + df, self.rank + dr)

    def is_within_bounds(self) -> bool:
        return (1 <= self.file <= BOARD_DIMENSIONS[0]) and (
            1 <= self.rank <= BOARD_DIMENSIONS[1]
        )
