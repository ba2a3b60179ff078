"""Unit tests for chessledger/chess/square.py"""

from string import ascii_lowercase

import pytest

from chessledger.chess.square import BOARD_DIMENSIONS, Square, is_algebraic


@pytest.mark.parametrize(
    "file, rank, notation",
    [
        (file, rank, f"{ascii_lowercase[file - 1]}{rank}")
        for file in range(1, 9)
        for rank in range(1, 9)
    ],
)
def test_algebraic_notation_both_ways(file: int, rank: int, notation: str) -> None:
    """'a1' maps to file 1, rank 1, and the square on file 1, rank 1 is written as 'a1'"""
    square = Square.from_algebraic(notation)
    assert square == Square(file, rank)
    assert square.to_algebraic() == notation


@pytest.mark.parametrize("notation", ["i1", "a9", "a0", "A1", "e", "e22", "", "11"])
def test_not_a_square(notation: str) -> None:
    assert not is_algebraic(notation)
    with pytest.raises(ValueError):
        Square.from_algebraic(notation)


def test_offset() -> None:
    assert Square.from_algebraic("e4").offset(1, -2) == Square.from_algebraic("f2")
    assert not Square.from_algebraic("h8").offset(1, 0).is_within_bounds()


def test_square_within_bounds() -> None:
    """happy case: every square on the board"""
    for file in range(1, BOARD_DIMENSIONS[0] + 1):
        for rank in range(1, BOARD_DIMENSIONS[1] + 1):
            assert Square(file, rank).is_within_bounds()


def test_square_out_of_bounds() -> None:
    assert not Square(BOARD_DIMENSIONS[0] + 1, BOARD_DIMENSIONS[1] + 1).is_within_bounds()
    assert not Square(-1, -1).is_within_bounds()
    assert not Square(0, 4).is_within_bounds()
