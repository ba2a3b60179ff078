"""Unit tests for chessledger/ledger/pagination.py"""

from typing import Iterator

import pytest

from chessledger.ledger.pagination import merge_ascending, next_cursor, paginate


def identity(value: int) -> int:
    return value


def test_merge_keeps_duplicates() -> None:
    assert list(merge_ascending([1, 3, 5], [2, 3, 6], identity)) == [1, 2, 3, 3, 5, 6]


@pytest.mark.parametrize(
    "left, right, expected",
    [
        ([], [], []),
        ([1, 2], [], [1, 2]),
        ([], [4, 7], [4, 7]),
        ([1, 2], [8, 9], [1, 2, 8, 9]),
        ([8, 9], [1, 2], [1, 2, 8, 9]),
    ],
)
def test_merge_edge_cases(left: list[int], right: list[int], expected: list[int]) -> None:
    assert list(merge_ascending(left, right, identity)) == expected


def test_merge_ties_take_left_first() -> None:
    left = [(1, "left"), (2, "left")]
    right = [(1, "right")]
    merged = list(merge_ascending(left, right, key=lambda item: item[0]))
    assert merged == [(1, "left"), (1, "right"), (2, "left")]


def test_merge_is_lazy() -> None:
    """A page only pulls as many rows from each scan as it needs."""
    pulled: list[int] = []

    def scan(values: list[int]) -> Iterator[int]:
        for value in values:
            pulled.append(value)
            yield value

    merged = merge_ascending(scan([1, 3, 5, 7, 9]), scan([2, 4, 6, 8, 10]), identity)
    assert paginate(merged, 3) == [1, 2, 3]
    assert len(pulled) < 10


def test_second_page() -> None:
    """Each scan is bounded by the cursor of the previous page."""
    left, right = [1, 3, 5], [2, 3, 6]
    first = paginate(merge_ascending(left, right, identity), 2)
    assert first == [1, 2]
    cursor = next_cursor(first, identity)
    assert cursor == 2

    second = paginate(
        merge_ascending(
            (v for v in left if v > cursor), (v for v in right if v > cursor), identity
        ),
        2,
    )
    assert second == [3, 3]
    assert next_cursor(second, identity) == 3


def test_next_cursor_of_empty_page() -> None:
    assert next_cursor([], identity) is None
