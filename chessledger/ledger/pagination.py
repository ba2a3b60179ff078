"""
Merge-pagination over two secondary-index scans.

"Games involving player X" is "player1 == X" OR "player2 == X". Rather than keeping a union index (dual writes),
both indexes are scanned independently, each bounded by the same cursor, and the two ascending streams are merged lazily.
Neither index is ever fully materialized: only as many rows as the page needs are pulled from the scans.
"""

from itertools import islice
from typing import Callable, Iterable, Iterator, Optional, TypeVar

T = TypeVar("T")
Key = Callable[[T], int]


def merge_ascending(left: Iterable[T], right: Iterable[T], key: Key) -> Iterator[T]:
    """
    Two-way merge of ascending sequences.
    ---

    Repeatedly yield the head with the lesser key. On equal keys the left head goes first.
    Entries found in both inputs are yielded twice: de-duplication is not the merge's job.
    """
    left_it, right_it = iter(left), iter(right)
    left_head = next(left_it, None)
    right_head = next(right_it, None)

    while left_head is not None and right_head is not None:
        if key(left_head) <= key(right_head):
            yield left_head
            left_head = next(left_it, None)
        else:
            yield right_head
            right_head = next(right_it, None)

    # one of them ran out: drain the other
    if left_head is not None:
        yield left_head
        yield from left_it
    if right_head is not None:
        yield right_head
        yield from right_it


def paginate(items: Iterable[T], page_size: int) -> list[T]:
    return list(islice(items, page_size))


def next_cursor(page: list[T], key: Key) -> Optional[int]:
    """The last key of the page is the exclusive lower bound of the next one."""
    if not page:
        return None
    return key(page[-1])
