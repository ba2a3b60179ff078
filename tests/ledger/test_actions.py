"""Unit tests for chessledger/ledger/actions.py"""

import pytest

from chessledger.ledger.actions import (
    AcceptDraw,
    Action,
    DeclineDraw,
    MakeMove,
    OfferDraw,
    Resign,
    action_from_str,
    action_to_str,
)


@pytest.mark.parametrize(
    "action, logged",
    [
        (MakeMove("e2e4"), "e2e4"),
        (MakeMove("a7a8q"), "a7a8q"),
        (Resign(), "resign"),
        (OfferDraw(), "offer_draw"),
        (AcceptDraw(), "accept_draw"),
        (DeclineDraw(), "decline_draw"),
    ],
)
def test_action_log_entries(action: Action, logged: str) -> None:
    assert action_to_str(action) == logged
    assert action_from_str(logged) == action
