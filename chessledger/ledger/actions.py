"""The actions a player can submit on their turn, and how they are written into the game's action log."""

from dataclasses import dataclass
from typing import Union

RESIGN = "resign"
OFFER_DRAW = "offer_draw"
ACCEPT_DRAW = "accept_draw"
DECLINE_DRAW = "decline_draw"


@dataclass(frozen=True)
class MakeMove:
    notation: str  # UCI, e.g. "e2e4" or "e7e8q"


@dataclass(frozen=True)
class Resign:
    pass


@dataclass(frozen=True)
class OfferDraw:
    pass


@dataclass(frozen=True)
class AcceptDraw:
    pass


@dataclass(frozen=True)
class DeclineDraw:
    pass


Action = Union[MakeMove, Resign, OfferDraw, AcceptDraw, DeclineDraw]

KEYWORD_ACTIONS: dict[str, Action] = {
    RESIGN: Resign(),
    OFFER_DRAW: OfferDraw(),
    ACCEPT_DRAW: AcceptDraw(),
    DECLINE_DRAW: DeclineDraw(),
}
ACTION_KEYWORDS: dict[type, str] = {type(a): kw for kw, a in KEYWORD_ACTIONS.items()}


def action_to_str(action: Action) -> str:
    if isinstance(action, MakeMove):
        return action.notation
    return ACTION_KEYWORDS[type(action)]


def action_from_str(logged: str) -> Action:
    """Anything that is not a keyword was a move."""
    return KEYWORD_ACTIONS.get(logged, MakeMove(logged))
