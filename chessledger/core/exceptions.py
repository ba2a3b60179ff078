"""
Custom exceptions used across layers.

Every error the ledger raises derives from GameError, so callers (the API layer, tests) can catch
the family without knowing which layer detected the problem.
"""


class GameError(Exception):
    """Top-level error of the chess ledger."""


# --- NOT FOUND ---
class RepositoryError(GameError):
    """A record that should exist was not found in the persistence layer."""


class ChallengeNotFoundError(RepositoryError):
    pass


class GameNotFoundError(RepositoryError):
    pass


# --- AUTHORIZATION ---
class NotYourChallengeError(GameError):
    """Directed at somebody else, or only the creator may cancel."""


class NotYourTurnError(GameError):
    pass


# --- SELF PLAY ---
class CannotPlaySelfError(GameError):
    pass


# --- PRECONDITIONS ---
class GameStateError(GameError):
    """The game (or ledger) is not in a state that allows the requested operation."""


class GameOverError(GameStateError):
    pass


class GameNotTimedOutError(GameStateError):
    pass


class DrawOfferError(GameStateError):
    """Offering twice, or responding to an offer that was never made."""


class AlreadyInitializedError(GameStateError):
    pass


# --- LEGALITY ---
class IllegalMoveError(GameError):
    pass


class InvalidFENError(GameError):
    pass


# --- REQUESTS ---
class InvalidRequestError(GameError):
    pass
