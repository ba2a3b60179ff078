"""
Protocol repository: the storage contract the ledger consumes.

The implementation has to offer
* keyed get/save/delete for challenges, games, ratings and the state record
* ordered range scans (ascending id, exclusive lower bound) over the secondary indexes
* an atomic unit of work: everything inside `atomic()` is committed together, or not at all.
"""

from contextlib import AbstractContextManager
from typing import Iterator, Optional, Protocol

from chessledger.core.models import (
    ChallengeModel,
    GameModel,
    PlayerName,
    RatingModel,
    StateModel,
)

CHALLENGE_SEQUENCE = "challenge"
GAME_SEQUENCE = "game"


class LedgerRepository(Protocol):
    """Persistence layer orchestration"""

    def atomic(self) -> AbstractContextManager[None]:
        """Unit of work: commit on success, roll back if an exception escapes."""
        ...

    def next_id(self, sequence: str) -> int:
        """Next value of a monotonic sequence (starting at 1)."""
        ...

    # --- CHALLENGES ---
    def get_challenge(self, challenge_id: int) -> ChallengeModel | None: ...

    def save_challenge(self, challenge: ChallengeModel) -> None: ...

    def delete_challenge(self, challenge_id: int) -> None: ...

    def challenges_created_by(
        self, player: PlayerName, after: Optional[int]
    ) -> Iterator[ChallengeModel]: ...

    def challenges_directed_at(
        self, player: PlayerName, after: Optional[int]
    ) -> Iterator[ChallengeModel]: ...

    def open_challenges(self, after: Optional[int]) -> Iterator[ChallengeModel]: ...

    # --- GAMES ---
    def get_game(self, game_id: int) -> GameModel | None: ...

    def save_game(self, game: GameModel) -> None:
        """Insert or overwrite."""
        ...

    def games(self, after: Optional[int], ongoing_only: bool) -> Iterator[GameModel]: ...

    def games_as_player1(
        self, player: PlayerName, after: Optional[int], ongoing_only: bool
    ) -> Iterator[GameModel]: ...

    def games_as_player2(
        self, player: PlayerName, after: Optional[int], ongoing_only: bool
    ) -> Iterator[GameModel]: ...

    # --- RATINGS ---
    def get_rating(self, player: PlayerName) -> int | None: ...

    def save_rating(self, player: PlayerName, rating: int) -> None: ...

    def all_ratings(self) -> list[RatingModel]:
        """Ascending by player."""
        ...

    # --- STATE ---
    def get_state(self) -> StateModel | None: ...

    def save_state(self, state: StateModel) -> None: ...
