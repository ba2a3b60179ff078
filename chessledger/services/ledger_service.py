"""Orchestration of communication from API router to business logic and persistence layers (and the reverse direction)."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from chessledger.core.config import LedgerConfig
from chessledger.core.exceptions import (
    AlreadyInitializedError,
    ChallengeNotFoundError,
    GameError,
    GameNotFoundError,
    RepositoryError,
)
from chessledger.core.models import (
    BlockHeight,
    ChallengeModel,
    GameModel,
    GameSummary,
    PlayerName,
    RatingModel,
    StateModel,
)
from chessledger.core.shared_types import Color
from chessledger.db.repository import (
    CHALLENGE_SEQUENCE,
    GAME_SEQUENCE,
    LedgerRepository,
)
from chessledger.ledger import challenges
from chessledger.ledger.actions import Action
from chessledger.ledger.game_machine import (
    FinishedGame,
    OngoingGame,
    require_ongoing,
)
from chessledger.ledger.pagination import merge_ascending, paginate
from chessledger.ledger.rating import EloConfig, elo, outcome_for

logger = logging.getLogger(__name__)


class LedgerService:
    """Orchestration of layers for the chess ledger.

    Every mutating operation is one unit of work: it loads, validates, mutates and persists inside
    `repository.atomic()`, so a failure anywhere leaves the stored records untouched.
    """

    def __init__(self, repository: LedgerRepository, config: LedgerConfig) -> None:
        self.repo = repository
        self.config = config
        self.elo_config = EloConfig(
            k=config.elo_k, scale=config.elo_scale, floor=config.rating_floor
        )

    # -- SETUP ---
    def initialize(self, owner: PlayerName) -> StateModel:
        """Write the configuration record. Only done once."""
        with self._unit_of_work("initialize"):
            if self.repo.get_state() is not None:
                raise AlreadyInitializedError("The ledger has already been initialized.")
            state = StateModel(owner=owner)
            self.repo.save_state(state)
        logger.info("ledger initialized, owner=%s", owner)
        return state

    def get_state(self) -> StateModel:
        state = self.repo.get_state()
        if state is None:
            raise RepositoryError("The ledger has not been initialized.")
        return state

    # -- CHALLENGE LIFECYCLE ---
    def create_challenge(
        self,
        creator: PlayerName,
        now: BlockHeight,
        opponent: Optional[PlayerName] = None,
        play_as: Optional[Color] = None,
        block_limit: Optional[int] = None,
    ) -> ChallengeModel:
        with self._unit_of_work("create_challenge"):
            challenge = challenges.new_challenge(
                challenge_id=self.repo.next_id(CHALLENGE_SEQUENCE),
                creator=creator,
                opponent=opponent,
                play_as=play_as,
                block_limit=block_limit,
                now=now,
            )
            self.repo.save_challenge(challenge)
            self._ensure_rating(creator)
            if opponent is not None:
                self._ensure_rating(opponent)

        logger.info(
            "challenge %s created by %s (opponent=%s)",
            challenge.challenge_id,
            creator,
            opponent or "open",
        )
        return challenge

    def accept_challenge(
        self, acceptor: PlayerName, challenge_id: int, now: BlockHeight
    ) -> GameModel:
        """Resolve the challenge into a game. The challenge is removed in the same unit of work, so it resolves at most once."""
        with self._unit_of_work("accept_challenge"):
            challenge = self._fetch_challenge(challenge_id)
            challenges.check_can_accept(challenge, acceptor)
            self._ensure_rating(acceptor)

            game = challenges.start_game(
                self.repo.next_id(GAME_SEQUENCE), challenge, acceptor, now
            )
            self.repo.save_game(game)
            self.repo.delete_challenge(challenge_id)

        logger.info(
            "challenge %s accepted by %s: game %s (white=%s, black=%s)",
            challenge_id,
            acceptor,
            game.game_id,
            game.player1,
            game.player2,
        )
        return game

    def cancel_challenge(self, caller: PlayerName, challenge_id: int) -> None:
        with self._unit_of_work("cancel_challenge"):
            challenge = self._fetch_challenge(challenge_id)
            challenges.check_can_cancel(challenge, caller)
            self.repo.delete_challenge(challenge_id)
        logger.info("challenge %s cancelled by %s", challenge_id, caller)

    # -- GAME STATE MACHINE ---
    def turn(
        self, caller: PlayerName, game_id: int, action: Action, now: BlockHeight
    ) -> GameModel:
        """Apply a turn action. If it ends the game, both ratings are updated in the same unit of work."""
        with self._unit_of_work("turn"):
            game = self._ongoing_game(game_id)
            next_state = game.apply_turn(caller, action, now)
            self.repo.save_game(next_state.record)
            if isinstance(next_state, FinishedGame):
                self._update_ratings(next_state)
        return next_state.record

    def declare_timeout(self, game_id: int, now: BlockHeight) -> GameModel:
        """Anyone may call this. Raises GameNotTimedOutError while the player to move is still in time."""
        with self._unit_of_work("declare_timeout"):
            game = self._ongoing_game(game_id)
            finished = game.check_timeout(now)
            self.repo.save_game(finished.record)
            self._update_ratings(finished)
        return finished.record

    # -- QUERIES ---
    def get_challenge(self, challenge_id: int) -> ChallengeModel:
        return self._fetch_challenge(challenge_id)

    def get_challenges(
        self, after: Optional[int] = None, player: Optional[PlayerName] = None
    ) -> list[ChallengeModel]:
        """
        With a player: challenges they created or that are directed at them (merged over both indexes).
        Without: the open challenges anybody can accept.
        """
        if player is None:
            found = self.repo.open_challenges(after)
        else:
            found = merge_ascending(
                self.repo.challenges_created_by(player, after),
                self.repo.challenges_directed_at(player, after),
                key=lambda c: c.challenge_id,
            )
        return paginate(found, self.config.page_size)

    def get_game(self, game_id: int) -> GameModel:
        return self._fetch_game(game_id)

    def get_games(
        self,
        after: Optional[int] = None,
        game_over: bool = False,
        player: Optional[PlayerName] = None,
    ) -> list[GameSummary]:
        """Ongoing games only, unless game_over is set (then finished games are listed as well)."""
        ongoing_only = not game_over
        if player is None:
            found = self.repo.games(after, ongoing_only)
        else:
            found = merge_ascending(
                self.repo.games_as_player1(player, after, ongoing_only),
                self.repo.games_as_player2(player, after, ongoing_only),
                key=lambda g: g.game_id,
            )
        return [
            GameSummary.from_game(game)
            for game in paginate(found, self.config.page_size)
        ]

    def get_ratings(self) -> list[RatingModel]:
        return self.repo.all_ratings()

    def valid_move(self, game_id: int, player: PlayerName, move: str) -> bool:
        """Advisory: False on any error (unknown game, finished game, not your turn, illegal move...)."""
        try:
            game = self._ongoing_game(game_id)
        except GameError:
            return False
        return game.valid_move(player, move)

    def get_turn(self, game_id: int, player: PlayerName) -> bool:
        try:
            game = self._ongoing_game(game_id)
        except GameError:
            return False
        return game.turn_to_move(player)

    # -- Internal helpers --
    @contextmanager
    def _unit_of_work(self, operation: str) -> Iterator[None]:
        try:
            with self.repo.atomic():
                yield
        except GameError as exc:
            logger.warning("%s rejected: %s: %s", operation, type(exc).__name__, exc)
            raise

    def _fetch_challenge(self, challenge_id: int) -> ChallengeModel:
        challenge = self.repo.get_challenge(challenge_id)
        if challenge is None:
            raise ChallengeNotFoundError(f"Challenge with {challenge_id=} not found.")
        return challenge

    def _fetch_game(self, game_id: int) -> GameModel:
        game = self.repo.get_game(game_id)
        if game is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game

    def _ongoing_game(self, game_id: int) -> OngoingGame:
        return require_ongoing(
            self._fetch_game(game_id), self.config.decline_draw_passes_turn
        )

    def _ensure_rating(self, player: PlayerName) -> None:
        if self.repo.get_rating(player) is None:
            self.repo.save_rating(player, self.config.default_rating)

    def _rating(self, player: PlayerName) -> int:
        rating = self.repo.get_rating(player)
        return self.config.default_rating if rating is None else rating

    def _update_ratings(self, finished: FinishedGame) -> None:
        """Called exactly once per game: on the transition that finished it."""
        game = finished.record
        rating1, rating2 = self._rating(game.player1), self._rating(game.player2)
        new1, new2 = elo(rating1, rating2, outcome_for(finished.status), self.elo_config)
        self.repo.save_rating(game.player1, new1)
        self.repo.save_rating(game.player2, new2)
        logger.info(
            "ratings after game %s (%s): %s %s -> %s, %s %s -> %s",
            game.game_id,
            finished.status,
            game.player1,
            rating1,
            new1,
            game.player2,
            rating2,
            new2,
        )
