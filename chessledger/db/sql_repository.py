"""Implementation of (Ledger)Repository using SQLAlchemy"""

from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from chessledger.core.models import (
    ChallengeModel,
    GameModel,
    PlayerName,
    RatingModel,
    StateModel,
    TurnRecord,
)
from chessledger.core.shared_types import Color, GameStatus
from chessledger.db.schema import (
    DBChallenge,
    DBCounter,
    DBGame,
    DBRating,
    DBState,
)

STATE_ROW_ID = 1
SCAN_BATCH_SIZE = 50


class SQLLedgerRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy.

    NOTE: the methods only flush. Committing is left to `atomic()`, so a service operation is all-or-nothing.
    """

    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    @contextmanager
    def atomic(self) -> Iterator[None]:
        try:
            yield
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def next_id(self, sequence: str) -> int:
        counter = self.db.get(DBCounter, sequence)
        if counter is None:
            counter = DBCounter(name=sequence, value=0)
            self.db.add(counter)
        counter.value += 1
        self.db.flush()
        return counter.value

    # --- CHALLENGES ---
    def get_challenge(self, challenge_id: int) -> ChallengeModel | None:
        challenge_db = self.db.get(DBChallenge, challenge_id)
        if challenge_db:
            return self._challenge_to_model(challenge_db)
        return None

    def save_challenge(self, challenge: ChallengeModel) -> None:
        self.db.merge(
            DBChallenge(
                id=challenge.challenge_id,
                created_by=challenge.created_by,
                opponent=challenge.opponent,
                play_as=challenge.play_as,
                block_limit=challenge.block_limit,
                block_created=challenge.block_created,
            )
        )
        self.db.flush()

    def delete_challenge(self, challenge_id: int) -> None:
        challenge_db = self.db.get(DBChallenge, challenge_id)
        if challenge_db:
            self.db.delete(challenge_db)
            self.db.flush()

    def challenges_created_by(
        self, player: PlayerName, after: Optional[int]
    ) -> Iterator[ChallengeModel]:
        query = select(DBChallenge).where(DBChallenge.created_by == player)
        return self._scan_challenges(query, after)

    def challenges_directed_at(
        self, player: PlayerName, after: Optional[int]
    ) -> Iterator[ChallengeModel]:
        query = select(DBChallenge).where(DBChallenge.opponent == player)
        return self._scan_challenges(query, after)

    def open_challenges(self, after: Optional[int]) -> Iterator[ChallengeModel]:
        query = select(DBChallenge).where(DBChallenge.opponent.is_(None))
        return self._scan_challenges(query, after)

    # --- GAMES ---
    def get_game(self, game_id: int) -> GameModel | None:
        game_db = self.db.get(DBGame, game_id)
        if game_db:
            return self._game_to_model(game_db)
        return None

    def save_game(self, game: GameModel) -> None:
        game_db = self.db.get(DBGame, game.game_id)
        if game_db is None:
            game_db = DBGame(id=game.game_id)
            self.db.add(game_db)
        game_db.player1 = game.player1
        game_db.player2 = game.player2
        game_db.block_limit = game.block_limit
        game_db.block_start = game.block_start
        game_db.turn_block = game.turn_block
        game_db.fen = game.fen
        game_db.moves = [[record.block_height, record.action] for record in game.moves]
        game_db.history_fen = list(game.history_fen)
        game_db.draw_offer = game.draw_offer
        game_db.status = game.status
        self.db.flush()

    def games(self, after: Optional[int], ongoing_only: bool) -> Iterator[GameModel]:
        return self._scan_games(select(DBGame), after, ongoing_only)

    def games_as_player1(
        self, player: PlayerName, after: Optional[int], ongoing_only: bool
    ) -> Iterator[GameModel]:
        query = select(DBGame).where(DBGame.player1 == player)
        return self._scan_games(query, after, ongoing_only)

    def games_as_player2(
        self, player: PlayerName, after: Optional[int], ongoing_only: bool
    ) -> Iterator[GameModel]:
        query = select(DBGame).where(DBGame.player2 == player)
        return self._scan_games(query, after, ongoing_only)

    # --- RATINGS ---
    def get_rating(self, player: PlayerName) -> int | None:
        rating_db = self.db.get(DBRating, player)
        return rating_db.rating if rating_db else None

    def save_rating(self, player: PlayerName, rating: int) -> None:
        self.db.merge(DBRating(player=player, rating=rating))
        self.db.flush()

    def all_ratings(self) -> list[RatingModel]:
        query = select(DBRating).order_by(DBRating.player)
        return [
            RatingModel(player=row.player, rating=row.rating)
            for row in self.db.scalars(query)
        ]

    # --- STATE ---
    def get_state(self) -> StateModel | None:
        state_db = self.db.get(DBState, STATE_ROW_ID)
        return StateModel(owner=state_db.owner) if state_db else None

    def save_state(self, state: StateModel) -> None:
        self.db.merge(DBState(id=STATE_ROW_ID, owner=state.owner))
        self.db.flush()

    # --- SCANS ---
    def _scan_challenges(
        self, query: Select[tuple[DBChallenge]], after: Optional[int]
    ) -> Iterator[ChallengeModel]:
        if after is not None:
            query = query.where(DBChallenge.id > after)
        query = query.order_by(DBChallenge.id)
        for challenge_db in self._scan(query):
            yield self._challenge_to_model(challenge_db)

    def _scan_games(
        self, query: Select[tuple[DBGame]], after: Optional[int], ongoing_only: bool
    ) -> Iterator[GameModel]:
        if after is not None:
            query = query.where(DBGame.id > after)
        if ongoing_only:
            query = query.where(DBGame.status.is_(None))
        query = query.order_by(DBGame.id)
        for game_db in self._scan(query):
            yield self._game_to_model(game_db)

    def _scan(self, query: Select) -> Iterator:
        """Stream rows in batches, so a scan that is abandoned after one page never loads the whole index."""
        result = self.db.scalars(query.execution_options(yield_per=SCAN_BATCH_SIZE))
        try:
            yield from result
        finally:
            result.close()

    # --- CONVERSIONS ---
    def _challenge_to_model(self, challenge_db: DBChallenge) -> ChallengeModel:
        """Convert SQLAlchemy model to data transfer model."""
        return ChallengeModel(
            challenge_id=challenge_db.id,
            created_by=challenge_db.created_by,
            opponent=challenge_db.opponent,
            play_as=Color(challenge_db.play_as) if challenge_db.play_as else None,
            block_limit=challenge_db.block_limit,
            block_created=challenge_db.block_created,
        )

    def _game_to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            game_id=game_db.id,
            player1=game_db.player1,
            player2=game_db.player2,
            block_limit=game_db.block_limit,
            block_start=game_db.block_start,
            turn_block=game_db.turn_block,
            fen=game_db.fen,
            moves=[TurnRecord(block, action) for block, action in game_db.moves],
            history_fen=list(game_db.history_fen),
            draw_offer=Color(game_db.draw_offer) if game_db.draw_offer else None,
            status=GameStatus(game_db.status) if game_db.status else None,
        )
