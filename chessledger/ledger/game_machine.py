"""
The game state machine.

A ledger game is either ongoing or finished, and the two are different types: only an OngoingGame has operations
that change the game. `resume()` decides which one a stored record is, so "mutated a finished game" cannot happen
without going through a GameOverError first.

Every operation works on a copy of the record and hands back the next state. The record that was passed in is
never touched, which lets the service persist the result (or nothing, when an error is raised).
"""

import logging
from copy import deepcopy
from dataclasses import dataclass
from typing import Optional

from chessledger.chess.game import ChessGame, ChessResult
from chessledger.core.exceptions import (
    DrawOfferError,
    GameError,
    GameNotTimedOutError,
    GameOverError,
    NotYourTurnError,
)
from chessledger.core.models import BlockHeight, GameModel, PlayerName, TurnRecord
from chessledger.core.shared_types import (
    CHECKMATES,
    RESIGNS,
    TIMEOUTS,
    Color,
    GameStatus,
)
from chessledger.ledger.actions import (
    AcceptDraw,
    Action,
    DeclineDraw,
    MakeMove,
    OfferDraw,
    Resign,
    action_to_str,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FinishedGame:
    """Terminal state. Nothing to do here but read the outcome."""

    record: GameModel
    status: GameStatus


@dataclass(frozen=True)
class OngoingGame:
    record: GameModel
    decline_draw_passes_turn: bool = False

    # --- TURN ACTIONS ---
    def apply_turn(
        self, caller: PlayerName, action: Action, now: BlockHeight
    ) -> "OngoingGame | FinishedGame":
        """
        Apply a player's action
        ----

        * MakeMove: the color to move plays a legal move (IllegalMoveError otherwise). Checkmate / stalemate / declared draws end the game.
        * Resign: either player, at any time.
        * OfferDraw: the color to move may offer once; the offer stays pending until answered or until the other color moves.
        * AcceptDraw / DeclineDraw: only the color that did not make the pending offer.

        Every accepted action is appended to the action log together with the block height.
        """
        caller_color = self._player_color(caller)
        record = deepcopy(self.record)
        status: Optional[GameStatus] = None
        logged_action = action_to_str(action)

        if isinstance(action, MakeMove):
            self._assert_your_turn(caller_color)
            chess = self._chess()
            move = chess.make_move(action.notation)
            logged_action = move.to_uci()
            record.fen = chess.to_fen()
            record.history_fen = chess.history
            record.turn_block = now
            # moving instead of answering declines the opponent's offer
            if record.draw_offer == caller_color.opponent():
                record.draw_offer = None
            status = self._status_after_move(chess, caller_color)

        elif isinstance(action, Resign):
            status = RESIGNS[caller_color]

        elif isinstance(action, OfferDraw):
            self._assert_your_turn(caller_color)
            if record.draw_offer is not None:
                raise DrawOfferError("A draw offer is already pending.")
            record.draw_offer = caller_color

        elif isinstance(action, AcceptDraw):
            self._assert_may_answer_offer(caller_color)
            status = GameStatus.DRAW_ACCEPTED

        elif isinstance(action, DeclineDraw):
            self._assert_may_answer_offer(caller_color)
            record.draw_offer = None
            chess = self._chess()
            # a player in check cannot hand over the move: they still have to get out of it
            if (
                self.decline_draw_passes_turn
                and caller_color == self.color_to_move
                and not chess.is_check()
            ):
                chess.pass_turn()
                record.fen = chess.to_fen()
                record.history_fen = chess.history
                record.turn_block = now

        else:
            raise TypeError(f"Unknown action: {action!r}")

        record.moves = [*record.moves, TurnRecord(now, logged_action)]
        logger.debug(
            "game %s: %s played %r at block %s",
            record.game_id,
            caller_color,
            logged_action,
            now,
        )

        if status is not None:
            return self._finish(record, status)
        return OngoingGame(record, self.decline_draw_passes_turn)

    def check_timeout(self, now: BlockHeight) -> FinishedGame:
        """
        The color to move loses once more than block_limit blocks have passed since their turn started.
        At exactly block_limit blocks they are still in time.
        """
        block_limit = self.record.block_limit
        if block_limit is None:
            raise GameNotTimedOutError(
                f"Game {self.record.game_id} has no block limit."
            )

        elapsed = now - self.record.turn_block
        if elapsed <= block_limit:
            raise GameNotTimedOutError(
                f"Game {self.record.game_id} has not timed out: {elapsed} of {block_limit} blocks elapsed."
            )

        record = deepcopy(self.record)
        return self._finish(record, TIMEOUTS[self.color_to_move])

    # --- READ-ONLY CHECKS ---
    def valid_move(self, caller: PlayerName, notation: str) -> bool:
        """Same checks as MakeMove, but never raises and never changes anything."""
        try:
            self._assert_your_turn(self._player_color(caller))
            return self._chess().is_legal(notation)
        except GameError:
            return False

    def turn_to_move(self, caller: PlayerName) -> bool:
        try:
            return self._player_color(caller) == self.color_to_move
        except GameError:
            return False

    @property
    def color_to_move(self) -> Color:
        return Color[self._chess().color_to_move.name]

    # -- PRIVATE HELPERS ---
    def _chess(self) -> ChessGame:
        return ChessGame.from_fen(self.record.fen, self.record.history_fen)

    def _player_color(self, player: PlayerName) -> Color:
        if player == self.record.player1:
            return Color.WHITE
        if player == self.record.player2:
            return Color.BLACK
        raise NotYourTurnError(f"{player!r} does not play in game {self.record.game_id}.")

    def _assert_your_turn(self, color: Color) -> None:
        if color != self.color_to_move:
            raise NotYourTurnError(
                f"It is not your turn. Waiting for {self.color_to_move} to move first."
            )

    def _assert_may_answer_offer(self, color: Color) -> None:
        if self.record.draw_offer is None:
            raise DrawOfferError("There is no draw offer to answer.")
        if self.record.draw_offer == color:
            raise NotYourTurnError("You cannot answer your own draw offer.")

    def _status_after_move(
        self, chess: ChessGame, mover: Color
    ) -> Optional[GameStatus]:
        result = chess.result()
        if result is None:
            return None
        if result == ChessResult.CHECKMATE:
            return CHECKMATES[mover]
        if result == ChessResult.STALEMATE:
            return GameStatus.STALEMATE
        return GameStatus.DRAW_DECLARED

    def _finish(self, record: GameModel, status: GameStatus) -> FinishedGame:
        record.status = status
        record.draw_offer = None
        logger.info("game %s finished: %s", record.game_id, status)
        return FinishedGame(record, status)


def resume(
    record: GameModel, decline_draw_passes_turn: bool = False
) -> OngoingGame | FinishedGame:
    if record.status is not None:
        return FinishedGame(record, record.status)
    return OngoingGame(record, decline_draw_passes_turn)


def require_ongoing(
    record: GameModel, decline_draw_passes_turn: bool = False
) -> OngoingGame:
    game = resume(record, decline_draw_passes_turn)
    if isinstance(game, FinishedGame):
        raise GameOverError(f"Game {record.game_id} is over: {game.status}")
    return game
