"""
The ChessGame class is the move-legality oracle the ledger consults.

It knows nothing about players, clocks or challenges: given a position (FEN) and the FENs
that came before it, it validates and applies single moves and reports when the game is over.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional, Self

from chessledger.chess.board import Board
from chessledger.chess.castling import CASTLING_RULES, CastlingDirection
from chessledger.chess.fen import STARTING_FEN, FENState
from chessledger.chess.moves import (
    Move,
    candidate_castling_move,
    castling_rook_squares,
    en_passant_capture_square,
    en_passant_moves,
    is_pawn_push_to_promotion_square,
    pawn_pushes_w_promotion,
)
from chessledger.chess.pieces import Color, Piece, PieceType
from chessledger.chess.square import Square
from chessledger.core.exceptions import IllegalMoveError

FIFTY_MOVE_RULE_HALF_MOVES = 100
REPETITIONS_FOR_DRAW = 3


class ChessResult(Enum):
    CHECKMATE = auto()
    STALEMATE = auto()
    THREEFOLD_REPETITION = auto()
    FIFTY_MOVE_RULE = auto()


@dataclass(frozen=True)
class AcceptedMove:
    """Snapshot of the moving pieces before the board gets updated."""

    move: Move
    moving_piece: Piece
    captured_piece: Piece

    @classmethod
    def from_move_and_board(cls, move: Move, board: Board) -> Self:
        if move.is_en_passant:
            captured = board.piece(en_passant_capture_square(move))
        else:
            captured = board.piece(move.to_square)
        return cls(move, board.piece(move.from_square), captured)


@dataclass
class ChessGame:
    board: Board
    state: FENState
    history: list[str] = field(default_factory=list)  # FENs before every move

    @classmethod
    def from_fen(cls, fen: str = STARTING_FEN, history: Optional[list[str]] = None) -> Self:
        state = FENState.from_fen(fen)
        board = Board.from_fen(state.position)
        return cls(board, state, list(history or []))

    def to_fen(self) -> str:
        return self.state.to_fen()

    @property
    def color_to_move(self) -> Color:
        return self.state.color_to_move

    # --- PUBLIC API ---
    def legal_moves(self) -> list[Move]:
        """
        List of legal moves for the color to move
        ----

        1. generate candidate moves, using the basic movement rules for all pieces (the board does this calculation)
        2. add candidate castling moves
        3. add candidate en passant moves
        4. remove illegal options --> a move that would put you in check or you are in check and the move does not get you out of it.
        5. Pawn push to promotion square? --> expand the set of moves to include one for every choice of piece type to promote into.
        """
        color = self.color_to_move
        candidate_moves = self.board.generate_candidate_moves(color)
        candidate_moves.extend(self._generate_castling_moves())

        if self.state.en_passant_square is not None:
            candidate_moves.extend(
                en_passant_moves(self.state.en_passant_square, color, self.board)
            )

        legal_moves: list[Move] = []
        for move in candidate_moves:
            if self._is_putting_yourself_in_check(move):
                continue
            if is_pawn_push_to_promotion_square(move, self.board):
                legal_moves.extend(pawn_pushes_w_promotion(move))
            else:
                legal_moves.append(move)
        return legal_moves

    def find_legal_move(self, move_uci: str) -> Move:
        """Match the notation against the legal moves (which carry the castling / en passant flags)."""
        requested = Move.from_uci(move_uci)
        for move in self.legal_moves():
            if move.same_squares(requested):
                return move
        raise IllegalMoveError(f"Move not allowed: {move_uci}")

    def is_legal(self, move_uci: str) -> bool:
        try:
            self.find_legal_move(move_uci)
        except IllegalMoveError:
            return False
        return True

    def make_move(self, move_uci: str) -> Move:
        """
        Attempt to make a move
        -----

        1. check the move is legal (raises IllegalMoveError otherwise)
        2. update the FEN history (with the FEN before the move)
        3. update the board (castling moves king and rook, en passant removes the taken pawn, promotions swap the pawn)
        4. update the FEN state
        """
        move = self.find_legal_move(move_uci)
        accepted_move = AcceptedMove.from_move_and_board(move, self.board)

        self.history.append(self.state.to_fen())
        self._apply_to_board(self.board, move)
        self._update_fen_state(accepted_move)
        return move

    def pass_turn(self) -> None:
        """Null move: the other color is to move, nothing changes on the board."""
        self.history.append(self.state.to_fen())
        self.state.pass_turn()

    def is_check(self) -> bool:
        return self.board.is_check(self.color_to_move)

    def result(self) -> Optional[ChessResult]:
        """Game-over detection for the color that is to move now."""
        if not self._has_legal_move():
            return ChessResult.CHECKMATE if self.is_check() else ChessResult.STALEMATE
        if self._is_three_fold_repetition():
            return ChessResult.THREEFOLD_REPETITION
        if self.state.half_move_clock >= FIFTY_MOVE_RULE_HALF_MOVES:
            return ChessResult.FIFTY_MOVE_RULE
        return None

    # -- PRIVATE HELPERS ---
    def _has_legal_move(self) -> bool:
        return len(self.legal_moves()) > 0

    def _is_three_fold_repetition(self) -> bool:
        """The current position occurred twice before (move counters do not count)."""
        current = self.state.position_key()
        earlier = sum(
            1 for fen in self.history if fen.rsplit(" ", 2)[0] == current
        )
        return earlier + 1 >= REPETITIONS_FOR_DRAW

    def _is_putting_yourself_in_check(self, move: Move) -> bool:
        """Play the move on a copy of the board, then see if your king is under attack."""
        board = self.board.copy()
        self._apply_to_board(board, move)
        return board.is_check(self.color_to_move)

    def _apply_to_board(self, board: Board, move: Move) -> None:
        if move.castling_direction:
            rule = CASTLING_RULES[move.castling_direction]
            board.move_piece(Move(rule.king_from, rule.king_to))
            board.move_piece(Move(rule.rook_from, rule.rook_to))
            return

        if move.is_en_passant:
            board.remove_piece(en_passant_capture_square(move))
        board.move_piece(move)
        if move.promote_to is not None:
            board.promote_piece(move.to_square, to=move.promote_to)

    def _update_fen_state(self, accepted_move: AcceptedMove) -> None:
        """Create/update the FEN state to reflect state after move (the board has been updated already)."""
        player_color = self.color_to_move
        self.state.position = self.board.to_fen()

        self._revoke_castling_rights_if_needed(accepted_move)

        ep_square = self._determine_en_passant_square(accepted_move)
        self.state.en_passant_square = ep_square

        if self._is_pawn_move(accepted_move) or self._is_capture(accepted_move):
            self.state.reset_half_move_counter()
        else:
            self.state.increment_half_move_counter()

        if player_color == Color.BLACK:
            self.state.increment_full_move_counter()

        # NOTE update color to move AFTER the checks that depend on who made the last move.
        self.state.color_to_move = player_color.opponent()

    # -- CASTLING RULE HELPERS ---
    def _generate_castling_moves(self) -> list[Move]:
        return [
            candidate_castling_move(direction)
            for direction in self._legal_castling_directions()
        ]

    def _legal_castling_directions(self) -> list[CastlingDirection]:
        """
        **you are allowed to castle if**

        * You are not currently in check (you cannot castle out of check).
        * Castling rights are not yet revoked.
        * All squares between king and rook are empty.
        * None of the squares the king crosses is under attack.
        """
        player_color = self.color_to_move
        if not self.state.can_castle(player_color):
            return []
        if self.board.is_check(player_color):
            return []

        opponent_color = player_color.opponent()
        legal_directions: list[CastlingDirection] = []
        for direction in self.state.castling_options(player_color):
            if not self.state.castling_rights[direction]:
                continue

            rule = CASTLING_RULES[direction]
            if self.board.piece(rule.king_from) != Piece(PieceType.KING, player_color):
                continue
            if self.board.piece(rule.rook_from) != Piece(PieceType.ROOK, player_color):
                continue
            if self.board.is_any_occupied(rule.squares_between()):
                continue
            if self.board.is_any_under_attack(rule.king_path(), opponent_color):
                continue

            legal_directions.append(direction)
        return legal_directions

    def _revoke_castling_rights_if_needed(self, move: AcceptedMove) -> None:
        """
        1. If you move your king (castling included) --> revoke both
        2. If you move your rook from its starting square --> revoke that direction
        3. If you take your opponent's rook on its starting square --> revoke that direction for your opponent
        """
        player_color = move.moving_piece.color

        if move.moving_piece.type == PieceType.KING:
            self.state.revoke_all_castling_rights(player_color)

        if move.moving_piece.type == PieceType.ROOK:
            for direction in self.state.castling_options(player_color):
                rook_starting_square, _ = castling_rook_squares(direction)
                if move.move.from_square == rook_starting_square:
                    self.state.revoke_castling_rights(direction)

        if move.captured_piece == Piece(PieceType.ROOK, player_color.opponent()):
            for direction in self.state.castling_options(player_color.opponent()):
                rook_starting_square, _ = castling_rook_squares(direction)
                if move.move.to_square == rook_starting_square:
                    self.state.revoke_castling_rights(direction)

    # --- EN PASSANT RULE HELPERS ----
    def _determine_en_passant_square(self, move: AcceptedMove) -> Optional[Square]:
        """A double pawn push leaves the skipped square open for en passant on the next turn."""
        ranks_moved = abs(move.move.from_square.rank - move.move.to_square.rank)
        if self._is_pawn_move(move) and ranks_moved == 2:
            return Square(
                file=move.move.from_square.file,
                rank=(move.move.from_square.rank + move.move.to_square.rank) // 2,
            )
        return None

    # --- HALF MOVE CLOCK HELPERS ---
    def _is_pawn_move(self, move: AcceptedMove) -> bool:
        return move.moving_piece.type == PieceType.PAWN

    def _is_capture(self, move: AcceptedMove) -> bool:
        return not move.captured_piece.is_empty()
