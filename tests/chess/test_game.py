"""Unit tests for chessledger/chess/game.py"""

import pytest

from chessledger.chess.castling import CastlingDirection
from chessledger.chess.fen import STARTING_FEN
from chessledger.chess.game import ChessGame, ChessResult
from chessledger.chess.pieces import Color, Piece, PieceType
from chessledger.chess.square import Square
from chessledger.core.exceptions import IllegalMoveError

CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
FOOLS_MATE = ["f2f3", "e7e5", "g2g4", "d8h4"]


def play(game: ChessGame, moves: list[str]) -> None:
    for move in moves:
        game.make_move(move)


def piece_at(game: ChessGame, square_name: str) -> Piece:
    return game.board.piece(Square.from_algebraic(square_name))


# -- CREATION LOGIC --
def test_new_game_from_starting_position() -> None:
    game = ChessGame.from_fen()
    assert game.to_fen() == STARTING_FEN
    assert game.color_to_move == Color.WHITE
    assert game.history == []
    assert len(game.legal_moves()) == 20
    assert game.result() is None


def test_history_is_copied() -> None:
    history = [STARTING_FEN]
    game = ChessGame.from_fen(STARTING_FEN, history)
    game.make_move("e2e4")
    assert history == [STARTING_FEN]
    assert game.history == [STARTING_FEN, STARTING_FEN]


# -- MAKING MOVES --
def test_make_legal_move() -> None:
    game = ChessGame.from_fen()
    move = game.make_move("e2e4")
    assert move.to_uci() == "e2e4"
    assert game.to_fen() == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    assert game.history == [STARTING_FEN]


@pytest.mark.parametrize("move", ["e2e5", "e1e2", "a1a3", "e7e5", "b1d2"])
def test_make_illegal_move(move: str) -> None:
    """Illegal moves raise and leave the position untouched."""
    game = ChessGame.from_fen()
    with pytest.raises(IllegalMoveError):
        game.make_move(move)
    assert game.to_fen() == STARTING_FEN
    assert game.history == []


def test_is_legal() -> None:
    game = ChessGame.from_fen()
    assert game.is_legal("g1f3")
    assert not game.is_legal("g1g3")
    assert not game.is_legal("nonsense")


def test_pinned_piece_cannot_move() -> None:
    game = ChessGame.from_fen("4k3/4r3/8/8/8/8/4B3/4K3 w - - 0 1")
    assert not game.is_legal("e2d3")
    assert game.is_legal("e1d1")


def test_must_answer_check() -> None:
    game = ChessGame.from_fen("4k3/8/8/8/8/8/3P4/r3K3 w - - 0 1")
    assert game.is_check()
    assert not game.is_legal("d2d3")
    assert {move.to_uci() for move in game.legal_moves()} == {"e1e2", "e1f2"}


def test_counters() -> None:
    """The half move clock resets on pawn moves and captures, the move number goes up after black moves."""
    game = ChessGame.from_fen()
    play(game, ["g1f3", "g8f6"])
    assert game.state.half_move_clock == 2
    assert game.state.num_turns == 2
    play(game, ["e2e4", "f6e4"])
    assert game.state.half_move_clock == 0
    assert game.state.num_turns == 3


def test_pass_turn() -> None:
    game = ChessGame.from_fen()
    game.pass_turn()
    assert game.color_to_move == Color.BLACK
    assert game.is_legal("e7e5")
    assert game.history == [STARTING_FEN]


# -- CASTLING --
def test_castling_moves_are_legal() -> None:
    game = ChessGame.from_fen(CASTLING_FEN)
    assert game.is_legal("e1g1")
    assert game.is_legal("e1c1")


@pytest.mark.parametrize(
    "move, rank_fen, castling",
    [
        ("e1g1", "R4RK1", "kq"),
        ("e1c1", "2KR3R", "kq"),
    ],
)
def test_castling_moves_king_and_rook(move: str, rank_fen: str, castling: str) -> None:
    game = ChessGame.from_fen(CASTLING_FEN)
    returned = game.make_move(move)
    assert returned.castling_direction is not None
    assert game.to_fen() == f"r3k2r/8/8/8/8/8/8/{rank_fen} b {castling} - 1 1"


def test_cannot_castle_through_attacked_square() -> None:
    game = ChessGame.from_fen("4kr2/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    assert not game.is_legal("e1g1")
    assert game.is_legal("e1c1")


def test_cannot_castle_out_of_check() -> None:
    game = ChessGame.from_fen("4r1k1/8/8/8/8/8/8/R3K2R w KQ - 0 1")
    assert game.is_check()
    assert not game.is_legal("e1g1")
    assert not game.is_legal("e1c1")


def test_cannot_castle_without_rights() -> None:
    game = ChessGame.from_fen("r3k2r/8/8/8/8/8/8/R3K2R w Kkq - 0 1")
    assert game.is_legal("e1g1")
    assert not game.is_legal("e1c1")


def test_cannot_castle_through_pieces() -> None:
    game = ChessGame.from_fen("r3k2r/8/8/8/8/8/8/RN2K1NR w KQkq - 0 1")
    assert not game.is_legal("e1g1")
    assert not game.is_legal("e1c1")


def test_revoke_rights_if_rook_is_moved() -> None:
    game = ChessGame.from_fen(CASTLING_FEN)
    game.make_move("h1h2")
    assert game.to_fen().split(" ")[2] == "Qkq"


def test_revoke_rights_if_rook_gets_captured() -> None:
    game = ChessGame.from_fen(CASTLING_FEN)
    game.make_move("a1a8")
    assert game.to_fen().split(" ")[2] == "Kk"
    assert game.state.castling_rights[CastlingDirection.BLACK_QUEEN_SIDE] is False


# -- EN PASSANT --
def test_en_passant() -> None:
    game = ChessGame.from_fen()
    play(game, ["e2e4", "a7a6", "e4e5", "d7d5"])
    assert game.state.en_passant_square == Square.from_algebraic("d6")

    move = game.make_move("e5d6")
    assert move.is_en_passant
    assert piece_at(game, "d5").is_empty()
    assert piece_at(game, "d6") == Piece(PieceType.PAWN, Color.WHITE)
    assert game.state.half_move_clock == 0


def test_en_passant_only_right_after_the_double_push() -> None:
    game = ChessGame.from_fen()
    play(game, ["e2e4", "a7a6", "e4e5", "d7d5", "h2h3", "h7h6"])
    assert not game.is_legal("e5d6")


# -- PROMOTION --
def test_promotion() -> None:
    game = ChessGame.from_fen("8/4P3/8/8/8/8/8/k6K w - - 0 1")
    promotions = {m.to_uci() for m in game.legal_moves() if m.from_square.to_algebraic() == "e7"}
    assert promotions == {"e7e8n", "e7e8b", "e7e8r", "e7e8q"}
    assert not game.is_legal("e7e8")

    game.make_move("e7e8n")
    assert piece_at(game, "e8") == Piece(PieceType.KNIGHT, Color.WHITE)
    assert piece_at(game, "e7").is_empty()


# -- GAME OVER --
def test_checkmate() -> None:
    game = ChessGame.from_fen()
    play(game, FOOLS_MATE)
    assert game.color_to_move == Color.WHITE
    assert game.is_check()
    assert game.legal_moves() == []
    assert game.result() == ChessResult.CHECKMATE


def test_stalemate() -> None:
    game = ChessGame.from_fen("7k/5Q2/6K1/8/8/8/8/8 b - - 0 1")
    assert not game.is_check()
    assert game.result() == ChessResult.STALEMATE


def test_threefold_repetition() -> None:
    game = ChessGame.from_fen()
    knight_dance = ["g1f3", "g8f6", "f3g1", "f6g8"]
    play(game, knight_dance)
    assert game.result() is None
    play(game, knight_dance)
    assert game.result() == ChessResult.THREEFOLD_REPETITION


def test_fifty_move_rule() -> None:
    game = ChessGame.from_fen("8/8/8/8/8/8/8/K6k w - - 98 80")
    game.make_move("a1a2")
    assert game.result() is None
    game.make_move("h1h2")
    assert game.state.half_move_clock == 100
    assert game.result() == ChessResult.FIFTY_MOVE_RULE
