"""Unit tests for parlor/chess/moves.py"""

import pytest

from parlor.chess.board import Board
from parlor.chess.castling import CastlingDirection
from parlor.chess.moves import (
    Move,
    candidate_castling_move,
    candidate_king_moves,
    candidate_knight_moves,
    candidate_pawn_moves,
    candidate_queen_moves,
    candidate_rook_moves,
    is_attacked_by_knight,
    is_attacked_by_pawn,
    is_attacked_diagonally,
    is_attacked_straight,
    is_pawn_push_to_promotion_square,
)
from parlor.chess.pieces import Color, PieceType
from parlor.chess.square import Square

EMPTY_FEN = "/".join(["8"] * 8)


def sq(name: str) -> Square:
    return Square.from_algebraic(name)


def targets(moves: list[Move]) -> set[str]:
    return {move.to_square.to_algebraic() for move in moves}


# -- NOTATION --
@pytest.mark.parametrize(
    "move, notation",
    [
        (Move(sq("e2"), sq("e4")), "e2-e4"),
        (Move(sq("e7"), sq("e8"), promote_to=PieceType.QUEEN), "e7-e8=Q"),
        (Move(sq("b2"), sq("b1"), promote_to=PieceType.KNIGHT), "b2-b1=N"),
        (candidate_castling_move(CastlingDirection.WHITE_KING_SIDE), "O-O"),
        (candidate_castling_move(CastlingDirection.BLACK_QUEEN_SIDE), "O-O-O"),
    ],
)
def test_notation(move: Move, notation: str) -> None:
    assert move.to_notation() == notation


# -- PAWNS --
def test_pawn_single_and_double_push() -> None:
    board = Board.starting_position()
    assert targets(candidate_pawn_moves(sq("e2"), board)) == {"e3", "e4"}
    assert targets(candidate_pawn_moves(sq("d7"), board)) == {"d6", "d5"}


def test_pawn_double_push_needs_both_squares_empty() -> None:
    blocked_far = Board.from_fen("8/8/8/8/4n3/8/4P3/8")
    assert targets(candidate_pawn_moves(sq("e2"), blocked_far)) == {"e3"}

    blocked_near = Board.from_fen("8/8/8/8/8/4n3/4P3/8")
    assert targets(candidate_pawn_moves(sq("e2"), blocked_near)) == set()


def test_pawn_only_pushes_once_after_leaving_start() -> None:
    board = Board.from_fen("8/8/8/8/8/4P3/8/8")
    assert targets(candidate_pawn_moves(sq("e3"), board)) == {"e4"}


def test_pawn_captures_diagonally_onto_opponent_only() -> None:
    board = Board.from_fen("8/8/8/3p1N2/4P3/8/8/8")
    assert targets(candidate_pawn_moves(sq("e4"), board)) == {"e5", "d5"}


# -- PIECES --
def test_knight_from_corner_and_start() -> None:
    assert targets(candidate_knight_moves(sq("b1"), Board.starting_position())) == {"a3", "c3"}
    board = Board.from_fen("N7/8/8/8/8/8/8/8")
    assert targets(candidate_knight_moves(sq("a8"), board)) == {"b6", "c7"}


def test_rook_ray_stops_at_pieces() -> None:
    board = Board.from_fen("8/8/8/8/R2p4/8/8/P7")
    assert targets(candidate_rook_moves(sq("a4"), board)) == {
        "b4", "c4", "d4", "a5", "a6", "a7", "a8", "a3", "a2",
    }


def test_queen_in_the_middle() -> None:
    board = Board.from_fen("8/8/8/3Q4/8/8/8/8")
    assert len(candidate_queen_moves(sq("d5"), board)) == 27


def test_king_moves_do_not_include_castling() -> None:
    board = Board.from_fen("8/8/8/8/8/8/8/R3K2R")
    assert targets(candidate_king_moves(sq("e1"), board)) == {"d1", "f1", "d2", "e2", "f2"}


# -- ATTACKS --
def test_pawn_attacks_forward_diagonals() -> None:
    board = Board.from_fen("8/8/8/8/4P3/8/8/8")
    assert is_attacked_by_pawn(sq("d5"), Color.WHITE, board)
    assert is_attacked_by_pawn(sq("f5"), Color.WHITE, board)
    assert not is_attacked_by_pawn(sq("e5"), Color.WHITE, board)
    assert not is_attacked_by_pawn(sq("d3"), Color.WHITE, board)


def test_black_pawn_attacks_downwards() -> None:
    board = Board.from_fen("8/8/8/4p3/8/8/8/8")
    assert is_attacked_by_pawn(sq("d4"), Color.BLACK, board)
    assert not is_attacked_by_pawn(sq("d6"), Color.BLACK, board)


def test_sliding_attacks_are_blocked() -> None:
    board = Board.from_fen("8/8/8/8/8/2P5/8/B3r3")
    assert not is_attacked_diagonally(sq("e5"), Color.WHITE, board)
    assert is_attacked_diagonally(sq("b2"), Color.WHITE, board)
    assert is_attacked_straight(sq("e8"), Color.BLACK, board)
    assert not is_attacked_straight(sq("a1"), Color.WHITE, board)


def test_knight_attack() -> None:
    board = Board.from_fen("8/8/8/8/8/8/8/6n1")
    assert is_attacked_by_knight(sq("f3"), Color.BLACK, board)
    assert not is_attacked_by_knight(sq("f3"), Color.WHITE, board)


def test_promotion_square() -> None:
    board = Board.from_fen("8/4P3/8/8/8/8/3p4/8")
    assert is_pawn_push_to_promotion_square(Move(sq("e7"), sq("e8")), board)
    assert is_pawn_push_to_promotion_square(Move(sq("d2"), sq("d1")), board)
    assert not is_pawn_push_to_promotion_square(Move(sq("a1"), sq("a8")), board)
