"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from parlor.chess.pieces import Color
from parlor.chess.square import Square

KING_SIDE_NOTATION = "O-O"
QUEEN_SIDE_NOTATION = "O-O-O"


class CastlingDirection(Enum):
    """The four castling directions. Values are their encodings in the `castlingRights` document field (same as FEN)."""

    WHITE_KING_SIDE = "K"
    WHITE_QUEEN_SIDE = "Q"
    BLACK_KING_SIDE = "k"
    BLACK_QUEEN_SIDE = "q"

    @property
    def color(self) -> Color:
        return Color.WHITE if self.value.isupper() else Color.BLACK

    @property
    def notation(self) -> str:
        return KING_SIDE_NOTATION if self.value.lower() == "k" else QUEEN_SIDE_NOTATION


CASTLING_ORDER: tuple[CastlingDirection, ...] = (
    CastlingDirection.WHITE_KING_SIDE,
    CastlingDirection.WHITE_QUEEN_SIDE,
    CastlingDirection.BLACK_KING_SIDE,
    CastlingDirection.BLACK_QUEEN_SIDE,
)

CastlingRights = dict[CastlingDirection, bool]


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, we already know the king / rook are still at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    def between(self) -> list[Square]:
        """Squares strictly between king and rook: all of them must be empty to castle."""
        step = 1 if self.rook_from.col > self.king_from.col else -1
        return [
            Square(self.king_from.row, col)
            for col in range(self.king_from.col + step, self.rook_from.col, step)
        ]

    def king_path(self) -> list[Square]:
        """Squares the king passes over (landing square excluded, that one is covered by the check filter)."""
        step = 1 if self.king_to.col > self.king_from.col else -1
        return [
            Square(self.king_from.row, col)
            for col in range(self.king_from.col + step, self.king_to.col, step)
        ]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.WHITE_KING_SIDE: CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    CastlingDirection.WHITE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    CastlingDirection.BLACK_KING_SIDE: CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    CastlingDirection.BLACK_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


def castling_options(color: Color) -> list[CastlingDirection]:
    return [direction for direction in CASTLING_ORDER if direction.color == color]


def castling_from_code(code: str) -> CastlingRights:
    """parse the `castlingRights` field"""
    return {direction: (direction.value in code) for direction in CastlingDirection}


def castling_to_code(castling_rights: CastlingRights) -> str:
    """create the `castlingRights` field"""
    castling_chars = "".join(
        [direction.value for direction in CASTLING_ORDER if castling_rights[direction]]
    )
    return castling_chars or "-"


def revoke_for_squares(rights: CastlingRights, touched: list[Square]) -> CastlingRights:
    """
    A king or rook leaving its home square (or a rook being captured on it) loses the associated rights.
    """
    updated = dict(rights)
    for direction, squares in CASTLING_RULES.items():
        if squares.king_from in touched or squares.rook_from in touched:
            updated[direction] = False
    return updated


def rights_from_history(moves: list[str]) -> CastlingRights:
    """
    Reconstruct castling rights from the notation log.
    ---

    Only needed for documents written before `castlingRights` was stored. White moves on even indices.
    Any move starting or ending on a king/rook home square revokes the associated rights.
    """
    rights: CastlingRights = {direction: True for direction in CastlingDirection}
    for index, notation in enumerate(moves):
        color = Color.WHITE if index % 2 == 0 else Color.BLACK
        token = notation.rstrip("+#")
        if token in (KING_SIDE_NOTATION, QUEEN_SIDE_NOTATION):
            for direction in castling_options(color):
                rights[direction] = False
            continue

        squares = token.split("=")[0].split("-")
        touched = [Square.from_algebraic(sq) for sq in squares if len(sq) == 2]
        rights = revoke_for_squares(rights, touched)
    return rights
