"""Defines the types of chess pieces"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self


class PieceType(Enum):
    PAWN = auto()
    KNIGHT = auto()
    BISHOP = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()


class Color(Enum):
    WHITE = auto()
    BLACK = auto()

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


CODE_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_CODE: dict[PieceType, str] = {
    value: key for key, value in CODE_TO_PIECE.items()
}


@dataclass(frozen=True)
class Piece:
    type: PieceType
    color: Color

    @classmethod
    def from_code(cls, character: str) -> Self:
        # lower case: second party (black), upper case: first party (white)
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = CODE_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_code(self) -> str:
        return (
            PIECE_TO_CODE[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_CODE[self.type].lower()
        )

    def promoted_to(self, new_type: PieceType) -> Self:
        return type(self)(new_type, self.color)
