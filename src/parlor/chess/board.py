"""The Board implements all rules that affect the position (in chess: the configuration of pieces on the board)"""

from dataclasses import dataclass
from typing import Mapping, Optional, Self

from parlor.chess.castling import CASTLING_RULES
from parlor.chess.moves import ATTACK_RULES, MOVEMENT_RULES, CandidateMovesFn, Move
from parlor.chess.pieces import Color, Piece, PieceType
from parlor.chess.square import BOARD_DIMENSIONS, Square

STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"

Grid = list[list[Optional[Piece]]]


@dataclass
class Board:
    """Dense 8x8 grid of optional pieces, indexed [row][col]. Never shared between positions: moves return a new Board."""

    grid: Grid

    @classmethod
    def empty(cls) -> Self:
        rows, cols = BOARD_DIMENSIONS
        return cls([[None] * cols for _ in range(rows)])

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION_FEN)

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank (row 0), starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces.
        """
        board = cls.empty()
        for row, fen_one_rank in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_rank:
                if character.isalpha():
                    board.place_piece(Piece.from_code(character), Square(row, col))
                    col += 1
                else:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in self.grid)

    @staticmethod
    def _row_to_fen(row: list[Optional[Piece]]) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for piece in row:
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_code())

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    @classmethod
    def from_document(cls, position: Mapping[str, str]) -> Self:
        """The game document stores a sparse map: 'row,col' -> piece code"""
        board = cls.empty()
        for key, code in position.items():
            square = Square.from_key(key)
            if not square.is_within_bounds():
                raise ValueError(f"Square {key!r} is off the board.")
            board.place_piece(Piece.from_code(code), square)
        return board

    def to_document(self) -> dict[str, str]:
        return {
            Square(row, col).to_key(): piece.to_code()
            for row, pieces in enumerate(self.grid)
            for col, piece in enumerate(pieces)
            if piece is not None
        }

    # -- QUERIES --
    def piece(self, square: Square) -> Optional[Piece]:
        if not square.is_within_bounds():
            return None
        return self.grid[square.row][square.col]

    def is_empty(self, square: Square) -> bool:
        return self.piece(square) is None

    def place_piece(self, piece: Optional[Piece], square: Square) -> None:
        """Only used while building a board. Positions reached by moves are built with `with_move()`."""
        self.grid[square.row][square.col] = piece

    def locate_color(self, color: Color) -> list[Square]:
        return [
            Square(row, col)
            for row, pieces in enumerate(self.grid)
            for col, piece in enumerate(pieces)
            if piece is not None and piece.color == color
        ]

    def find_king(self, color: Color) -> Optional[Square]:
        king = Piece(PieceType.KING, color)
        return next(
            (square for square in self.locate_color(color) if self.piece(square) == king),
            None,
        )

    def is_any_occupied(self, squares: list[Square]) -> bool:
        return any(not self.is_empty(square) for square in squares)

    # -- ATTACKS --
    def is_under_attack(self, square: Square, by_color: Color) -> bool:
        return any(rule(square, by_color, self) for rule in ATTACK_RULES)

    def is_any_under_attack(self, squares: list[Square], by_color: Color) -> bool:
        return any(self.is_under_attack(square, by_color) for square in squares)

    def is_check(self, color: Color) -> bool:
        """Is the king of `color` attacked by the opponent? (A board without that king is never in check.)"""
        king_square = self.find_king(color)
        if king_square is None:
            return False
        return self.is_under_attack(king_square, color.opponent)

    def generate_candidate_moves(self, color: Color) -> list[Move]:
        """
        Before knowing the set of legal moves, we use raycasting to find candidate moves, which will later be tested for legality
        (making sure it does not put yourself in check.)
        """
        candidate_moves: list[Move] = []
        for starting_square in self.locate_color(color):
            piece = self.piece(starting_square)
            assert piece is not None
            movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.type]
            candidate_moves.extend(movement_rule(starting_square, self))
        return candidate_moves

    # -- UPDATES --
    def with_move(self, move: Move) -> "Board":
        """New board with the move applied. Castling also relocates the rook, promotion swaps the pawn."""
        board = Board([row[:] for row in self.grid])
        board._relocate(move.from_square, move.to_square)

        if move.castling_direction:
            squares = CASTLING_RULES[move.castling_direction]
            board._relocate(squares.rook_from, squares.rook_to)

        if move.promote_to:
            pawn = board.piece(move.to_square)
            assert pawn is not None
            board.place_piece(pawn.promoted_to(move.promote_to), move.to_square)
        return board

    def _relocate(self, from_square: Square, to_square: Square) -> None:
        self.grid[to_square.row][to_square.col] = self.grid[from_square.row][from_square.col]
        self.grid[from_square.row][from_square.col] = None
