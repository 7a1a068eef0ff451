"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define pseudo-legal move sets for each piece type.


Legality (not leaving your own king in check) is checked later by the chess kernel
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol

from parlor.chess.castling import CASTLING_RULES, CastlingDirection
from parlor.chess.pieces import PIECE_TO_CODE, Color, Piece, PieceType
from parlor.chess.square import BOARD_DIMENSIONS, Square


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...


Vector = tuple[int, int]

# NOTE rows count downwards from black's back rank: white pawns move to lower rows.
PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}
PROMOTION_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: BOARD_DIMENSIONS[0] - 1}

KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = [
    (0, 1),
    (0, -1),
    (1, 0),
    (-1, 0),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None
    castling_direction: Optional[CastlingDirection] = None

    def to_notation(self) -> str:
        """
        Notation used in the game's move log
        ---

        examples:
        * "e2-e4": move the piece on e2 to e4
        * "e7-e8=Q": pawn moves from e7 to e8 and promotes to a queen
        * "O-O" / "O-O-O": castling king side / queen side

        Check ('+') and checkmate ('#') suffixes are added by the kernel once it knows the resulting position.
        """
        if self.castling_direction:
            return self.castling_direction.notation
        notation = f"{self.from_square.to_algebraic()}-{self.to_square.to_algebraic()}"
        if self.promote_to:
            notation += f"={PIECE_TO_CODE[self.promote_to].upper()}"
        return notation


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Square, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    moving_piece = board.piece(square)
    assert moving_piece is not None

    moves: list[Move] = []
    for d_row, d_col in directions:
        target_square = square
        while True:
            target_square = target_square.offset(d_row, d_col)
            if not target_square.is_within_bounds():
                break

            target_piece = board.piece(target_square)
            if target_piece is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if target_piece.color != moving_piece.color:
                    moves.append(Move(from_square=square, to_square=target_square))
                break

            moves.append(Move(from_square=square, to_square=target_square))
    return moves


def single_step_move(square: Square, board: Board, deltas: list[Vector]) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just can move a single step along a direction"""
    moving_piece = board.piece(square)
    assert moving_piece is not None

    moves: list[Move] = []
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not target_square.is_within_bounds():
            continue

        target_piece = board.piece(target_square)
        if target_piece is None or target_piece.color != moving_piece.color:
            moves.append(Move(from_square=square, to_square=target_square))

    return moves


def candidate_pawn_moves(square: Square, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square only.
    - can move by two from its starting row (if both squares are empty)
    - takes diagonally, only onto an opponent's piece

    NOTE: En passant is not part of this game.
    """
    pawn = board.piece(square)
    assert pawn is not None
    direction = PAWN_DIRECTION[pawn.color]

    moves: list[Move] = []
    one_step = square.offset(direction, 0)
    if one_step.is_within_bounds() and board.is_empty(one_step):
        moves.append(Move(from_square=square, to_square=one_step))

        two_steps = square.offset(2 * direction, 0)
        if square.row == PAWN_START_ROW[pawn.color] and board.is_empty(two_steps):
            moves.append(Move(from_square=square, to_square=two_steps))

    for d_col in (-1, 1):
        target_square = square.offset(direction, d_col)
        if not target_square.is_within_bounds():
            continue
        target_piece = board.piece(target_square)
        if target_piece is not None and target_piece.color != pawn.color:
            moves.append(Move(from_square=square, to_square=target_square))
    return moves


def candidate_knight_moves(square: Square, board: Board) -> list[Move]:
    """Knights always move such that |delta_row| + |delta_col| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Square, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Square, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Square, board: Board) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return candidate_bishop_moves(square, board) + candidate_rook_moves(square, board)


def candidate_king_moves(square: Square, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled separately).
    """
    return single_step_move(square, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Square, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    square: Square,
    by_color: Color,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color and that
    is allowed to move along the given direction?"_
    """
    for d_row, d_col in directions:
        target_square = square
        while True:
            target_square = target_square.offset(d_row, d_col)
            if not target_square.is_within_bounds():
                break

            piece_found = board.piece(target_square)
            if piece_found is not None:
                # only the first occupied square along the ray can attack
                if piece_found.color == by_color and piece_found.type in by_piece_types:
                    return True
                break
    return False


def single_step_attack(
    square: Square,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """
    Raycasting is for sliding pieces. This is the equivalent for pawns, kings, and knights that just can move a single step along a direction.
    """
    for d_row, d_col in deltas:
        target_square = square.offset(d_row, d_col)
        if not target_square.is_within_bounds():
            continue

        if board.piece(target_square) == Piece(by_piece_type, by_color):
            return True

    return False


def is_attacked_by_pawn(square: Square, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric, so to check IF a white pawn could take on your square -->
    Must look one row BEHIND it from white's point of view (a white pawn on a higher row index).
    """
    back = -PAWN_DIRECTION[by_color]
    return single_step_attack(
        square, by_color, PieceType.PAWN, board, [(back, -1), (back, 1)]
    )


def is_attacked_by_knight(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_by_king(square: Square, by_color: Color, board: Board) -> bool:
    return single_step_attack(square, by_color, PieceType.KING, board, KING_DELTAS)


def is_attacked_diagonally(square: Square, by_color: Color, board: Board) -> bool:
    """Bishops and the queen"""
    return raycasting_attack(
        square, by_color, (PieceType.BISHOP, PieceType.QUEEN), board, DIAGONALS
    )


def is_attacked_straight(square: Square, by_color: Color, board: Board) -> bool:
    """Rooks and the queen"""
    return raycasting_attack(
        square, by_color, (PieceType.ROOK, PieceType.QUEEN), board, STRAIGHTS
    )


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Square, Color, Board], bool]
ATTACK_RULES: list[IsAttackedFn] = [
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_by_king,
    is_attacked_diagonally,
    is_attacked_straight,
]


# -- CASTLING MOVES ---
def candidate_castling_move(direction: CastlingDirection) -> Move:
    """convert the castling rule into a move of the king + the castling direction set properly"""
    rule = CASTLING_RULES[direction]
    return Move(rule.king_from, rule.king_to, castling_direction=direction)


# -- PAWN PROMOTION MOVES --
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]


def is_pawn_push_to_promotion_square(move: Move, board: Board) -> bool:
    """check if the move is a pawn move that reaches the far row"""
    moving_piece = board.piece(move.from_square)
    if moving_piece is None or moving_piece.type != PieceType.PAWN:
        return False
    return move.to_square.row == PROMOTION_ROW[moving_piece.color]
