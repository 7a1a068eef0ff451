"""
The chess kernel.

ChessPosition is the domain object: it is built from the kernel fields of a game document, knows the legal moves
of either side and produces the next position. ChessKernel plugs it into the shared game lifecycle
(parsing the raw move, running the clock, reporting check / checkmate / stalemate).
"""

import random
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional, Self

from parlor.chess.board import Board
from parlor.chess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    CastlingRights,
    castling_from_code,
    castling_options,
    castling_to_code,
    revoke_for_squares,
    rights_from_history,
)
from parlor.chess.moves import (
    PROMOTION_OPTIONS,
    Move,
    candidate_castling_move,
    is_pawn_push_to_promotion_square,
)
from parlor.chess.pieces import CODE_TO_PIECE, Color, Piece, PieceType
from parlor.chess.square import Square
from parlor.core.config import Config
from parlor.core.exceptions import GameStateError, IllegalMoveError, MalformedMoveError
from parlor.core.shared_types import DRAW, GameType, PlayerId, Players
from parlor.games.kernel import Fields, RuleKernel, Transition, opponent

CHECK_SUFFIX = "+"
CHECKMATE_SUFFIX = "#"


@dataclass
class ChessPosition:
    board: Board
    moves: list[str]
    castling_rights: CastlingRights

    @classmethod
    def from_fields(cls, fields: Mapping[str, Any]) -> Self:
        """Define how to construct a position from the game document. A corrupted document raises GameStateError."""
        try:
            board = Board.from_document(fields["board"])
            moves = list(fields.get("moves", []))
            # documents written without explicit castling rights: infer them from the move log
            rights_code = fields.get("castlingRights")
            castling_rights = (
                castling_from_code(rights_code)
                if rights_code is not None
                else rights_from_history(moves)
            )
        except (KeyError, ValueError, TypeError, AttributeError) as error:
            raise GameStateError(f"Corrupted chess position: {error!r}") from error
        return cls(board, moves, castling_rights)

    def to_fields(self) -> Fields:
        return {
            "board": self.board.to_document(),
            "moves": list(self.moves),
            "castlingRights": castling_to_code(self.castling_rights),
        }

    # -- LEGAL MOVES ---
    def legal_moves(self, color: Color) -> list[Move]:
        """
        List of legal moves for the player with the 'color' pieces
        ----

        1. generate candidate moves, using the basic movement rules for all pieces (the board does this calculation)
        2. add candidate castling moves
        3. remove illegal options --> a move that would put you in check or you are in check and the move does not get you out of it.
        """
        candidate_moves = self.board.generate_candidate_moves(color)
        candidate_moves.extend(
            candidate_castling_move(direction)
            for direction in self._legal_castling_directions(color)
        )
        return [
            move
            for move in candidate_moves
            if not self._is_putting_yourself_in_check(move, color)
        ]

    def legal_moves_from(self, square: Square, color: Color) -> list[Move]:
        return [move for move in self.legal_moves(color) if move.from_square == square]

    def has_legal_move(self, color: Color) -> bool:
        return len(self.legal_moves(color)) > 0

    def is_check(self, color: Color) -> bool:
        return self.board.is_check(color)

    def is_checkmate(self, color: Color) -> bool:
        return self.is_check(color) and not self.has_legal_move(color)

    def is_stalemate(self, color: Color) -> bool:
        return not self.is_check(color) and not self.has_legal_move(color)

    def _is_putting_yourself_in_check(self, move: Move, color: Color) -> bool:
        """Return True if the move leaves your own king in check

        plan:
        1. make the candidate move on a copy of the board (castling also moves the rook)
        2. determine if king is in check on the new board
        """
        return self.board.with_move(move).is_check(color)

    # -- CASTLING RULE HELPERS ---
    def _legal_castling_directions(self, color: Color) -> list[CastlingDirection]:
        """
        Find the legal castling directions for `color`
        ---

        **you are allowed to castle if**

        * Castling rights are not yet revoked (king and that rook never moved, rook never captured).
        * King and rook actually stand on their home squares.
        * The squares in between the two pieces are empty.
        * You are not currently in check (you cannot castle out of check).
        * The square the king passes over is not under attack (landing square is covered by the check filter).
        """
        if self.is_check(color):
            return []

        legal_directions: list[CastlingDirection] = []
        for direction in castling_options(color):
            if not self.castling_rights[direction]:
                continue

            squares = CASTLING_RULES[direction]
            if self.board.piece(squares.king_from) != Piece(PieceType.KING, color):
                continue
            if self.board.piece(squares.rook_from) != Piece(PieceType.ROOK, color):
                continue

            if self.board.is_any_occupied(squares.between()):
                continue

            if self.board.is_any_under_attack(squares.king_path(), color.opponent):
                continue

            legal_directions.append(direction)
        return legal_directions

    # -- UPDATES --
    def play(self, move: Move) -> "ChessPosition":
        """Next position (the notation is appended by the kernel, once check/checkmate is known)."""
        touched = [move.from_square, move.to_square]
        return ChessPosition(
            board=self.board.with_move(move),
            moves=list(self.moves),
            castling_rights=revoke_for_squares(self.castling_rights, touched),
        )


# -- RAW MOVE PARSING --
def parse_square(raw: Any) -> Square:
    """Squares arrive in algebraic notation ('e2') or as [row, col] pairs."""
    if isinstance(raw, str):
        if len(raw) != 2 or raw[0] not in "abcdefgh" or raw[1] not in "12345678":
            raise MalformedMoveError(f"Cannot interpret {raw!r} as a square.")
        return Square.from_algebraic(raw)

    if (
        isinstance(raw, (list, tuple))
        and len(raw) == 2
        and all(isinstance(v, int) and not isinstance(v, bool) for v in raw)
    ):
        square = Square(raw[0], raw[1])
        if not square.is_within_bounds():
            raise IllegalMoveError(f"Square {list(raw)} is off the board.")
        return square

    raise MalformedMoveError(f"Cannot interpret {raw!r} as a square.")


def parse_promotion(raw: Any) -> Optional[PieceType]:
    if raw is None:
        return None
    if not isinstance(raw, str) or raw.lower() not in CODE_TO_PIECE:
        raise MalformedMoveError(f"Unknown promotion piece {raw!r}.")
    piece_type = CODE_TO_PIECE[raw.lower()]
    if piece_type not in PROMOTION_OPTIONS:
        raise IllegalMoveError(f"A pawn cannot promote to {raw!r}.")
    return piece_type


def parse_move(raw_move: Any) -> tuple[Square, Square, Optional[PieceType]]:
    if not isinstance(raw_move, Mapping) or "from" not in raw_move or "to" not in raw_move:
        raise MalformedMoveError(
            f"A chess move needs 'from' and 'to' squares, got {raw_move!r}."
        )
    return (
        parse_square(raw_move["from"]),
        parse_square(raw_move["to"]),
        parse_promotion(raw_move.get("promotion")),
    )


def color_of(players: Players, player: PlayerId) -> Color:
    """The first party always plays white"""
    return Color.WHITE if player == players[0] else Color.BLACK


class ChessKernel(RuleKernel):
    game_type = GameType.CHESS

    def __init__(self, clock_seconds: int = Config.CHESS_CLOCK_SECONDS) -> None:
        self.clock_seconds = clock_seconds

    def initial_fields(
        self, players: Players, now: datetime, rng: random.Random
    ) -> Fields:
        position = ChessPosition(
            board=Board.starting_position(),
            moves=[],
            castling_rights={direction: True for direction in CastlingDirection},
        )
        return {
            **position.to_fields(),
            "timeRemaining": {p: self.clock_seconds for p in players},
            "turnStartedAt": now.timestamp(),
        }

    def apply_move(
        self,
        fields: Mapping[str, Any],
        players: Players,
        player: PlayerId,
        raw_move: Any,
        now: datetime,
    ) -> Transition:
        """
        Attempt to make a move
        -----

        1. parse the move and charge the clock of the player on move
        2. check the move is among the legal moves of that piece
        3. play it on a new position, then look at the opponent: check, checkmate, stalemate
        4. record the move in the log (with '+' or '#')
        """
        from_square, to_square, promotion = parse_move(raw_move)
        color = color_of(players, player)

        time_remaining = dict(fields.get("timeRemaining", {}))
        charged = _elapsed_seconds(fields, now)
        if player in time_remaining:
            left = time_remaining[player] - charged
            if left <= 0:
                raise IllegalMoveError("You ran out of time.")
            time_remaining[player] = left

        position = ChessPosition.from_fields(fields)
        piece = position.board.piece(from_square)
        if piece is None or piece.color != color:
            raise IllegalMoveError(
                f"There is no piece of yours on {from_square.to_algebraic()}."
            )

        move = self._select_move(position, from_square, to_square, color, promotion)
        next_position = position.play(move)

        opponent_color = color.opponent
        notation = move.to_notation()
        winner: Optional[str] = None
        if next_position.is_checkmate(opponent_color):
            notation += CHECKMATE_SUFFIX
            winner = player
        elif next_position.is_check(opponent_color):
            notation += CHECK_SUFFIX
        elif next_position.is_stalemate(opponent_color):
            winner = DRAW
        next_position.moves.append(notation)

        return Transition(
            fields={
                **next_position.to_fields(),
                "timeRemaining": time_remaining,
                "turnStartedAt": _clock_restart(fields, charged, now),
            },
            winner=winner,
        )

    def check_timeout(
        self,
        fields: Mapping[str, Any],
        players: Players,
        on_clock: PlayerId,
        now: datetime,
    ) -> Optional[Transition]:
        """Flag fall: the player on the clock used up their time and loses."""
        time_remaining = dict(fields.get("timeRemaining", {}))
        if on_clock not in time_remaining:
            return None
        if time_remaining[on_clock] - _elapsed_seconds(fields, now) > 0:
            return None

        time_remaining[on_clock] = 0
        return Transition(
            fields={"timeRemaining": time_remaining, "turnStartedAt": now.timestamp()},
            winner=opponent(players, on_clock),
        )

    def legal_moves(
        self, fields: Mapping[str, Any], players: Players, player: PlayerId
    ) -> list[str]:
        """Legal moves of the player in log notation (without check suffixes). Used by UIs to highlight target squares."""
        position = ChessPosition.from_fields(fields)
        return [move.to_notation() for move in position.legal_moves(color_of(players, player))]

    @staticmethod
    def _select_move(
        position: ChessPosition,
        from_square: Square,
        to_square: Square,
        color: Color,
        promotion: Optional[PieceType],
    ) -> Move:
        """Find the requested move among the legal moves of the piece (castling is requested as a two-square king move)."""
        legal_moves = position.legal_moves_from(from_square, color)
        move = next((m for m in legal_moves if m.to_square == to_square), None)
        if move is None:
            raise IllegalMoveError(
                f"Move not allowed: {from_square.to_algebraic()}-{to_square.to_algebraic()}"
            )

        if is_pawn_push_to_promotion_square(move, position.board):
            return Move(
                from_square=move.from_square,
                to_square=move.to_square,
                promote_to=promotion or PieceType.QUEEN,
            )
        if promotion is not None:
            raise IllegalMoveError("Only a pawn reaching the last rank can promote.")
        return move


def _elapsed_seconds(fields: Mapping[str, Any], now: datetime) -> int:
    """Whole seconds the player on the clock has been thinking."""
    started = fields.get("turnStartedAt")
    if started is None:
        return 0
    return max(int(now.timestamp() - started), 0)


def _clock_restart(fields: Mapping[str, Any], charged: int, now: datetime) -> float:
    """Restart from the last whole second charged: the fraction not charged yet carries over to the next turn."""
    started = fields.get("turnStartedAt")
    if started is None:
        return now.timestamp()
    return started + charged
