"""Tic-Tac-Toe: 9 cells, each empty (None) or holding the id of the player who claimed it."""

import random
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

from parlor.core.exceptions import IllegalMoveError
from parlor.core.shared_types import DRAW, GameType, PlayerId, Players
from parlor.games.kernel import Fields, RuleKernel, Transition, require_int

BOARD_SIZE = 9

# 3 rows, 3 columns, 2 diagonals
WINNING_LINES: tuple[tuple[int, int, int], ...] = (
    (0, 1, 2),
    (3, 4, 5),
    (6, 7, 8),
    (0, 3, 6),
    (1, 4, 7),
    (2, 5, 8),
    (0, 4, 8),
    (2, 4, 6),
)

Cell = Optional[PlayerId]


def check_winner(board: Sequence[Cell]) -> Optional[str]:
    """The player owning a full line, DRAW for a full board without one, otherwise None (game goes on)."""
    for a, b, c in WINNING_LINES:
        if board[a] is not None and board[a] == board[b] == board[c]:
            return board[a]
    if all(cell is not None for cell in board):
        return DRAW
    return None


class TicTacToeKernel(RuleKernel):
    game_type = GameType.TICTACTOE

    def initial_fields(
        self, players: Players, now: datetime, rng: random.Random
    ) -> Fields:
        return {"board": [None] * BOARD_SIZE}

    def apply_move(
        self,
        fields: Mapping[str, Any],
        players: Players,
        player: PlayerId,
        raw_move: Any,
        now: datetime,
    ) -> Transition:
        cell = require_int(raw_move, "cell index")
        board: list[Cell] = list(fields["board"])

        if not 0 <= cell < BOARD_SIZE:
            raise IllegalMoveError(f"Cell {cell} is off the board.")
        if board[cell] is not None:
            raise IllegalMoveError(f"Cell {cell} is already occupied.")

        board[cell] = player
        return Transition(fields={"board": board}, winner=check_winner(board))
