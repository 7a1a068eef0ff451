"""
Contract between the shared game lifecycle and the rule kernels.

Key idea: strategy pattern. Every game type implements the same small interface; the lifecycle (see game.py)
takes care of status gating, turn ownership and merging whatever the kernel hands back.

Kernels are pure: they read a snapshot of their own fields and return a Transition. They never mutate the snapshot.
"""

import random
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

from parlor.core.exceptions import MalformedMoveError
from parlor.core.shared_types import GameType, PlayerId, Players

Fields = dict[str, Any]


@dataclass(frozen=True)
class Transition:
    """Outcome of an accepted move.

    * fields: kernel fields that changed (merged into the game document)
    * winner: set when the move ends the game (player id or DRAW)
    * keep_turn: the player who moved stays on turn
    """

    fields: Fields = field(default_factory=dict)
    winner: Optional[str] = None
    keep_turn: bool = False


class RuleKernel:
    """Base class of the six rule kernels."""

    game_type: GameType
    # Simultaneous games (RPS) waive turn ownership
    simultaneous: bool = False

    def initial_fields(
        self, players: Players, now: datetime, rng: random.Random
    ) -> Fields:
        """Kernel specific part of a brand new game document."""
        raise NotImplementedError

    def apply_move(
        self,
        fields: Mapping[str, Any],
        players: Players,
        player: PlayerId,
        raw_move: Any,
        now: datetime,
    ) -> Transition:
        """Validate the move against the snapshot and compute the next kernel state.

        Raises IllegalMoveError / MalformedMoveError on rejection.
        """
        raise NotImplementedError

    def check_timeout(
        self,
        fields: Mapping[str, Any],
        players: Players,
        on_clock: PlayerId,
        now: datetime,
    ) -> Optional[Transition]:
        """Games without a clock never time out."""
        return None


def opponent(players: Players, player: PlayerId) -> PlayerId:
    return players[1] if player == players[0] else players[0]


def require_int(raw_move: Any, what: str) -> int:
    """Board indices arrive as plain integers (bool is rejected even though it subclasses int)."""
    if isinstance(raw_move, bool) or not isinstance(raw_move, int):
        raise MalformedMoveError(f"Expected an integer {what}, got {raw_move!r}.")
    return raw_move
