"""
The Game class is the entrypoint into the domain layer for the service layer.

It owns the lifecycle every game type shares (status gating, turn ownership, completion) and delegates the
game-specific rules to a RuleKernel. Every accepted action produces a GameUpdate: the partial document the
coordinator writes back to the store.
"""

import random
from copy import deepcopy
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Self

from parlor.core.exceptions import (
    GameNotActiveError,
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
)
from parlor.core.models import GameModel, GameUpdate
from parlor.core.shared_types import DRAW, GameType, PlayerId, Players, Status
from parlor.games.kernel import RuleKernel, Transition, opponent


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    game_type: GameType
    players: Players
    status: Status
    current_turn: PlayerId
    winner: Optional[str]
    state: dict[str, Any]
    created_at: datetime = field(default_factory=utc_now)
    last_updated: datetime = field(default_factory=utc_now)
    version: int = 0

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""

        # Validation
        if model.game_type not in GameType.__members__.values():
            raise GameStateError(
                f"Invalid game type: {model.game_type!r}. \nPick one from {','.join(GameType)}"
            )
        if model.status not in Status.__members__.values():
            raise GameStateError(
                f"Invalid status code: {model.status!r}. \nPick one from {','.join(Status)}"
            )
        if len(model.players) != 2 or model.players[0] == model.players[1]:
            raise GameStateError(
                f"A game needs exactly two distinct players, got {model.players}."
            )

        status = Status(model.status)
        players: Players = (model.players[0], model.players[1])
        if status == Status.ACTIVE and model.current_turn not in players:
            raise GameStateError(
                f"Player on turn {model.current_turn!r} is not playing this game."
            )
        if (model.winner is not None) != (status == Status.COMPLETED):
            raise GameStateError(
                f"Winner {model.winner!r} does not fit status {status.value!r}."
            )
        if model.winner is not None and model.winner not in (*players, DRAW):
            raise GameStateError(f"Unknown winner {model.winner!r}.")

        return cls(
            game_type=GameType(model.game_type),
            players=players,
            status=status,
            current_turn=model.current_turn,
            winner=model.winner,
            state=deepcopy(model.state),
            created_at=model.created_at,
            last_updated=model.last_updated,
            version=model.version,
        )

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""

        return GameModel(
            game_type=self.game_type.value,
            players=list(self.players),
            status=self.status.value,
            current_turn=self.current_turn,
            winner=self.winner,
            state=deepcopy(self.state),
            created_at=self.created_at,
            last_updated=self.last_updated,
            version=self.version,
        )

    @classmethod
    def new_game(
        cls,
        game_type: GameType,
        players: Players,
        kernel: RuleKernel,
        now: Optional[datetime] = None,
        rng: Optional[random.Random] = None,
    ) -> Self:
        """
        Bootstrap a well-formed document: the first party is on turn (and plays white in chess).
        """
        if players[0] == players[1]:
            raise GameStateError("You cannot start a game against yourself.")
        if kernel.game_type != game_type:
            raise GameStateError(
                f"Kernel for {kernel.game_type.value!r} cannot start a {game_type.value!r} game."
            )

        now = now or utc_now()
        return cls(
            game_type=game_type,
            players=players,
            status=Status.ACTIVE,
            current_turn=players[0],
            winner=None,
            state=kernel.initial_fields(players, now, rng or random.Random()),
            created_at=now,
            last_updated=now,
        )

    def make_move(
        self,
        player: PlayerId,
        raw_move: Any,
        kernel: RuleKernel,
        now: Optional[datetime] = None,
    ) -> GameUpdate:
        """
        Attempt to make a move
        -----

        1. lifecycle checks: player takes part, game still active, player on turn (unless the kernel is simultaneous)
        2. let the kernel validate the move and compute its fields (raises on rejection, nothing changes)
        3. merge the transition into this game and return the partial document to store
        """
        self._require_player(player)
        self._require_active()
        if not kernel.simultaneous and self.current_turn != player:
            raise NotYourTurnError(f"It is not {player!r}'s turn.")

        now = now or utc_now()
        transition = kernel.apply_move(self.state, self.players, player, raw_move, now)
        next_turn = player if transition.keep_turn else opponent(self.players, player)
        return self._apply(transition, next_turn, now)

    def abandon(self, player: PlayerId, now: Optional[datetime] = None) -> GameUpdate:
        """A player walks away: the game ends without a winner."""
        self._require_player(player)
        self._require_active()

        now = now or utc_now()
        self.status = Status.ABANDONED
        self.last_updated = now
        return GameUpdate(status=self.status.value, last_updated=now)

    def claim_timeout(
        self, player: PlayerId, kernel: RuleKernel, now: Optional[datetime] = None
    ) -> GameUpdate:
        """Either player may claim that the player on the clock ran out of time."""
        self._require_player(player)
        self._require_active()

        now = now or utc_now()
        transition = kernel.check_timeout(self.state, self.players, self.current_turn, now)
        if transition is None:
            raise IllegalMoveError(f"{self.current_turn!r} still has time left.")
        return self._apply(transition, self.current_turn, now)

    @property
    def is_over(self) -> bool:
        return self.status != Status.ACTIVE

    # -- Internal helpers --
    def _require_player(self, player: PlayerId) -> None:
        if player not in self.players:
            raise NotYourTurnError(f"{player!r} is not playing this game.")

    def _require_active(self) -> None:
        if self.is_over:
            raise GameNotActiveError(
                f"The game is over. status: {self.status.value}"
            )

    def _apply(
        self, transition: Transition, next_turn: PlayerId, now: datetime
    ) -> GameUpdate:
        self.state.update(deepcopy(transition.fields))
        self.last_updated = now
        update = GameUpdate(state=deepcopy(transition.fields), last_updated=now)

        if transition.winner is not None:
            self.status = Status.COMPLETED
            self.winner = transition.winner
            update.status = self.status.value
            update.winner = self.winner
            return update

        self.current_turn = next_turn
        update.current_turn = next_turn
        return update
