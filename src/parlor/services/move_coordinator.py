"""
Read, validate, conditionally write.

The coordinator is the only writer of game documents after creation. It never trusts a cached copy: every attempt
starts from a fresh read, runs the lifecycle + kernel on it and writes with the version it read. When another
writer got there first, the whole attempt is repeated against the new document.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional
from uuid import UUID

from parlor.core.config import Config
from parlor.core.exceptions import (
    GameError,
    GameNotFoundError,
    StaleWriteError,
    WriteConflictError,
)
from parlor.core.models import GameModel, GameUpdate
from parlor.core.shared_types import GameType, PlayerId
from parlor.db.repository import GameRepository
from parlor.games.game import Game, utc_now
from parlor.games.kernel import RuleKernel
from parlor.games.registry import KernelRegistry, default_kernels

logger = logging.getLogger(__name__)

# An action run against a freshly loaded game. Raises on rejection.
Action = Callable[[Game, RuleKernel, datetime], GameUpdate]


@dataclass
class MoveResult:
    """Either the stored document after the move, or the reason it was rejected (never both)."""

    game: Optional[GameModel] = None
    error: Optional[GameError] = None

    @property
    def accepted(self) -> bool:
        return self.error is None


class MoveCoordinator:
    def __init__(
        self,
        repository: GameRepository,
        kernels: Optional[KernelRegistry] = None,
        max_attempts: int = Config.MAX_WRITE_ATTEMPTS,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.repo = repository
        self.kernels = kernels if kernels is not None else default_kernels()
        self.max_attempts = max_attempts
        self.clock = clock

    def propose_move(self, game_id: UUID, player: PlayerId, raw_move: Any) -> MoveResult:
        def action(game: Game, kernel: RuleKernel, now: datetime) -> GameUpdate:
            return game.make_move(player, raw_move, kernel, now)

        return self._run(game_id, player, "move", action)

    def abandon(self, game_id: UUID, player: PlayerId) -> MoveResult:
        def action(game: Game, kernel: RuleKernel, now: datetime) -> GameUpdate:
            return game.abandon(player, now)

        return self._run(game_id, player, "abandon", action)

    def claim_timeout(self, game_id: UUID, player: PlayerId) -> MoveResult:
        def action(game: Game, kernel: RuleKernel, now: datetime) -> GameUpdate:
            return game.claim_timeout(player, kernel, now)

        return self._run(game_id, player, "timeout claim", action)

    def kernel_for(self, game_type: str) -> RuleKernel:
        return self.kernels[GameType(game_type)]

    # -- Internal helpers --
    def _run(self, game_id: UUID, player: PlayerId, what: str, action: Action) -> MoveResult:
        try:
            stored = self._attempt(game_id, action)
        except GameError as error:
            log_level = logging.WARNING if isinstance(error, WriteConflictError) else logging.INFO
            logger.log(
                log_level, "Rejected %s by %s in game %s: [%s] %s",
                what, player, game_id, error.code, error,
            )
            return MoveResult(error=error)

        logger.info(
            "Accepted %s by %s in game %s (version %d, status %s)",
            what, player, game_id, stored.version, stored.status,
        )
        return MoveResult(game=stored)

    def _attempt(self, game_id: UUID, action: Action) -> GameModel:
        for attempt in range(1, self.max_attempts + 1):
            model = self.repo.get_game(game_id)
            if model is None:
                raise GameNotFoundError(f"Game with {game_id=} not found.")

            game = Game.from_model(model)
            game_update = action(game, self.kernel_for(model.game_type), self.clock())
            try:
                stored = self.repo.apply_update(
                    game_id, game_update, expected_version=model.version
                )
            except StaleWriteError:
                logger.warning(
                    "Stale write on game %s (attempt %d of %d)",
                    game_id, attempt, self.max_attempts,
                )
                continue

            if stored is None:
                raise GameNotFoundError(f"Game with {game_id=} was deleted.")
            return stored

        raise WriteConflictError(
            f"Game {game_id} kept changing, gave up after {self.max_attempts} attempts."
        )
