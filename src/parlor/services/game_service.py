"""Orchestration of communication from API models to business logic and persistence layers (and the reverse direction)."""

import logging
import random
from typing import Callable, Optional
from uuid import UUID

from parlor.api.models import (
    AbandonGameRequest,
    ClaimTimeoutRequest,
    CreateGameRequest,
    DeleteGameRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveErrorResponse,
    MoveRequest,
    MoveResponse,
    WatchGameRequest,
)
from parlor.chess.game import ChessKernel
from parlor.core.exceptions import (
    GameNotFoundError,
    InvalidRequestError,
    NotYourTurnError,
)
from parlor.core.models import GameModel
from parlor.db.repository import GameRepository
from parlor.db.subscriptions import SubscriptionRegistry
from parlor.games.game import Game
from parlor.games.registry import KernelRegistry
from parlor.services.move_coordinator import MoveCoordinator, MoveResult

logger = logging.getLogger(__name__)

OnGameChange = Callable[[GameResponse], None]


class GameService:
    """Orchestration of layers for all game types."""

    def __init__(
        self,
        repository: GameRepository,
        kernels: Optional[KernelRegistry] = None,
        coordinator: Optional[MoveCoordinator] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.repo = repository
        self.coordinator = coordinator or MoveCoordinator(repository, kernels)
        self.rng = rng or random.Random()
        self.subscriptions = SubscriptionRegistry(repository.subscribe)

    # -- API logic ---
    def create_game(self, request: CreateGameRequest) -> GameResponse:
        """Bootstrap a new game document and store it."""

        kernel = self.coordinator.kernel_for(request.game_type)
        players = (request.players[0], request.players[1])
        new_game = Game.new_game(
            request.game_type,
            players,
            kernel,
            now=self.coordinator.clock(),
            rng=self.rng,
        )
        stored_game, game_id = self.repo.create_game(new_game.to_model())
        logger.info(
            "Created %s game %s for %s vs %s",
            request.game_type.value, game_id, *players,
        )
        return GameResponse.from_model(game_id, stored_game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """Retrieve current game state."""
        game_model = self._fetch_game(request.game_id)
        return GameResponse.from_model(request.game_id, game_model)

    def make_move(self, request: MoveRequest) -> MoveResponse:
        """Make a move attempt. Rejections come back inside the response, they are not raised."""
        result = self.coordinator.propose_move(
            request.game_id, request.player_id, request.move
        )
        return self._create_move_response(request.game_id, result)

    def abandon_game(self, request: AbandonGameRequest) -> MoveResponse:
        result = self.coordinator.abandon(request.game_id, request.player_id)
        return self._create_move_response(request.game_id, result)

    def claim_timeout(self, request: ClaimTimeoutRequest) -> MoveResponse:
        result = self.coordinator.claim_timeout(request.game_id, request.player_id)
        return self._create_move_response(request.game_id, result)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """
        Retrieve the set of legal moves (chess only).
        ---
        A finished game has no legal moves left, and neither has the player waiting for the opponent.
        """
        stored_model = self._fetch_game(request.game_id)
        game = Game.from_model(stored_model)
        if request.player_id not in game.players:
            raise NotYourTurnError(f"{request.player_id!r} is not playing this game.")

        kernel = self.coordinator.kernel_for(game.game_type)
        if not isinstance(kernel, ChessKernel):
            raise InvalidRequestError(
                f"Legal moves are only listed for chess, not {game.game_type.value!r}."
            )

        legal_moves = (
            []
            if game.is_over or game.current_turn != request.player_id
            else kernel.legal_moves(game.state, game.players, request.player_id)
        )
        return LegalMovesResponse(
            game_id=request.game_id,
            player_id=request.player_id,
            legal_moves=legal_moves,
        )

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Handle a request to delete a Game record."""
        self.subscriptions.dispose(request.game_id)
        self.repo.delete_game(request.game_id)

    # -- Live updates --
    def watch_game(self, request: WatchGameRequest, on_change: OnGameChange) -> bool:
        """Push every stored change of the game to `on_change`. Watching a game twice keeps the first listener."""
        self._fetch_game(request.game_id)

        def forward(game_id: UUID, model: GameModel) -> None:
            on_change(GameResponse.from_model(game_id, model))

        return self.subscriptions.ensure(request.game_id, forward)

    def stop_watching(self, request: WatchGameRequest) -> bool:
        return self.subscriptions.dispose(request.game_id)

    def stop_watching_all(self) -> None:
        """Tear down every live subscription (e.g. on logout)."""
        self.subscriptions.dispose_all()

    # -- Internal helpers --
    def _create_move_response(self, game_id: UUID, result: MoveResult) -> MoveResponse:
        if result.error is not None:
            return MoveResponse(
                accepted=False,
                error=MoveErrorResponse(code=result.error.code, message=str(result.error)),
            )
        assert result.game is not None
        return MoveResponse(
            accepted=True, game=GameResponse.from_model(game_id, result.game)
        )

    def _fetch_game(self, game_id: UUID) -> GameModel:
        """Attempt to find the game in the repository and raise error if it fails."""
        game_model = self.repo.get_game(game_id)
        if game_model is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game_model
