"""Protocol repositories (the store adapter contract). SQLAlchemy implementations live in sql_repository.py"""

from typing import Optional, Protocol
from uuid import UUID

from parlor.core.models import GameModel, GameUpdate, InviteModel
from parlor.db.subscriptions import OnChange, Unsubscribe


class GameRepository(Protocol):
    """Persistence layer orchestration"""

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        ...

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""
        ...

    def apply_update(
        self,
        game_id: UUID,
        game_update: GameUpdate,
        expected_version: Optional[int] = None,
    ) -> GameModel | None:
        """
        Merge a partial document into the stored one and bump its version.

        With `expected_version`, the write only goes through if the stored version still equals it;
        otherwise StaleWriteError is raised and nothing is written.
        """
        ...

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        ...

    def subscribe(self, game_id: UUID, on_change: OnChange) -> Unsubscribe:
        """Get called with the new document after every committed write to this game."""
        ...


class InviteRepository(Protocol):
    def create_invite(self, invite: InviteModel) -> tuple[InviteModel, UUID]: ...

    def get_invite(self, invite_id: UUID) -> InviteModel | None: ...

    def update_invite(
        self, invite_id: UUID, status: str, game_id: Optional[UUID] = None
    ) -> InviteModel | None: ...

    def list_invites(
        self,
        sender: Optional[str] = None,
        receiver: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[tuple[UUID, InviteModel]]:
        """Invites matching all given filters, oldest first."""
        ...
