"""Implementation of the repositories using SQLAlchemy"""

import logging
from typing import Optional
from uuid import UUID, uuid4

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from parlor.core.exceptions import StaleWriteError
from parlor.core.models import GameModel, GameUpdate, InviteModel
from parlor.db.schema import DBGame, DBInvite, utc_now
from parlor.db.subscriptions import ChangeNotifier, OnChange, Unsubscribe

logger = logging.getLogger(__name__)


class SQLGameRepository:
    """Data stored using SQL / methods implemented using SQLAlchemy"""

    def __init__(
        self, db_session: Session, notifier: Optional[ChangeNotifier] = None
    ) -> None:
        self.db = db_session
        self.notifier = notifier or ChangeNotifier()

    def get_game(self, game_id: UUID) -> GameModel | None:
        """Get game by ID, if record exists."""
        game_db = self._fetch_game(game_id)
        if game_db:
            return self._to_model(game_db)
        return None

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        """Store new game and return the stored data + newly created game ID."""

        new_id = uuid4()
        game_db = DBGame(
            id=new_id,
            game_type=game.game_type,
            players=list(game.players),
            status=game.status,
            current_turn=game.current_turn,
            winner=game.winner,
            state=game.state,
            version=0,
            created_at=game.created_at,
            last_updated=game.last_updated,
        )
        self.db.add(game_db)
        self.db.commit()
        self.db.refresh(game_db)
        return self._to_model(game_db), new_id

    def apply_update(
        self,
        game_id: UUID,
        game_update: GameUpdate,
        expected_version: Optional[int] = None,
    ) -> GameModel | None:
        """
        Conditional write
        ----

        The UPDATE statement itself carries the version check (`WHERE id = ? AND version = ?`), so two writers that
        read the same version can never both succeed: the loser matches zero rows.
        """
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None

        read_version = game_db.version
        if expected_version is not None and read_version != expected_version:
            raise StaleWriteError(
                f"Game {game_id} is at version {read_version}, expected {expected_version}."
            )

        values: dict = {
            "state": {**game_db.state, **game_update.state},
            "version": read_version + 1,
            "last_updated": game_update.last_updated or utc_now(),
        }
        if game_update.status is not None:
            values["status"] = game_update.status
        if game_update.current_turn is not None:
            values["current_turn"] = game_update.current_turn
        if game_update.winner is not None:
            values["winner"] = game_update.winner

        statement = (
            update(DBGame)
            .where(DBGame.id == game_id, DBGame.version == read_version)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = self.db.execute(statement)
        if result.rowcount != 1:
            self.db.rollback()
            raise StaleWriteError(f"Game {game_id} changed while it was being written.")
        self.db.commit()

        # the commit expired the instance: this reloads the stored row
        self.db.refresh(game_db)
        stored = self._to_model(game_db)
        logger.debug("Game %s written at version %d", game_id, stored.version)
        self.notifier.notify(game_id, stored)
        return stored

    def delete_game(self, game_id: UUID) -> GameModel | None:
        """Remove a game's record."""
        game_db = self._fetch_game(game_id)
        if not game_db:
            return None
        game_model = self._to_model(game_db)
        self.db.delete(game_db)
        self.db.commit()
        return game_model

    def subscribe(self, game_id: UUID, on_change: OnChange) -> Unsubscribe:
        return self.notifier.subscribe(game_id, on_change)

    def _fetch_game(self, game_id: UUID) -> DBGame | None:
        query = select(DBGame).where(DBGame.id == game_id)
        return self.db.scalar(query)

    def _to_model(self, game_db: DBGame) -> GameModel:
        """Convert SQLAlchemy model to data transfer model."""
        return GameModel(
            game_type=game_db.game_type,
            players=list(game_db.players),
            status=game_db.status,
            current_turn=game_db.current_turn,
            winner=game_db.winner,
            state=dict(game_db.state),
            created_at=game_db.created_at,
            last_updated=game_db.last_updated,
            version=game_db.version,
        )


class SQLInviteRepository:
    def __init__(self, db_session: Session) -> None:
        self.db = db_session

    def create_invite(self, invite: InviteModel) -> tuple[InviteModel, UUID]:
        new_id = uuid4()
        invite_db = DBInvite(
            id=new_id,
            sender=invite.sender,
            receiver=invite.receiver,
            game_type=invite.game_type,
            status=invite.status,
            game_id=invite.game_id,
            created_at=invite.created_at,
        )
        self.db.add(invite_db)
        self.db.commit()
        self.db.refresh(invite_db)
        return self._to_model(invite_db), new_id

    def get_invite(self, invite_id: UUID) -> InviteModel | None:
        invite_db = self.db.get(DBInvite, invite_id)
        if invite_db:
            return self._to_model(invite_db)
        return None

    def update_invite(
        self, invite_id: UUID, status: str, game_id: Optional[UUID] = None
    ) -> InviteModel | None:
        invite_db = self.db.get(DBInvite, invite_id)
        if not invite_db:
            return None
        invite_db.status = status
        if game_id is not None:
            invite_db.game_id = game_id
        self.db.commit()
        self.db.refresh(invite_db)
        return self._to_model(invite_db)

    def list_invites(
        self,
        sender: Optional[str] = None,
        receiver: Optional[str] = None,
        status: Optional[str] = None,
    ) -> list[tuple[UUID, InviteModel]]:
        query = select(DBInvite).order_by(DBInvite.created_at)
        if sender is not None:
            query = query.where(DBInvite.sender == sender)
        if receiver is not None:
            query = query.where(DBInvite.receiver == receiver)
        if status is not None:
            query = query.where(DBInvite.status == status)
        return [(invite_db.id, self._to_model(invite_db)) for invite_db in self.db.scalars(query)]

    def _to_model(self, invite_db: DBInvite) -> InviteModel:
        return InviteModel(
            sender=invite_db.sender,
            receiver=invite_db.receiver,
            game_type=invite_db.game_type,
            status=invite_db.status,
            created_at=invite_db.created_at,
            game_id=invite_db.game_id,
        )
