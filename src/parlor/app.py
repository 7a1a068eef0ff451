"""Wire the layers together: database session, repositories, kernels and services."""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.orm import Session

from parlor.core.logging_config import configure_logging
from parlor.db.database import init_db
from parlor.db.sql_repository import SQLGameRepository, SQLInviteRepository
from parlor.games.registry import KernelRegistry
from parlor.services.game_service import GameService
from parlor.services.invite_service import InviteService


@dataclass
class Parlor:
    games: GameService
    invites: InviteService


def create_parlor(
    db_session: Optional[Session] = None, kernels: Optional[KernelRegistry] = None
) -> Parlor:
    configure_logging()
    session = db_session or init_db()()

    games = GameService(SQLGameRepository(session), kernels=kernels)
    invites = InviteService(SQLInviteRepository(session), games)
    return Parlor(games=games, invites=invites)
