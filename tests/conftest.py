"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from collections import defaultdict
from copy import deepcopy
from typing import Generator, Optional
from uuid import UUID, uuid4

import pytest
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import Session, sessionmaker

from parlor.core.exceptions import StaleWriteError
from parlor.core.models import GameModel, GameUpdate
from parlor.db.schema import Base
from parlor.db.subscriptions import ChangeNotifier, OnChange, Unsubscribe

# Setup an in-memory SQLite database for testing
DATABASE_URL = "sqlite:///:memory:"
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session_repo() -> Generator[Session, None, None]:
    """Connection to a test database. Tables are removed at teardown to make unit tests of repository independent of each other."""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def second_db_session(db_session_repo: Session) -> Generator[Session, None, None]:
    """Another session on the same test database, for tests with two concurrent writers."""
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


# --- MOCK DEPENDENCIES ----
class MockRepository:
    """Mock the GameRepository using a dictionary of game models (with the same version check as the real one)."""

    def __init__(self) -> None:
        self._games: dict[UUID, GameModel] = {}
        self.notifier = ChangeNotifier()
        self.writes: dict[UUID, int] = defaultdict(int)

    def create_game(self, game: GameModel) -> tuple[GameModel, UUID]:
        game_id = uuid4()
        self._games[game_id] = deepcopy(game)
        return deepcopy(game), game_id

    def get_game(self, game_id: UUID) -> GameModel | None:
        game = self._games.get(game_id)
        return deepcopy(game) if game else None

    def apply_update(
        self,
        game_id: UUID,
        game_update: GameUpdate,
        expected_version: Optional[int] = None,
    ) -> GameModel | None:
        game = self._games.get(game_id)
        if game is None:
            return None
        if expected_version is not None and game.version != expected_version:
            raise StaleWriteError(f"{game.version} != {expected_version}")

        game.state = {**game.state, **deepcopy(game_update.state)}
        for name in ("status", "current_turn", "winner", "last_updated"):
            value = getattr(game_update, name)
            if value is not None:
                setattr(game, name, value)
        game.version += 1
        self.writes[game_id] += 1
        self.notifier.notify(game_id, deepcopy(game))
        return deepcopy(game)

    def delete_game(self, game_id: UUID) -> GameModel | None:
        return self._games.pop(game_id, None)

    def subscribe(self, game_id: UUID, on_change: OnChange) -> Unsubscribe:
        return self.notifier.subscribe(game_id, on_change)

    def clear(self) -> None:
        """Clear the repository (useful in between tests)"""
        self._games.clear()


@pytest.fixture
def mock_repository() -> Generator[MockRepository, None, None]:
    """Ensures to clear the repository between tests"""
    repo = MockRepository()
    try:
        yield repo
    finally:
        repo.clear()
