"""Unit tests for parlor/db/database.py"""

from uuid import uuid4

from sqlalchemy import inspect

from parlor.db.database import init_db
from parlor.db.sql_repository import SQLGameRepository


def test_init_db_creates_tables() -> None:
    session_factory = init_db("sqlite://", echo=False)
    with session_factory() as db:
        assert set(inspect(db.get_bind()).get_table_names()) >= {"games", "invites"}
        assert SQLGameRepository(db).get_game(uuid4()) is None
