"""Unit tests for parlor/api/models.py"""

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from pydantic import ValidationError

from parlor.api.models import (
    CreateGameRequest,
    GameResponse,
    MoveRequest,
    SendInviteRequest,
)
from parlor.core.exceptions import InvalidRequestError
from parlor.core.models import GameModel
from parlor.core.shared_types import GameType

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)


def test_create_game_request() -> None:
    request = CreateGameRequest(game_type="memory", players=["alice", "bob"])
    assert request.game_type == GameType.MEMORY


@pytest.mark.parametrize(
    "players",
    [["alice"], ["alice", "bob", "carol"], ["alice", "alice"], ["alice", "  "]],
)
def test_create_game_request_players(players: list[str]) -> None:
    with pytest.raises(InvalidRequestError):
        CreateGameRequest(game_type="chess", players=players)


def test_unknown_game_type() -> None:
    with pytest.raises(ValidationError):
        CreateGameRequest(game_type="checkers", players=["alice", "bob"])


def test_move_request_keeps_payload() -> None:
    payload = {"from": "e2", "to": "e4"}
    request = MoveRequest(game_id=uuid4(), player_id="alice", move=payload)
    assert request.move == payload


def test_move_request_needs_player() -> None:
    with pytest.raises(InvalidRequestError):
        MoveRequest(game_id=uuid4(), player_id="", move=4)


def test_send_invite_request() -> None:
    with pytest.raises(InvalidRequestError):
        SendInviteRequest(sender="alice", receiver="alice", game_type="rps")
    assert SendInviteRequest(sender="alice", receiver="bob", game_type="rps").receiver == "bob"


def test_game_response_from_model() -> None:
    game_id = uuid4()
    model = GameModel("rps", ["alice", "bob"], "completed", "alice", "bob", {"round": 2}, NOW, NOW, 7)
    response = GameResponse.from_model(game_id, model)
    assert response.game_id == game_id
    assert response.game_type == GameType.RPS
    assert response.winner == "bob"
    assert response.version == 7
    assert response.state == {"round": 2}
