"""Unit tests for parlor/games/game.py (shared lifecycle) and parlor/games/registry.py"""

import random
from datetime import datetime, timedelta, timezone

import pytest

from parlor.chess.game import ChessKernel
from parlor.core.exceptions import (
    GameNotActiveError,
    GameStateError,
    IllegalMoveError,
    NotYourTurnError,
)
from parlor.core.models import GameModel
from parlor.core.shared_types import DRAW, GameType, Status
from parlor.games.game import Game
from parlor.games.registry import default_kernels
from parlor.games.rps import RPSKernel
from parlor.games.tictactoe import TicTacToeKernel
from parlor.games.words import WordDictionary

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)
PLAYERS = ("alice", "bob")
A, B = PLAYERS


def make_model(**overrides) -> GameModel:
    values = dict(
        game_type="tictactoe",
        players=list(PLAYERS),
        status="active",
        current_turn=A,
        winner=None,
        state={"board": [None] * 9},
        created_at=NOW,
        last_updated=NOW,
        version=3,
    )
    values.update(overrides)
    return GameModel(**values)


# -- REGISTRY --
def test_registry_covers_every_game_type() -> None:
    kernels = default_kernels(WordDictionary.seeded(0))
    assert set(kernels) == set(GameType)
    for game_type, kernel in kernels.items():
        assert kernel.game_type == game_type


# -- CREATION LOGIC --
@pytest.mark.parametrize("game_type", list(GameType))
def test_new_game_is_well_formed(game_type: GameType) -> None:
    """Every bootstrapped document passes the invariant checks of from_model"""
    kernel = default_kernels(WordDictionary.seeded(0))[game_type]
    game = Game.new_game(game_type, PLAYERS, kernel, now=NOW, rng=random.Random(0))

    assert game.status == Status.ACTIVE
    assert game.current_turn == A
    assert game.winner is None
    assert game.version == 0
    assert Game.from_model(game.to_model()) == game


def test_new_game_against_yourself() -> None:
    with pytest.raises(GameStateError):
        Game.new_game(GameType.TICTACTOE, (A, A), TicTacToeKernel(), now=NOW)


def test_new_game_with_wrong_kernel() -> None:
    with pytest.raises(GameStateError):
        Game.new_game(GameType.CHESS, PLAYERS, TicTacToeKernel(), now=NOW)


def test_model_roundtrip() -> None:
    model = make_model()
    assert Game.from_model(model).to_model() == model


@pytest.mark.parametrize(
    "overrides",
    [
        {"game_type": "checkers"},
        {"status": "paused"},
        {"players": [A]},
        {"players": [A, A]},
        {"current_turn": "carol"},
        {"winner": A},
        {"status": "completed", "winner": None},
        {"status": "completed", "winner": "carol"},
    ],
)
def test_invariant_violations(overrides: dict) -> None:
    with pytest.raises(GameStateError):
        Game.from_model(make_model(**overrides))


# -- MOVES --
def test_accepted_move_flips_turn() -> None:
    game = Game.from_model(make_model())
    update = game.make_move(A, 4, TicTacToeKernel(), now=NOW + timedelta(seconds=1))

    assert update.current_turn == B
    assert update.status is None
    assert update.state == {"board": [None] * 4 + [A] + [None] * 4}
    assert update.last_updated == NOW + timedelta(seconds=1)
    assert game.current_turn == B


def test_winning_move_completes() -> None:
    board = [A, A, None, B, B, None, None, None, None]
    game = Game.from_model(make_model(state={"board": board}))
    update = game.make_move(A, 2, TicTacToeKernel(), now=NOW)

    assert update.status == Status.COMPLETED
    assert update.winner == A
    # turn is not handed over after the game ended
    assert update.current_turn is None
    assert game.status == Status.COMPLETED


def test_draw_completes() -> None:
    board = [A, B, A, A, B, B, B, A, None]
    game = Game.from_model(make_model(state={"board": board}))
    update = game.make_move(A, 8, TicTacToeKernel(), now=NOW)
    assert update.winner == DRAW


def test_not_your_turn() -> None:
    game = Game.from_model(make_model())
    with pytest.raises(NotYourTurnError):
        game.make_move(B, 0, TicTacToeKernel(), now=NOW)


def test_outsider_cannot_move() -> None:
    game = Game.from_model(make_model())
    with pytest.raises(NotYourTurnError):
        game.make_move("carol", 0, TicTacToeKernel(), now=NOW)


@pytest.mark.parametrize("status, winner", [("completed", A), ("abandoned", None)])
def test_finished_game_is_immutable(status: str, winner: str | None) -> None:
    game = Game.from_model(make_model(status=status, winner=winner))
    with pytest.raises(GameNotActiveError):
        game.make_move(A, 0, TicTacToeKernel(), now=NOW)
    with pytest.raises(GameNotActiveError):
        game.abandon(A, now=NOW)


def test_rejected_move_changes_nothing() -> None:
    model = make_model()
    game = Game.from_model(model)
    with pytest.raises(IllegalMoveError):
        game.make_move(A, 9, TicTacToeKernel(), now=NOW)
    assert game.to_model() == model


def test_simultaneous_game_ignores_turn() -> None:
    model = make_model(
        game_type="rps",
        state={"choices": {A: None, B: None}, "round": 1, "rounds": []},
    )
    game = Game.from_model(model)
    update = game.make_move(B, "plunger", RPSKernel(), now=NOW)
    assert update.current_turn == B
    assert game.state["choices"] == {A: None, B: "plunger"}


# -- ABANDON / TIMEOUT --
def test_abandon() -> None:
    game = Game.from_model(make_model())
    update = game.abandon(B, now=NOW)
    assert update.status == Status.ABANDONED
    assert update.winner is None
    assert game.status == Status.ABANDONED


def test_claim_timeout_without_flag_fall() -> None:
    game = Game.new_game(GameType.CHESS, PLAYERS, ChessKernel(clock_seconds=60), now=NOW)
    with pytest.raises(IllegalMoveError):
        game.claim_timeout(B, ChessKernel(), now=NOW + timedelta(seconds=30))


def test_claim_timeout_after_flag_fall() -> None:
    game = Game.new_game(GameType.CHESS, PLAYERS, ChessKernel(clock_seconds=60), now=NOW)
    update = game.claim_timeout(B, ChessKernel(), now=NOW + timedelta(seconds=61))
    assert update.status == Status.COMPLETED
    assert update.winner == B
    assert game.state["timeRemaining"][A] == 0


def test_games_without_clock_never_time_out() -> None:
    game = Game.from_model(make_model())
    with pytest.raises(IllegalMoveError):
        game.claim_timeout(B, TicTacToeKernel(), now=NOW + timedelta(days=3))
