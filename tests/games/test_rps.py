"""Unit tests for parlor/games/rps.py"""

import random
from datetime import datetime, timezone
from itertools import permutations

import pytest

from parlor.core.exceptions import IllegalMoveError, MalformedMoveError
from parlor.core.shared_types import DRAW
from parlor.games.rps import Choice, RPSKernel, beats, parse_choice, resolve_round

NOW = datetime(2026, 1, 1, tzinfo=timezone.utc)
PLAYERS = ("alice", "bob")
A, B = PLAYERS


@pytest.fixture
def kernel() -> RPSKernel:
    return RPSKernel()


# -- BEATS --
@pytest.mark.parametrize("first, second", list(permutations(Choice, 2)))
def test_exactly_one_direction_wins(first: Choice, second: Choice) -> None:
    assert beats(first, second) != beats(second, first)


@pytest.mark.parametrize("choice", list(Choice))
def test_nothing_beats_itself(choice: Choice) -> None:
    assert not beats(choice, choice)


def test_cycle() -> None:
    assert beats(Choice.POOP, Choice.TOILET_PAPER)
    assert beats(Choice.TOILET_PAPER, Choice.PLUNGER)
    assert beats(Choice.PLUNGER, Choice.POOP)


def test_resolve_round() -> None:
    assert resolve_round({A: Choice.PLUNGER, B: Choice.POOP}, PLAYERS) == A
    assert resolve_round({A: Choice.PLUNGER, B: Choice.TOILET_PAPER}, PLAYERS) == B
    assert resolve_round({A: Choice.POOP, B: Choice.POOP}, PLAYERS) == DRAW


@pytest.mark.parametrize("raw_move", ["rock", "POOP", "", 1, None])
def test_parse_unknown_choice(raw_move: object) -> None:
    with pytest.raises(MalformedMoveError):
        parse_choice(raw_move)


# -- KERNEL --
def test_kernel_is_simultaneous(kernel: RPSKernel) -> None:
    assert kernel.simultaneous


def test_first_choice_waits_for_opponent(kernel: RPSKernel) -> None:
    fields = kernel.initial_fields(PLAYERS, NOW, random.Random(0))
    transition = kernel.apply_move(fields, PLAYERS, B, "poop", NOW)

    assert transition.winner is None
    assert transition.keep_turn
    assert transition.fields["choices"] == {A: None, B: "poop"}


def test_choose_twice(kernel: RPSKernel) -> None:
    fields = {"choices": {A: "poop", B: None}, "round": 1, "rounds": []}
    with pytest.raises(IllegalMoveError, match="already chose"):
        kernel.apply_move(fields, PLAYERS, A, "plunger", NOW)


def test_decisive_round(kernel: RPSKernel) -> None:
    fields = {"choices": {A: "toilet_paper", B: None}, "round": 1, "rounds": []}
    transition = kernel.apply_move(fields, PLAYERS, B, "poop", NOW)
    assert transition.winner == B
    assert transition.fields["choices"] == {A: "toilet_paper", B: "poop"}


def test_drawn_round_resets(kernel: RPSKernel) -> None:
    """A drawn round is archived, both choices reset and the round counter moves on."""
    fields = {"choices": {A: "plunger", B: None}, "round": 2, "rounds": [{"round": 1}]}
    transition = kernel.apply_move(fields, PLAYERS, B, "plunger", NOW)

    assert transition.winner is None
    assert transition.fields["choices"] == {A: None, B: None}
    assert transition.fields["round"] == 3
    assert transition.fields["rounds"][-1] == {
        "round": 2,
        "choices": {A: "plunger", B: "plunger"},
    }
