"""
Rock-Paper-Scissors, bathroom edition.

Both players choose independently (no turn ownership). A round resolves once both choices are in.
A drawn round is archived and both choices reset so the players can go again.
"""

import random
from datetime import datetime
from enum import StrEnum
from typing import Any, Mapping, Optional

from parlor.core.exceptions import IllegalMoveError, MalformedMoveError
from parlor.core.shared_types import DRAW, GameType, PlayerId, Players
from parlor.games.kernel import Fields, RuleKernel, Transition, opponent


class Choice(StrEnum):
    POOP = "poop"
    TOILET_PAPER = "toilet_paper"
    PLUNGER = "plunger"


# key beats value
BEATS: dict[Choice, Choice] = {
    Choice.POOP: Choice.TOILET_PAPER,
    Choice.TOILET_PAPER: Choice.PLUNGER,
    Choice.PLUNGER: Choice.POOP,
}


def beats(first: Choice, second: Choice) -> bool:
    return BEATS[first] == second


def resolve_round(choices: Mapping[PlayerId, Choice], players: Players) -> str:
    """Winner of a round where both players chose (DRAW on equal choices)."""
    first, second = players
    if choices[first] == choices[second]:
        return DRAW
    return first if beats(choices[first], choices[second]) else second


def parse_choice(raw_move: Any) -> Choice:
    if not isinstance(raw_move, str) or raw_move not in tuple(Choice):
        options = ", ".join(choice.value for choice in Choice)
        raise MalformedMoveError(f"Choice must be one of {options}, got {raw_move!r}.")
    return Choice(raw_move)


class RPSKernel(RuleKernel):
    game_type = GameType.RPS
    simultaneous = True

    def initial_fields(
        self, players: Players, now: datetime, rng: random.Random
    ) -> Fields:
        return {
            "choices": {player: None for player in players},
            "round": 1,
            "rounds": [],
        }

    def apply_move(
        self,
        fields: Mapping[str, Any],
        players: Players,
        player: PlayerId,
        raw_move: Any,
        now: datetime,
    ) -> Transition:
        choice = parse_choice(raw_move)
        choices: dict[PlayerId, Optional[str]] = dict(fields["choices"])
        if choices.get(player) is not None:
            raise IllegalMoveError("You already chose this round.")

        choices[player] = choice.value
        other_choice = choices.get(opponent(players, player))
        if other_choice is None:
            return Transition(fields={"choices": choices}, keep_turn=True)

        both = {p: Choice(c) for p, c in choices.items() if c is not None}
        outcome = resolve_round(both, players)
        if outcome != DRAW:
            return Transition(fields={"choices": choices}, winner=outcome, keep_turn=True)

        # drawn round: archive it and start the next one
        rounds = list(fields.get("rounds", []))
        rounds.append({"round": fields.get("round", 1), "choices": choices})
        return Transition(
            fields={
                "choices": {p: None for p in players},
                "round": fields.get("round", 1) + 1,
                "rounds": rounds,
            },
            keep_turn=True,
        )
