"""
Head-to-head Wordle.

Both players chase the same secret word and take turns guessing. Each player sees per-letter feedback for their own guesses:

* green: right letter in the right position
* yellow: letter appears elsewhere in the secret

The first correct guess wins. When both players run out of guesses, the final guesses are compared.
"""

import random
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from parlor.core.config import Config
from parlor.core.exceptions import IllegalMoveError, MalformedMoveError
from parlor.core.shared_types import DRAW, GameType, PlayerId, Players
from parlor.games.kernel import Fields, RuleKernel, Transition, opponent
from parlor.games.words import WordDictionary

WORD_LENGTH = 5


@dataclass(frozen=True)
class Feedback:
    greens: list[int]
    yellows: list[int]

    def to_fields(self) -> dict[str, list[int]]:
        return {"greens": list(self.greens), "yellows": list(self.yellows)}


def score_guess(guess: str, secret: str) -> Feedback:
    """
    Two passes over the guess.
    ----

    1. exact position matches are green, and those secret letters are taken out of the pool
    2. every other guess letter still in the pool is yellow, and consumes one occurrence from the pool

    Consuming letters makes sure a duplicated letter in the guess is not reported more often than it occurs in the secret.
    """
    greens: list[int] = []
    pool: list[Optional[str]] = list(secret)
    for index, (guessed, actual) in enumerate(zip(guess, secret)):
        if guessed == actual:
            greens.append(index)
            pool[index] = None

    yellows: list[int] = []
    for index, guessed in enumerate(guess):
        if index in greens:
            continue
        if guessed in pool:
            yellows.append(index)
            pool[pool.index(guessed)] = None

    return Feedback(greens, yellows)


def normalize_guess(raw_move: Any) -> str:
    if not isinstance(raw_move, str):
        raise MalformedMoveError(f"A guess must be a word, got {raw_move!r}.")
    guess = raw_move.strip().upper()
    if len(guess) != WORD_LENGTH:
        raise IllegalMoveError(f"Guess must be exactly {WORD_LENGTH} letters.")
    if not guess.isalpha():
        raise IllegalMoveError("Guess must contain only letters.")
    return guess


def compare_final_guesses(
    player_guesses: Mapping[PlayerId, Mapping[str, Any]],
    finish_times: Mapping[PlayerId, Optional[float]],
    players: Players,
) -> str:
    """Both players used every guess: most greens, then most yellows, then first to finish. DRAW if all equal."""
    first, second = players

    def final(player: PlayerId, color: str) -> int:
        results = player_guesses[player]["results"]
        return len(results[-1][color]) if results else 0

    for color in ("greens", "yellows"):
        first_count, second_count = final(first, color), final(second, color)
        if first_count != second_count:
            return first if first_count > second_count else second

    first_time, second_time = finish_times.get(first), finish_times.get(second)
    if first_time is not None and second_time is not None and first_time != second_time:
        return first if first_time < second_time else second
    return DRAW


class WordleKernel(RuleKernel):
    game_type = GameType.WORDLE

    def __init__(
        self,
        dictionary: Optional[WordDictionary] = None,
        max_guesses: int = Config.WORDLE_MAX_GUESSES,
    ) -> None:
        self.dictionary = dictionary or WordDictionary()
        self.max_guesses = max_guesses

    def initial_fields(
        self, players: Players, now: datetime, rng: random.Random
    ) -> Fields:
        return {
            "word": self.dictionary.pick_secret_word(),
            "playerGuesses": {p: {"guesses": [], "results": []} for p in players},
            "maxGuesses": self.max_guesses,
            "finishTimes": {p: None for p in players},
        }

    def apply_move(
        self,
        fields: Mapping[str, Any],
        players: Players,
        player: PlayerId,
        raw_move: Any,
        now: datetime,
    ) -> Transition:
        guess = normalize_guess(raw_move)
        secret: str = fields["word"]
        max_guesses: int = fields["maxGuesses"]

        player_guesses = {
            p: {"guesses": list(g["guesses"]), "results": list(g["results"])}
            for p, g in fields["playerGuesses"].items()
        }
        mine = player_guesses[player]
        if len(mine["guesses"]) >= max_guesses:
            raise IllegalMoveError(f"You have used all {max_guesses} guesses.")

        mine["guesses"].append(guess)
        mine["results"].append(score_guess(guess, secret).to_fields())

        finish_times = dict(fields["finishTimes"])
        solved = guess == secret
        if solved or len(mine["guesses"]) == max_guesses:
            finish_times[player] = now.timestamp()

        changed = {"playerGuesses": player_guesses, "finishTimes": finish_times}
        if solved:
            return Transition(fields=changed, winner=player)

        other = opponent(players, player)
        other_exhausted = len(player_guesses[other]["guesses"]) >= max_guesses
        if other_exhausted and len(mine["guesses"]) >= max_guesses:
            winner = compare_final_guesses(player_guesses, finish_times, players)
            return Transition(fields=changed, winner=winner)

        # an opponent without guesses left cannot take the turn
        return Transition(fields=changed, keep_turn=other_exhausted)
