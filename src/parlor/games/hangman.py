"""
Hangman race: each player gets their own secret word and guesses letters against it, one letter per turn.

A player is finished once their word is fully revealed or they run out of lives. The game ends when both are finished.
"""

import random
from datetime import datetime
from typing import Any, Mapping, Optional

from parlor.core.config import Config
from parlor.core.exceptions import IllegalMoveError, MalformedMoveError
from parlor.core.shared_types import DRAW, GameType, PlayerId, Players
from parlor.games.kernel import Fields, RuleKernel, Transition, opponent
from parlor.games.words import WordDictionary


def is_word_revealed(word: str, guessed_letters: list[str]) -> bool:
    return all(letter in guessed_letters for letter in set(word))


def normalize_letter(raw_move: Any) -> str:
    if not isinstance(raw_move, str) or len(raw_move.strip()) != 1:
        raise MalformedMoveError(f"Expected a single letter, got {raw_move!r}.")
    letter = raw_move.strip().upper()
    if not letter.isalpha():
        raise MalformedMoveError(f"Expected a single letter, got {raw_move!r}.")
    return letter


def decide_winner(
    words: Mapping[PlayerId, str],
    guessed_letters: Mapping[PlayerId, list[str]],
    remaining_lives: Mapping[PlayerId, int],
    players: Players,
) -> str:
    """The only player who revealed their word wins. Otherwise compare the remaining lives."""
    first, second = players
    first_solved = is_word_revealed(words[first], guessed_letters[first])
    second_solved = is_word_revealed(words[second], guessed_letters[second])
    if first_solved != second_solved:
        return first if first_solved else second

    if remaining_lives[first] != remaining_lives[second]:
        return first if remaining_lives[first] > remaining_lives[second] else second
    return DRAW


class HangmanKernel(RuleKernel):
    game_type = GameType.HANGMAN

    def __init__(
        self, dictionary: Optional[WordDictionary] = None, lives: int = Config.HANGMAN_LIVES
    ) -> None:
        self.dictionary = dictionary or WordDictionary()
        self.lives = lives

    def initial_fields(
        self, players: Players, now: datetime, rng: random.Random
    ) -> Fields:
        return {
            "words": {p: self.dictionary.pick_hangman_word() for p in players},
            "guessedLetters": {p: [] for p in players},
            "remainingLives": {p: self.lives for p in players},
            "finishedGuessing": {p: False for p in players},
        }

    def apply_move(
        self,
        fields: Mapping[str, Any],
        players: Players,
        player: PlayerId,
        raw_move: Any,
        now: datetime,
    ) -> Transition:
        letter = normalize_letter(raw_move)
        words: Mapping[PlayerId, str] = fields["words"]
        guessed = {p: list(letters) for p, letters in fields["guessedLetters"].items()}
        lives = dict(fields["remainingLives"])
        finished = dict(fields["finishedGuessing"])

        if finished[player]:
            raise IllegalMoveError("You already finished guessing.")
        if letter in guessed[player]:
            raise IllegalMoveError(f"You already guessed {letter!r}.")

        guessed[player].append(letter)
        if letter not in words[player]:
            lives[player] = max(lives[player] - 1, 0)
        if lives[player] == 0 or is_word_revealed(words[player], guessed[player]):
            finished[player] = True

        changed = {
            "guessedLetters": guessed,
            "remainingLives": lives,
            "finishedGuessing": finished,
        }
        if all(finished[p] for p in players):
            return Transition(
                fields=changed, winner=decide_winner(words, guessed, lives, players)
            )

        # nobody to hand the turn to while the opponent is done
        other_finished = finished[opponent(players, player)]
        return Transition(fields=changed, keep_turn=other_finished)
