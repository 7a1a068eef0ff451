"""
Themed word lists used by the word games.

Wordle needs 5 letter secrets, Hangman takes anything alphabetic. All words are stored uppercase.
"""

import random
from dataclasses import dataclass, field
from typing import Final, Optional, Self

WORDLE_WORDS: Final[tuple[str, ...]] = (
    "FLUSH",
    "STALL",
    "PAPER",
    "TOWEL",
    "SPRAY",
    "SCRUB",
    "BIDET",
    "DRAIN",
    "PIPES",
    "SMELL",
    "STINK",
    "WIPES",
    "BOWEL",
    "POTTY",
    "SINKS",
    "SOAPY",
    "TILES",
    "GRIME",
    "FUMES",
    "SWIRL",
)

HANGMAN_WORDS: Final[tuple[str, ...]] = (
    "PLUNGER",
    "TOILET",
    "BATHROOM",
    "LAVATORY",
    "SHOWER",
    "PORCELAIN",
    "FLUSHING",
    "SEWER",
    "PLUMBER",
    "BUBBLES",
    "DEODORANT",
    "SANITIZER",
    "RESTROOM",
    "CISTERN",
)


def validate_word_list(words: tuple[str, ...], length: Optional[int] = None) -> None:
    """Raise ValueError if a word list cannot be used by the games."""
    if not words:
        raise ValueError("Word list cannot be empty")

    for index, word in enumerate(words):
        if length is not None and len(word) != length:
            raise ValueError(
                f"Word at index {index} {word!r} is not {length} characters long"
            )
        if not word.isalpha() or not word.isupper():
            raise ValueError(
                f"Word at index {index} {word!r} must be uppercase letters only"
            )


@dataclass
class WordDictionary:
    wordle_words: tuple[str, ...] = WORDLE_WORDS
    hangman_words: tuple[str, ...] = HANGMAN_WORDS
    rng: random.Random = field(default_factory=random.Random)

    def __post_init__(self) -> None:
        validate_word_list(self.wordle_words, length=5)
        validate_word_list(self.hangman_words)

    @classmethod
    def seeded(cls, seed: int) -> Self:
        """Deterministic picks (tests, replays)."""
        return cls(rng=random.Random(seed))

    def pick_secret_word(self) -> str:
        return self.rng.choice(self.wordle_words)

    def pick_hangman_word(self) -> str:
        return self.rng.choice(self.hangman_words)
