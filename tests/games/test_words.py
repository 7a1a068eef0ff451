"""Unit tests for parlor/games/words.py"""

import pytest

from parlor.games.words import (
    HANGMAN_WORDS,
    WORDLE_WORDS,
    WordDictionary,
    validate_word_list,
)


def test_builtin_lists_are_valid() -> None:
    validate_word_list(WORDLE_WORDS, length=5)
    validate_word_list(HANGMAN_WORDS)


@pytest.mark.parametrize(
    "words, length",
    [((), None), (("FLUSH", "TOILET"), 5), (("flush",), 5), (("FL-SH",), 5)],
)
def test_invalid_word_lists(words: tuple[str, ...], length: int | None) -> None:
    with pytest.raises(ValueError):
        validate_word_list(words, length=length)


def test_dictionary_rejects_bad_wordle_words() -> None:
    with pytest.raises(ValueError):
        WordDictionary(wordle_words=("TOILET",))


def test_seeded_dictionary_is_deterministic() -> None:
    first, second = WordDictionary.seeded(42), WordDictionary.seeded(42)
    assert [first.pick_secret_word() for _ in range(5)] == [
        second.pick_secret_word() for _ in range(5)
    ]


def test_picks_come_from_lists() -> None:
    dictionary = WordDictionary.seeded(1)
    assert dictionary.pick_secret_word() in WORDLE_WORDS
    assert dictionary.pick_hangman_word() in HANGMAN_WORDS
