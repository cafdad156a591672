"""Single-word hangman state machine."""

from __future__ import annotations

import random
from typing import Sequence

WORDS: tuple[str, ...] = (
    "activated",
    "activates",
)

DEFAULT_MAX_MISSES = 5

_HIDDEN = "_"


class GuessError(ValueError):
    """A guess that was rejected without changing the game."""


class InvalidGuessError(GuessError):
    def __init__(self) -> None:
        super().__init__("invalid character")


class AlreadyAttemptedError(GuessError):
    def __init__(self) -> None:
        super().__init__("already attempted letter")


def is_valid_word(word: str) -> bool:
    """True for a non-empty word made only of lowercase ASCII letters."""
    return bool(word) and all("a" <= c <= "z" for c in word)


def _normalize(guess: int | str | bytes) -> str:
    if isinstance(guess, int):
        guess = chr(guess)
    elif isinstance(guess, bytes):
        guess = guess[:1].decode("latin-1")
    if len(guess) != 1:
        raise InvalidGuessError()
    if "A" <= guess <= "Z":
        guess = guess.lower()
    if not "a" <= guess <= "z":
        raise InvalidGuessError()
    return guess


class Hangman:
    """One round of hangman over a single secret word.

    The visible state has one ``"<c> "`` cell per letter of the word, with
    ``_`` standing in for letters not yet revealed.
    """

    def __init__(
        self,
        word: str | None = None,
        *,
        words: Sequence[str] = WORDS,
        max_misses: int = DEFAULT_MAX_MISSES,
        rng: random.Random | None = None,
    ) -> None:
        if word is None:
            if not words:
                raise ValueError("no words to choose from")
            bad = [w for w in words if not is_valid_word(w.lower())]
            if bad:
                raise ValueError(f"words must be non-empty lowercase ASCII letters: {bad!r}")
            word = (rng or random).choice(list(words))
        word = word.lower()
        if not is_valid_word(word):
            raise ValueError(f"word must be non-empty lowercase ASCII letters: {word!r}")

        self._word = word
        self._max_misses = max_misses
        self._attempted: set[str] = set()
        self._revealed: list[bool] = [False] * len(word)
        self._misses = 0

    @property
    def word(self) -> str:
        return self._word

    @property
    def misses(self) -> int:
        return self._misses

    @property
    def attempted(self) -> frozenset[str]:
        return frozenset(self._attempted)

    @property
    def current_state(self) -> str:
        return "".join(
            f"{c if shown else _HIDDEN} " for c, shown in zip(self._word, self._revealed)
        )

    def guess(self, guess: int | str | bytes) -> str:
        """Try a letter and return the new state.

        Upper-case letters count as their lower-case form. Raises
        ``InvalidGuessError`` for anything that is not an ASCII letter and
        ``AlreadyAttemptedError`` for a repeated letter.
        """
        letter = _normalize(guess)
        if letter in self._attempted:
            raise AlreadyAttemptedError()
        self._attempted.add(letter)

        revealed_any = False
        for i, c in enumerate(self._word):
            if not self._revealed[i] and c == letter:
                self._revealed[i] = True
                revealed_any = True

        if not revealed_any:
            self._misses += 1

        return self.current_state

    def is_over(self) -> bool:
        return self._misses > self._max_misses or self.has_won()

    def has_won(self) -> bool:
        return all(self._revealed)
