"""gallows.game: the hangman word game."""

from gallows.game.hangman import (
    DEFAULT_MAX_MISSES,
    WORDS,
    AlreadyAttemptedError,
    GuessError,
    Hangman,
    InvalidGuessError,
)

__all__ = [
    "Hangman",
    "GuessError",
    "InvalidGuessError",
    "AlreadyAttemptedError",
    "WORDS",
    "DEFAULT_MAX_MISSES",
]
