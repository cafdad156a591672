"""Configuration for the hangman server."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace

from gallows.game.hangman import DEFAULT_MAX_MISSES, WORDS, is_valid_word


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


@dataclass
class Config:
    """Server configuration."""

    host: str = "0.0.0.0"
    port: int = 9191
    redraw_interval: float = 0.2
    read_size: int = 16
    queue_size: int = 16
    prompt: str = ">"
    max_misses: int = DEFAULT_MAX_MISSES
    words: tuple[str, ...] = field(default_factory=lambda: WORDS)

    @classmethod
    def from_env(cls) -> Config:
        """Defaults overridden by ``GALLOWS_*`` environment variables."""
        base = cls()
        words_raw = os.environ.get("GALLOWS_WORDS", "")
        words = tuple(w.strip().lower() for w in words_raw.split(",") if w.strip())
        bad = [w for w in words if not is_valid_word(w)]
        if bad:
            raise ValueError(f"GALLOWS_WORDS entries must be ASCII letters only, got {bad!r}")
        return replace(
            base,
            host=os.environ.get("GALLOWS_HOST", base.host),
            port=_env_int("GALLOWS_PORT", base.port),
            redraw_interval=_env_float("GALLOWS_REDRAW_INTERVAL", base.redraw_interval),
            max_misses=_env_int("GALLOWS_MAX_MISSES", base.max_misses),
            words=words or base.words,
        )
