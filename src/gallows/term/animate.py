"""Color-wave animation for line content."""

from __future__ import annotations

from typing import Sequence

from gallows.term.ansi import RESET, Color
from gallows.term.line import Line, Producer, line_from_generator


class Animated:
    """Wraps a producer so each byte cycles through *palette*.

    Byte ``i`` of the output on invocation ``k`` is colored
    ``palette[(i + k) % len(palette)]``, so the wave moves one step to the
    left every time the line is drawn. ``None`` from the wrapped producer is
    passed through untouched.
    """

    def __init__(self, producer: Producer, palette: Sequence[Color]) -> None:
        if not palette:
            raise ValueError("palette must contain at least one color")
        self._producer = producer
        self._palette = tuple(palette)
        self._shift = 0

    @property
    def shift(self) -> int:
        return self._shift

    def __call__(self) -> bytes | None:
        shift = self._shift
        self._shift += 1

        msg = self._producer()
        if msg is None:
            return None

        size = len(self._palette)
        out = bytearray(self._palette[abs(shift - 1) % size])
        for i, c in enumerate(msg):
            out += self._palette[(i + shift) % size]
            out.append(c)
        out += RESET
        return bytes(out)


def animated(producer: Producer, palette: Sequence[Color]) -> Producer:
    return Animated(producer, palette)


def animated_line_from_generator(g: Producer, palette: Sequence[Color]) -> Line:
    """A row-owning line whose content is animated with *palette*."""
    return line_from_generator(animated(g, palette))
