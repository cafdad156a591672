"""Renderable lines: a content producer plus its rendering options."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

Producer = Callable[[], "bytes | None"]
"""Zero-argument callable returning the bytes to draw, or ``None`` to skip."""

SPACER = b"<spacer>"
"""Sentinel content: the line occupies its row but nothing is written."""


@dataclass
class LineOptions:
    """How a line is drawn and cleared.

    Attributes:
        with_next_line: The line owns a terminal row and is followed by a newline.
        manual_cleanup: Replaces the generic row-clear sequence. It is
            responsible for all of its own cursor movement.
    """

    with_next_line: bool = True
    manual_cleanup: Callable[[], bytes] | None = None


class Line:
    """A unit of renderable content registered with a ``Renderer``.

    Lines are compared by identity: two lines with the same producer are
    still distinct registry entries.
    """

    __slots__ = ("_producer", "options")

    def __init__(self, producer: Producer, options: LineOptions | None = None) -> None:
        self._producer = producer
        self.options = options if options is not None else LineOptions()

    def next(self) -> bytes | None:
        """Produce this cycle's content."""
        return self._producer()

    def __repr__(self) -> str:
        return (
            f"Line(with_next_line={self.options.with_next_line}, "
            f"manual_cleanup={self.options.manual_cleanup is not None})"
        )


def line_from_generator(g: Producer) -> Line:
    """A line that owns a row."""
    return Line(g, LineOptions(with_next_line=True))


def inline_from_generator(g: Producer) -> Line:
    """A line drawn on the current row, without a trailing newline."""
    return Line(g, LineOptions(with_next_line=False))


def line_from_generator_and_options(g: Producer, options: LineOptions) -> Line:
    return Line(g, options)


def spacer() -> Line:
    """An empty row."""
    return Line(lambda: SPACER, LineOptions(with_next_line=True))
