"""In-place multi-line redraw over a raw byte stream.

The ``Renderer`` keeps an ordered registry of ``Line`` objects and, on every
``draw()``, walks back up over what it drew last time (the clear pass) and
then writes every visible line again (the draw pass).

Two counters keep the cursor aligned across cycles:

* ``clear_balance[i]`` -- rows line ``i`` has put on screen that have not been
  cleared yet. Lines with a manual cleanup use it to know when to run it.
* ``cursor`` -- rows below the render origin currently occupied.

Input echoed by the remote terminal pushes the cursor down outside of the
renderer's control; ``had_input()`` records that so the next clear pass can
walk back over those rows first.
"""

from __future__ import annotations

import logging
import threading

from gallows.term.ansi import (
    CLEAR,
    CLEAR_ROW_AND_UP,
    CLEAR_TO_END,
    CR,
    DOWN,
    NEWLINE,
    RESTORE,
    SAVE,
    UP,
    to_bytes,
)
from gallows.term.line import SPACER, Line, LineOptions
from gallows.term.sink import Sink

logger = logging.getLogger(__name__)

__all__ = ["Renderer"]


class Renderer:
    """Line registry plus clear/draw cycle for one terminal session.

    Every public method takes the renderer's lock, so a draw never
    interleaves with ``had_input()`` or a registry change. Line producers
    run inside the lock and must not call back into the renderer.
    """

    def __init__(self, sink: Sink) -> None:
        self._sink = sink
        self._lock = threading.Lock()

        # Parallel registry: index i of each list describes the same line
        self._lines: list[Line] = []
        self._hidden: list[bool] = []
        self._clear_balance: list[int] = []

        self._cursor: int = 0
        self._off_the_bottom: int = 0
        self._need_to_clear_input: bool = False
        self._has_saved_position: bool = False

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def cursor(self) -> int:
        with self._lock:
            return self._cursor

    @property
    def off_the_bottom(self) -> int:
        with self._lock:
            return self._off_the_bottom

    @property
    def line_count(self) -> int:
        with self._lock:
            return len(self._lines)

    def is_hidden(self, line: Line) -> bool:
        with self._lock:
            i = self._find_line(line)
            return i >= 0 and self._hidden[i]

    def clear_balance_of(self, line: Line) -> int:
        with self._lock:
            i = self._find_line(line)
            return self._clear_balance[i] if i >= 0 else 0

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def add_line(self, line: Line) -> None:
        with self._lock:
            self._lines.append(line)
            self._hidden.append(False)
            self._clear_balance.append(0)

    def remove_line(self, line: Line) -> None:
        """Remove *line*; unknown lines are ignored.

        Removing from a registry holding at most one line empties it,
        whichever line was passed.
        """
        with self._lock:
            if len(self._lines) <= 1:
                logger.debug("Dropping all %d line(s) from registry", len(self._lines))
                self._lines = []
                self._hidden = []
                self._clear_balance = []
                return

            i = self._find_line(line)
            if i < 0:
                return

            del self._lines[i]
            del self._hidden[i]
            del self._clear_balance[i]

    def show_line(self, line: Line) -> None:
        with self._lock:
            if not self._hidden:
                return
            i = self._find_line(line)
            if i < 0:
                return
            self._hidden[i] = False

    def hide_line(self, line: Line) -> None:
        with self._lock:
            i = self._find_line(line)
            if i < 0:
                return
            self._hidden[i] = True

    def _find_line(self, line: Line) -> int:
        for i, candidate in enumerate(self._lines):
            if candidate is line:
                return i
        return -1

    # ------------------------------------------------------------------
    # Input line
    # ------------------------------------------------------------------

    def create_input_line(self, symbol: str) -> Line:
        """Build the prompt line that shares its row with echoed keystrokes.

        The remote terminal echoes what the user types, so the prompt row is
        only partly ours. Its cleanup saves the cursor where the echo left
        it, wipes the row below, and climbs two rows; the next draw steps
        back down, rewrites the prompt, and either wipes the stale echo (after
        input) or restores the saved position.

        The returned line is not registered; pass it to ``add_line``.
        """
        prompt = to_bytes(symbol) + b" "

        def generate() -> bytes:
            buf = bytearray(DOWN)
            buf += prompt

            if self._need_to_clear_input:
                buf += CLEAR_TO_END
                self._need_to_clear_input = False
                self._has_saved_position = False
            if self._has_saved_position:
                buf += RESTORE

            return bytes(buf)

        def cleanup() -> bytes:
            buf = bytearray(SAVE)
            self._has_saved_position = True

            buf += DOWN
            buf += CR
            buf += CLEAR
            buf += UP

            buf += UP

            return bytes(buf)

        return Line(generate, LineOptions(with_next_line=False, manual_cleanup=cleanup))

    # ------------------------------------------------------------------
    # Render cycle
    # ------------------------------------------------------------------

    def draw(self) -> None:
        """Run one clear pass and one draw pass.

        Raises whatever the sink raises; the cycle stops at the failed write
        and the terminal may be left half drawn.
        """
        with self._lock:
            try:
                self._clear()
                self._draw()
            except Exception:
                logger.warning("Render cycle aborted", exc_info=True)
                raise

    def had_input(self) -> None:
        """Record that the remote terminal echoed input onto a new row."""
        with self._lock:
            self._cursor += 1
            self._off_the_bottom += 1
            self._need_to_clear_input = True

    def _clear(self) -> None:
        if self._cursor <= 0:
            # Nothing of ours is on screen yet
            self._cursor = 0
            self._off_the_bottom = 0
            return

        pushed = self._off_the_bottom
        if pushed:
            self._sink.write(CLEAR_ROW_AND_UP * pushed)
        self._off_the_bottom = 0
        self._cursor -= pushed

        for i in range(len(self._lines) - 1, -1, -1):
            if self._clear_balance[i] <= 0:
                continue

            opts = self._lines[i].options

            if opts.manual_cleanup is not None:
                self._sink.write(opts.manual_cleanup())
                self._clear_balance[i] -= 1
                continue

            if opts.with_next_line:
                self._sink.write(CLEAR_ROW_AND_UP)
                self._cursor -= 1
                self._clear_balance[i] -= 1

    def _draw(self) -> None:
        for i, line in enumerate(self._lines):
            if self._hidden[i]:
                continue

            content = line.next()

            self._sink.write(CLEAR)

            if content is not None and content != SPACER:
                self._sink.write(content)
                self._clear_balance[i] += 1

            if line.options.with_next_line:
                self._sink.write(NEWLINE)
                self._cursor += 1
