"""ANSI control vocabulary understood by a raw remote terminal.

Every constant is a ``bytes`` value so it can be written straight to a socket
without an encoding step.
"""

from __future__ import annotations

Color = bytes

# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------

RESET: Color = b"\x1b[0m"
RED: Color = b"\x1b[31m"
ORANGE: Color = b"\x1b[38;5;208m"
YELLOW: Color = b"\x1b[33m"
GREEN: Color = b"\x1b[32m"
CYAN: Color = b"\x1b[36m"
BLUE: Color = b"\x1b[34m"
MAGENTA: Color = b"\x1b[35m"

# ---------------------------------------------------------------------------
# Cursor and row control
# ---------------------------------------------------------------------------

UP = b"\x1b[1A"
DOWN = b"\x1b[1B"
CLEAR = b"\x1b[2K"
CLEAR_TO_END = b"\x1b[0K"
SAVE = b"\x1b[s"
RESTORE = b"\x1b[u"
CR = b"\r"
NEWLINE = b"\n"

# Return to the start of the row, wipe it, then step up to the row above.
CLEAR_ROW_AND_UP = CR + CLEAR + UP


def to_bytes(text: str | bytes) -> bytes:
    """Encode *text* as UTF-8 unless it already is ``bytes``."""
    if isinstance(text, bytes):
        return text
    return text.encode("utf-8")


def colorize(text: str | bytes, color: Color) -> bytes:
    """Wrap *text* in *color* and a trailing reset."""
    return color + to_bytes(text) + RESET
