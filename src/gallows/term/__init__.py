"""gallows.term: in-place multi-line terminal redraw over a raw byte stream."""

from gallows.term.animate import Animated, animated, animated_line_from_generator
from gallows.term.ansi import (
    BLUE,
    CYAN,
    GREEN,
    MAGENTA,
    ORANGE,
    RED,
    RESET,
    YELLOW,
    Color,
    colorize,
)
from gallows.term.line import (
    SPACER,
    Line,
    LineOptions,
    Producer,
    inline_from_generator,
    line_from_generator,
    line_from_generator_and_options,
    spacer,
)
from gallows.term.renderer import Renderer
from gallows.term.sink import Sink, SinkClosedError, StreamSink

__all__ = [
    # Colors
    "Color",
    "RESET",
    "RED",
    "ORANGE",
    "YELLOW",
    "GREEN",
    "CYAN",
    "BLUE",
    "MAGENTA",
    "colorize",
    # Lines
    "Line",
    "LineOptions",
    "Producer",
    "SPACER",
    "line_from_generator",
    "inline_from_generator",
    "line_from_generator_and_options",
    "spacer",
    # Animation
    "Animated",
    "animated",
    "animated_line_from_generator",
    # Rendering
    "Renderer",
    # Sinks
    "Sink",
    "StreamSink",
    "SinkClosedError",
]
