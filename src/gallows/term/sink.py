"""Byte sinks the renderer writes to.

A sink only has to accept ``write(data)`` and raise when the write cannot
happen. The renderer never buffers or retries.
"""

from __future__ import annotations

import asyncio
from typing import Protocol


class SinkClosedError(ConnectionError):
    """The peer is gone; nothing more can be written to this sink."""


class Sink(Protocol):
    """Ordered byte output. ``write`` raises on failure."""

    def write(self, data: bytes) -> object: ...


class StreamSink:
    """Sink over an ``asyncio.StreamWriter``.

    ``StreamWriter.write`` only buffers, so a closing transport is reported
    here synchronously instead of being silently dropped.
    """

    def __init__(self, writer: asyncio.StreamWriter) -> None:
        self._writer = writer

    def write(self, data: bytes) -> None:
        if self._writer.is_closing():
            raise SinkClosedError("connection is closing")
        self._writer.write(data)

    async def drain(self) -> None:
        await self._writer.drain()
