"""Per-connection driver: one renderer, one redraw loop, one input loop."""

from __future__ import annotations

import asyncio
import logging

from gallows.game.hangman import GuessError
from gallows.server.config import Config
from gallows.server.game import MultiplayerHangman
from gallows.server.multiplayer import Client, Message
from gallows.term import (
    BLUE,
    GREEN,
    ORANGE,
    RED,
    Renderer,
    StreamSink,
    animated,
    animated_line_from_generator,
    colorize,
    line_from_generator,
)

logger = logging.getLogger(__name__)

PALETTE = (BLUE, GREEN, RED, ORANGE)

YOUR_TURN = b"It's your turn"
NOT_YOUR_TURN = b"It is NOT your turn"
GAME_OVER = b"Game is over"


class Session:
    """Drives the screen of one connected client.

    Lines, top to bottom: game state, whose turn it is, game over banner
    (hidden until the game ends), pending error (hidden until a guess is
    rejected), and the input prompt.
    """

    def __init__(self, client: Client, game: MultiplayerHangman, config: Config) -> None:
        self.client = client
        self.game = game
        self.config = config

        self.sink = StreamSink(client.writer)
        self.renderer = Renderer(self.sink)

        self._error: bytes | None = None
        self._your_turn = animated(lambda: YOUR_TURN, PALETTE)

        self.state_line = line_from_generator(self._render_state)
        self.turn_line = line_from_generator(self._render_turn)
        self.game_over_line = animated_line_from_generator(self._render_game_over, PALETTE)
        self.error_line = line_from_generator(self._render_error)
        self.input_line = self.renderer.create_input_line(config.prompt)

        for line in (
            self.state_line,
            self.turn_line,
            self.game_over_line,
            self.error_line,
            self.input_line,
        ):
            self.renderer.add_line(line)

        self.renderer.hide_line(self.error_line)
        self.renderer.hide_line(self.game_over_line)

    # -- line content ---------------------------------------------------

    def _render_state(self) -> bytes:
        return self.game.current_state.encode("utf-8")

    def _render_turn(self) -> bytes | None:
        if not self.game.is_turn_of(self.client):
            return colorize(NOT_YOUR_TURN, RED)
        return self._your_turn()

    def _render_game_over(self) -> bytes | None:
        if self.game.is_over():
            return GAME_OVER
        return None

    def _render_error(self) -> bytes | None:
        if self._error is None:
            return None
        return colorize(self._error, RED)

    @property
    def error(self) -> bytes | None:
        return self._error

    # -- events ---------------------------------------------------------

    def handle_input(self, data: bytes) -> None:
        """React to raw bytes typed by the client."""
        self._error = None
        self.renderer.hide_line(self.error_line)

        self.renderer.had_input()

        if self.game.is_over() or not self.game.is_turn_of(self.client):
            return

        if data:
            try:
                self.game.guess(data[0])
            except GuessError as e:
                logger.debug("Client %d guess rejected: %s", self.client.id, e)
                self._error = str(e).encode("utf-8")
                self.renderer.show_line(self.error_line)

    def handle_message(self, message: Message) -> None:
        """React to a broadcast; only the end of the game changes the layout."""
        if self.game.is_over():
            self.renderer.hide_line(self.turn_line)
            self.renderer.show_line(self.game_over_line)
            self.renderer.hide_line(self.error_line)

    # -- loops ----------------------------------------------------------

    async def _redraw_loop(self) -> None:
        while True:
            try:
                self.renderer.draw()
                await self.sink.drain()
            except (ConnectionError, OSError) as e:
                logger.info("Client %d: stopping redraw: %s", self.client.id, e)
                return
            await asyncio.sleep(self.config.redraw_interval)

    async def _inbox_loop(self) -> None:
        while True:
            message = await self.client.inbox.get()
            self.handle_message(message)

    async def _read_loop(self) -> None:
        while True:
            try:
                data = await self.client.read(self.config.read_size)
            except (ConnectionError, OSError) as e:
                logger.info("Client %d: read failed: %s", self.client.id, e)
                return
            if not data:
                return
            self.handle_input(data)

    async def run(self) -> None:
        """Run until the client disconnects or can no longer be drawn to."""
        tasks = [
            asyncio.create_task(self._redraw_loop()),
            asyncio.create_task(self._inbox_loop()),
            asyncio.create_task(self._read_loop()),
        ]
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
        finally:
            for task in tasks:
                task.cancel()
            results = await asyncio.gather(*tasks, return_exceptions=True)
            await self.client.close()

        for result in results:
            if isinstance(result, Exception):
                logger.error(
                    "Client %d session failed", self.client.id, exc_info=result
                )
