"""TCP server wiring: accept connections and hand each one a session."""

from __future__ import annotations

import asyncio
import logging

from gallows.game.hangman import Hangman
from gallows.server.config import Config
from gallows.server.game import MultiplayerHangman
from gallows.server.multiplayer import Message, MessageType, Server
from gallows.server.session import Session

logger = logging.getLogger(__name__)


class GallowsServer:
    """One shared game served to every client that connects."""

    def __init__(self, config: Config, hangman: Hangman | None = None) -> None:
        self.config = config
        self.server = Server(queue_size=config.queue_size)
        if hangman is None:
            hangman = Hangman(words=config.words, max_misses=config.max_misses)
        self.game = MultiplayerHangman(hangman, self.server)

    async def handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        client = self.server.add_client(reader, writer)
        client.inbox.put_nowait(
            Message(
                content=(self.game.current_state + "\n").encode("utf-8"),
                source=self.game,
                type=MessageType.NORMAL,
            )
        )
        await Session(client, self.game, self.config).run()

    async def start(self) -> asyncio.Server:
        return await asyncio.start_server(
            self.handle_connection, self.config.host, self.config.port
        )

    async def serve(self) -> None:
        server = await self.start()
        addresses = ", ".join(str(sock.getsockname()) for sock in server.sockets)
        logger.info("Serving hangman on %s", addresses)
        async with server:
            await server.serve_forever()
