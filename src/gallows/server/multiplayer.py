"""Connected-client registry with non-blocking broadcast."""

from __future__ import annotations

import asyncio
import enum
import itertools
import logging
import threading
from dataclasses import dataclass
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class MessageType(enum.Enum):
    ERROR = "error"
    NORMAL = "normal"


@dataclass
class Message:
    content: bytes
    source: object
    type: MessageType = MessageType.NORMAL


class Client:
    """One TCP connection plus its inbox of broadcast messages."""

    def __init__(
        self,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        server: Server,
        client_id: int,
        queue_size: int = 16,
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.id = client_id
        self.inbox: asyncio.Queue[Message] = asyncio.Queue(maxsize=queue_size)
        self._server = server
        self._closed = False

    @property
    def peer(self) -> str:
        peername = self.writer.get_extra_info("peername")
        if isinstance(peername, tuple) and len(peername) >= 2:
            return f"{peername[0]}:{peername[1]}"
        return str(peername)

    @property
    def closed(self) -> bool:
        return self._closed

    def create_message(self, content: bytes) -> Message:
        return Message(content=content, source=self, type=MessageType.NORMAL)

    def create_error_message(self, content: bytes) -> Message:
        return Message(content=content, source=self, type=MessageType.ERROR)

    async def read(self, n: int) -> bytes:
        return await self.reader.read(n)

    async def close(self) -> None:
        """Leave the server and close the connection. Safe to call twice."""
        if self._closed:
            return
        self._closed = True
        self._server.remove_client(self)
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except (ConnectionError, OSError) as e:
            logger.debug("Client %d closed with error: %s", self.id, e)

    def __repr__(self) -> str:
        return f"Client(id={self.id})"


class Server:
    """Registry of connected clients.

    The registry is guarded by a lock so turn checks made from inside a
    render cycle see a consistent list.
    """

    def __init__(self, queue_size: int = 16) -> None:
        self._clients: list[Client] = []
        self._lock = threading.Lock()
        self._ids = itertools.count()
        self._queue_size = queue_size

    def add_client(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> Client:
        with self._lock:
            client = Client(reader, writer, self, next(self._ids), self._queue_size)
            self._clients.append(client)
        logger.info("Client %d connected from %s", client.id, client.peer)
        return client

    def remove_client(self, client: Client) -> None:
        with self._lock:
            for i, c in enumerate(self._clients):
                if c is client:
                    del self._clients[i]
                    break
            else:
                return
        logger.info("Client %d disconnected", client.id)

    def clients(self) -> list[Client]:
        with self._lock:
            return list(self._clients)

    def do_with_clients(self, op: Callable[[list[Client]], T]) -> T:
        """Run *op* on the live client list while holding the registry lock."""
        with self._lock:
            return op(self._clients)

    def broadcast(self, message: Message) -> None:
        """Queue *message* for every client; full inboxes drop it."""
        for client in self.clients():
            try:
                client.inbox.put_nowait(message)
            except asyncio.QueueFull:
                logger.debug("Inbox of client %d is full, dropping message", client.id)
