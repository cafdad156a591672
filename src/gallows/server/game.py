"""Hangman shared by every connected client, with turn taking."""

from __future__ import annotations

import logging
import threading

from gallows.game.hangman import Hangman
from gallows.server.multiplayer import Client, Message, MessageType, Server

logger = logging.getLogger(__name__)


class MultiplayerHangman:
    """Serializes guesses and rotates turns over the connected clients."""

    def __init__(self, hangman: Hangman, server: Server) -> None:
        self.hangman = hangman
        self.server = server
        self._guess_lock = threading.Lock()
        self._turn_count = 0

    @property
    def turn_count(self) -> int:
        return self._turn_count

    @property
    def current_state(self) -> str:
        return self.hangman.current_state

    def is_over(self) -> bool:
        return self.hangman.is_over()

    def has_won(self) -> bool:
        return self.hangman.has_won()

    def guess(self, guess: int | str | bytes) -> str:
        """Apply a guess, broadcast the new state and pass the turn on.

        Rejected guesses raise ``GuessError`` and keep the turn.
        """
        with self._guess_lock:
            next_state = self.hangman.guess(guess)
            self.server.broadcast(
                Message(
                    content=(next_state + "\n").encode("utf-8"),
                    source=self,
                    type=MessageType.NORMAL,
                )
            )
            self._turn_count += 1
            if self.hangman.is_over():
                logger.info(
                    "Game over (%s), the word was %r",
                    "won" if self.hangman.has_won() else "lost",
                    self.hangman.word,
                )
            return next_state

    def is_turn_of(self, client: Client) -> bool:
        def check(clients: list[Client]) -> bool:
            if not clients:
                return False
            return clients[self._turn_count % len(clients)] is client

        return self.server.do_with_clients(check)
