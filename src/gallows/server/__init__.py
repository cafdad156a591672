"""gallows.server: multiplayer hangman served over raw TCP."""

from gallows.server.app import GallowsServer
from gallows.server.config import Config
from gallows.server.game import MultiplayerHangman
from gallows.server.multiplayer import Client, Message, MessageType, Server
from gallows.server.session import Session

__all__ = [
    "Config",
    "GallowsServer",
    "MultiplayerHangman",
    "Client",
    "Message",
    "MessageType",
    "Server",
    "Session",
]
