"""roomrelay: short-lived chat rooms with broadcast and history replay."""

from .config import Settings
from .main import create_app
from .rooms import Connection, Room, RoomRegistry
from .services import Broadcaster, SessionProtocol

__all__ = [
    "Settings",
    "create_app",
    "Connection",
    "Room",
    "RoomRegistry",
    "Broadcaster",
    "SessionProtocol",
]
