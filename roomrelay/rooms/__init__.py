from .cleanup import run_cleanup_loop
from .connection import Connection
from .registry import RoomRegistry
from .room import Room, RoomStatus

__all__ = ["Connection", "Room", "RoomRegistry", "RoomStatus", "run_cleanup_loop"]
