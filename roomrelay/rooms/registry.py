import logging
import random
import threading
import time
from collections.abc import Callable

from ..errors import (
    AlreadyInAnotherRoomError,
    RoomCodesExhaustedError,
    RoomFullError,
    RoomNotFoundError,
)
from .connection import Connection
from .room import Room

log = logging.getLogger(__name__)

CODE_DIGITS = 4
CODE_SPACE = 10**CODE_DIGITS


class RoomRegistry:
    """Owns every active room and the connection association table.

    All state changes happen under one lock and never span an ``await``, so a
    join validates and inserts its connection in one step that an eviction
    sweep cannot interleave with.
    """

    def __init__(
        self,
        capacity: int = 2,
        ttl: float | None = 600,
        history_limit: int | None = None,
        single_room_per_identity: bool = True,
        clock: Callable[[], float] = time.time,
        rng: random.Random | None = None,
    ):
        if capacity < 1:
            raise ValueError(f"Room capacity must be positive, got {capacity}")
        self.capacity = capacity
        self.ttl = ttl if ttl and ttl > 0 else None
        self.history_limit = history_limit
        self.single_room_per_identity = single_room_per_identity
        self.clock = clock
        self.rng = rng or random.Random()

        self._lock = threading.RLock()
        self._rooms: dict[str, Room] = {}
        self._connections: dict[str, Connection] = {}

    def __len__(self) -> int:
        return len(self._rooms)

    def __contains__(self, code: str) -> bool:
        return code in self._rooms

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def codes(self) -> list[str]:
        with self._lock:
            return list(self._rooms)

    def _generate_code(self) -> str:
        return str(self.rng.randrange(CODE_SPACE)).zfill(CODE_DIGITS)

    def create_room(self) -> str:
        with self._lock:
            if len(self._rooms) >= CODE_SPACE:
                raise RoomCodesExhaustedError(len(self._rooms))

            code = self._generate_code()
            while code in self._rooms:
                code = self._generate_code()

            self._rooms[code] = Room(
                code=code,
                capacity=self.capacity,
                created_at=self.clock(),
                history_limit=self.history_limit,
            )
        log.info(f"Created room {code}")
        return code

    def validate(self, code: str) -> bool:
        room = self._rooms.get(code)
        return room is not None and room.is_active

    def get(self, code: str) -> Room | None:
        return self._rooms.get(code)

    def find_connection(self, connection_id: str) -> Connection | None:
        return self._connections.get(connection_id)

    def _affiliated_room(self, user_id: str) -> str | None:
        for connection in self._connections.values():
            if connection.user_id == user_id:
                return connection.room_code
        return None

    def join(self, connection: Connection) -> Room:
        """Validate the connection's room and insert it, or raise a ProtocolError."""
        with self._lock:
            room = self._rooms.get(connection.room_code)
            if room is None or not room.is_active:
                raise RoomNotFoundError()
            if room.is_full:
                raise RoomFullError()
            if self.single_room_per_identity:
                current = self._affiliated_room(connection.user_id)
                if current is not None and current != room.code:
                    raise AlreadyInAnotherRoomError()

            room.add_client(connection)
            room.touch(self.clock())
            self._connections[connection.id] = connection

        log.info(f"{connection!r} joined room {room.code} ({len(room)}/{room.capacity})")
        return room

    def leave(self, connection: Connection) -> Room | None:
        """Detach a connection from its room. Safe to call more than once."""
        with self._lock:
            if self._connections.pop(connection.id, None) is None:
                return None
            room = self._rooms.get(connection.room_code)
            if room is None or not room.remove_client(connection):
                return None
            room.touch(self.clock())

        log.info(f"{connection!r} left room {room.code} ({len(room)}/{room.capacity})")
        return room

    def evict_idle(self, now: float | None = None, ttl: float | None = None) -> list[str]:
        """Remove rooms that are empty and have been idle for longer than ``ttl``."""
        ttl = ttl if ttl is not None else self.ttl
        if not ttl:
            return []

        with self._lock:
            now = now if now is not None else self.clock()
            stale = [code for code, room in self._rooms.items() if room.is_idle(now, ttl)]
            for code in stale:
                self._rooms.pop(code).close()

        if stale:
            log.info(f"Evicted {len(stale)} idle room(s): {', '.join(stale)}")
        return stale

    def close(self) -> None:
        with self._lock:
            for room in self._rooms.values():
                room.close()
            self._rooms.clear()
            self._connections.clear()
        log.info("Room registry closed")
