from enum import Enum

from ..models import ChatEvent, ImageEvent
from .connection import Connection


class RoomStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"


class Room:
    def __init__(
        self,
        code: str,
        capacity: int,
        created_at: float,
        history_limit: int | None = None,
    ):
        self.code = code
        self.capacity = capacity
        self.created_at = created_at
        self.last_active = created_at
        self.history_limit = history_limit
        self.status = RoomStatus.ACTIVE

        self._clients: dict[str, Connection] = {}
        self._messages: list[ChatEvent | ImageEvent] = []

    def __len__(self) -> int:
        return len(self._clients)

    def __contains__(self, connection: Connection) -> bool:
        return connection.id in self._clients

    def __repr__(self) -> str:
        return f"Room(code={self.code}, clients={len(self)}, status={self.status.value})"

    @property
    def is_active(self) -> bool:
        return self.status == RoomStatus.ACTIVE

    @property
    def is_full(self) -> bool:
        return len(self._clients) >= self.capacity

    @property
    def is_empty(self) -> bool:
        return not self._clients

    @property
    def clients(self) -> list[Connection]:
        """Stable snapshot of current members, safe to iterate while members leave."""
        return list(self._clients.values())

    @property
    def messages(self) -> list[ChatEvent | ImageEvent]:
        return list(self._messages)

    def touch(self, now: float) -> None:
        self.last_active = now

    def is_idle(self, now: float, ttl: float) -> bool:
        return self.is_empty and self.last_active < now - ttl

    def add_client(self, connection: Connection) -> None:
        self._clients[connection.id] = connection

    def remove_client(self, connection: Connection) -> bool:
        return self._clients.pop(connection.id, None) is not None

    def append(self, event: ChatEvent | ImageEvent) -> None:
        self._messages.append(event)
        if self.history_limit and len(self._messages) > self.history_limit:
            del self._messages[: len(self._messages) - self.history_limit]

    def close(self) -> None:
        self.status = RoomStatus.CLOSED
        for connection in self.clients:
            connection.close()
        self._clients.clear()
