import logging

from fastapi import WebSocket
from pydantic import ValidationError

from ..errors import NotAMemberError, ProtocolError
from ..models import (
    ChatEvent,
    ChatRequest,
    ErrorNotice,
    History,
    ImageEvent,
    ImageRequest,
    Joined,
    JoinRequest,
    SystemNotice,
    parse_inbound,
)
from ..rooms import Connection, Room, RoomRegistry
from .broadcaster import Broadcaster

log = logging.getLogger(__name__)


class SessionProtocol:
    """Message-level rules for a connection: join, chat, image and disconnect.

    Every handler is synchronous and runs under the registry lock, so messages
    in a room are broadcast in the order the server accepted them.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        broadcaster: Broadcaster | None = None,
        outbox_size: int = 256,
    ):
        self.registry = registry
        self.broadcaster = broadcaster or Broadcaster()
        self.outbox_size = outbox_size

    def now_ms(self) -> int:
        return int(self.registry.clock() * 1000)

    def connect(self, websocket: WebSocket, code: str, user_id: str) -> Connection:
        """Register a new connection in room ``code``.

        Raises a ProtocolError when the room does not exist, is full or the
        identity already sits in another room.
        """
        connection = Connection(websocket, code, user_id, outbox_size=self.outbox_size)

        with self.registry.lock:
            try:
                room = self.registry.join(connection)
            except ProtocolError:
                connection.discard()
                raise
            self.broadcaster.send(connection, Joined(code=room.code))
            history = room.messages
            if history:
                self.broadcaster.send(connection, History(messages=history))
            self.broadcaster.broadcast(
                room,
                SystemNotice(
                    message=f"User {connection.display_name} joined", ts=self.now_ms()
                ),
            )

        return connection

    def handle_frame(self, connection: Connection, raw: str | bytes) -> None:
        """Route one inbound frame. Frames that do not parse are dropped silently."""
        try:
            message = parse_inbound(raw)
        except ValidationError:
            log.debug(f"Dropping malformed frame from {connection!r}")
            return

        try:
            if isinstance(message, JoinRequest):
                self._handle_join(connection, message)
            elif isinstance(message, ChatRequest):
                self._handle_chat(connection, message)
            elif isinstance(message, ImageRequest):
                self._handle_image(connection, message)
        except ProtocolError as e:
            log.info(f"Protocol error from {connection!r}: {e.message}")
            self.broadcaster.send(connection, ErrorNotice(message=e.message))
            if e.terminates:
                connection.close()

    def disconnect(self, connection: Connection) -> None:
        with self.registry.lock:
            room = self.registry.leave(connection)
            connection.close()
            if room is not None:
                self.broadcaster.broadcast(
                    room,
                    SystemNotice(
                        message=f"User {connection.display_name} left", ts=self.now_ms()
                    ),
                )

    def _handle_join(self, connection: Connection, message: JoinRequest) -> None:
        log.info(f"Redundant join from {connection!r} acknowledged (code={message.code})")

    def _handle_chat(self, connection: Connection, message: ChatRequest) -> None:
        with self.registry.lock:
            room = self._member_room(connection, message.code)
            event = ChatEvent(
                code=room.code,
                user_id=connection.user_id,
                message=message.message,
                ts=self.now_ms(),
            )
            self._accept(room, event)
        log.info(f"[{room.code}] {connection.display_name}: {message.message[:80]}")

    def _handle_image(self, connection: Connection, message: ImageRequest) -> None:
        with self.registry.lock:
            room = self._member_room(connection, message.code)
            event = ImageEvent(
                code=room.code,
                user_id=connection.user_id,
                image=message.image,
                ts=self.now_ms(),
            )
            self._accept(room, event)
        log.info(f"[{room.code}] {connection.display_name}: image ({len(message.image)} chars)")

    def _member_room(self, connection: Connection, code: str | None) -> Room:
        if code is not None and code != connection.room_code:
            raise NotAMemberError()
        room = self.registry.get(connection.room_code)
        if room is None or connection not in room:
            raise NotAMemberError()
        return room

    def _accept(self, room: Room, event: ChatEvent | ImageEvent) -> None:
        room.touch(self.registry.clock())
        room.append(event)
        self.broadcaster.broadcast(room, event)
