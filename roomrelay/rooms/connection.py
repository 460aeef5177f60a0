import logging
import uuid

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from fastapi import WebSocket
from fastapi.websockets import WebSocketDisconnect, WebSocketState

log = logging.getLogger(__name__)


class Connection:
    """One joined participant.

    Outbound frames are queued with :meth:`deliver` and written to the WebSocket by
    :meth:`run_writer`, so fan-out never waits on the network.
    """

    def __init__(
        self,
        websocket: WebSocket,
        room_code: str,
        user_id: str,
        outbox_size: int = 256,
    ):
        self.id = uuid.uuid4().hex
        self.websocket = websocket
        self.room_code = room_code
        self.user_id = user_id
        self._closed = False

        send, receive = anyio.create_memory_object_stream[str](max_buffer_size=outbox_size)
        self._outbox: MemoryObjectSendStream[str] = send
        self._inbox: MemoryObjectReceiveStream[str] = receive

    def __repr__(self) -> str:
        return f"Connection(id={self.id[:8]}, room={self.room_code}, user={self.user_id[:8]})"

    @property
    def display_name(self) -> str:
        return self.user_id[:4]

    @property
    def is_open(self) -> bool:
        if self._closed:
            return False
        return (
            self.websocket.client_state == WebSocketState.CONNECTED
            and self.websocket.application_state == WebSocketState.CONNECTED
        )

    def deliver(self, text: str) -> bool:
        """Queue a serialized frame. Returns False when the frame was not queued."""
        if not self.is_open:
            return False
        try:
            self._outbox.send_nowait(text)
        except anyio.WouldBlock:
            log.warning(f"Outbox full for {self!r}, closing connection")
            self.close()
            return False
        except (anyio.ClosedResourceError, anyio.BrokenResourceError):
            return False
        return True

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._outbox.close()

    def discard(self) -> None:
        """Release a connection whose writer never started."""
        self.close()
        self._inbox.close()

    async def run_writer(self) -> None:
        """Drain the outbox into the WebSocket until the connection is closed."""
        async with self._inbox:
            async for text in self._inbox:
                if self.websocket.client_state != WebSocketState.CONNECTED:
                    break
                try:
                    await self.websocket.send_text(text)
                except (WebSocketDisconnect, RuntimeError, OSError) as e:
                    log.info(f"Write to {self!r} failed: {e!r}")
                    break
        self.close()
