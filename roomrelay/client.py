"""Client helpers for talking to a relay server.

Example:
    code = await create_room("http://localhost:4000")
    async with RoomClient("http://localhost:4000", code, user_id="u1") as client:
        await client.send_chat("hi")
        async for frame in client:
            print(frame)
"""

import json
import logging
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from types import TracebackType
from typing import Any

import httpx
import websockets

log = logging.getLogger(__name__)

WS_SCHEMES = {"http": "ws", "https": "wss", "ws": "ws", "wss": "wss"}


def ws_url(room_server: str, code: str, user_id: str) -> str:
    """Build the WebSocket URL for ``code`` on the server at ``room_server``."""
    base = httpx.URL(room_server)
    scheme = WS_SCHEMES.get(base.scheme)
    if scheme is None:
        raise ValueError(f"Unsupported room server scheme: {base.scheme!r}")
    return str(base.copy_with(scheme=scheme, path="/ws", params={"code": code, "userId": user_id}))


async def create_room(room_server: str, client: httpx.AsyncClient | None = None) -> str:
    """Ask the server for a new room and return its code."""
    async with _http_client(room_server, client) as http:
        response = await http.post("/api/rooms/create")
        response.raise_for_status()
        return response.json()["code"]


async def validate_room(
    room_server: str, code: str, client: httpx.AsyncClient | None = None
) -> bool:
    async with _http_client(room_server, client) as http:
        response = await http.get(f"/api/rooms/{code}")
        if response.status_code == httpx.codes.NOT_FOUND:
            return False
        response.raise_for_status()
        return bool(response.json()["valid"])


@asynccontextmanager
async def _http_client(
    room_server: str, client: httpx.AsyncClient | None
) -> AsyncIterator[httpx.AsyncClient]:
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(base_url=room_server, timeout=10) as http:
        yield http


class RoomClient:
    """A single participant connection to a room.

    Frames are JSON objects; :meth:`receive` and async iteration yield them decoded.
    """

    def __init__(self, room_server: str, code: str, user_id: str | None = None) -> None:
        self.room_server = room_server
        self.code = code
        self.user_id = user_id or str(uuid.uuid4())
        self._websocket: Any = None

    @property
    def url(self) -> str:
        return ws_url(self.room_server, self.code, self.user_id)

    async def connect(self) -> None:
        if self._websocket is not None:
            return
        log.info(f"Connecting to room {self.code} as {self.user_id[:8]}")
        self._websocket = await websockets.connect(self.url)
        # the server treats this as a no-op, it only helps clients that retry
        await self._send({"type": "join", "code": self.code, "userId": self.user_id})

    async def send_chat(self, message: str) -> None:
        if not message:
            raise ValueError("Chat message must not be empty")
        await self._send({"type": "chat", "code": self.code, "message": message})

    async def send_image(self, image: str) -> None:
        """Push an image, either raw base64 or a ``data:`` URL."""
        if not image:
            raise ValueError("Image payload must not be empty")
        await self._send({"type": "image", "code": self.code, "image": image})

    async def receive(self) -> dict[str, Any]:
        if self._websocket is None:
            raise RuntimeError("RoomClient is not connected")
        return json.loads(await self._websocket.recv())

    async def close(self) -> None:
        if self._websocket is not None:
            await self._websocket.close()
            self._websocket = None

    async def _send(self, payload: dict[str, Any]) -> None:
        if self._websocket is None:
            raise RuntimeError("RoomClient is not connected")
        await self._websocket.send(json.dumps(payload))

    def __aiter__(self) -> "RoomClient":
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return await self.receive()
        except websockets.exceptions.ConnectionClosed:
            raise StopAsyncIteration from None

    async def __aenter__(self) -> "RoomClient":
        await self.connect()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        await self.close()
