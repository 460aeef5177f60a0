import json

import anyio
from fastapi.websockets import WebSocketState

from roomrelay.rooms import Connection

START = 1_700_000_000.0


class FakeClock:
    def __init__(self, now: float = START) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWebSocket:
    """Stands in for an accepted WebSocket; only its state is consulted."""

    def __init__(self) -> None:
        self.client_state = WebSocketState.CONNECTED
        self.application_state = WebSocketState.CONNECTED

    def disconnect(self) -> None:
        self.client_state = WebSocketState.DISCONNECTED


def drain(connection: Connection) -> list[dict]:
    """Pop every frame queued for ``connection`` without running its writer."""
    frames = []
    while True:
        try:
            frames.append(json.loads(connection._inbox.receive_nowait()))
        except (anyio.WouldBlock, anyio.EndOfStream, anyio.ClosedResourceError):
            return frames
