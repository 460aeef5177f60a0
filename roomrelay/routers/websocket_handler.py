import logging
from fastapi import WebSocket
from fastapi.websockets import WebSocketDisconnect, WebSocketState

from ..errors import ProtocolError
from ..models import ErrorNotice
from ..rooms import Connection
from ..services import SessionProtocol

log = logging.getLogger(__name__)


class WebSocketHandler:
    """Moves frames between a WebSocket and the session protocol"""

    @staticmethod
    async def read_frames(
            websocket: WebSocket,
            connection: Connection,
            protocol: SessionProtocol,
    ) -> None:
        """Feed inbound frames to the protocol until the client disconnects"""
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                log.info(f"{connection!r} disconnected (code={message.get('code')})")
                return

            raw = message.get("text")
            if raw is None:
                raw = message.get("bytes")
            if raw is None:
                continue
            protocol.handle_frame(connection, raw)

    @staticmethod
    async def reject(websocket: WebSocket, error: ProtocolError) -> None:
        """Report a join failure to the client and close the socket"""
        log.info(f"Rejecting connection: {error.message}")
        try:
            await websocket.send_text(ErrorNotice(message=error.message).to_json())
        except (WebSocketDisconnect, RuntimeError) as e:
            log.info(f"Could not deliver rejection: {e!r}")
        await WebSocketHandler.close(websocket)

    @staticmethod
    async def close(websocket: WebSocket) -> None:
        if (
            websocket.client_state != WebSocketState.CONNECTED
            or websocket.application_state != WebSocketState.CONNECTED
        ):
            return
        try:
            await websocket.close()
        except RuntimeError as e:
            log.debug(f"Close after disconnect ignored: {e}")
