import logging
import uuid

import anyio
from fastapi import APIRouter, Query, WebSocket, status

from ..dependencies import SessionProtocolDep
from ..errors import ProtocolError
from .websocket_handler import WebSocketHandler

log = logging.getLogger(__name__)
router = APIRouter()


@router.websocket("/ws")
async def websocket_endpoint(
        websocket: WebSocket,
        protocol: SessionProtocolDep,
        code: str | None = Query(None),
        user_id: str | None = Query(None, alias="userId"),
) -> None:
    """Room WebSocket endpoint, the room code and identity come from the query string"""
    if not code:
        log.info("Refusing WebSocket upgrade without a room code")
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    user_id = user_id or str(uuid.uuid4())
    log.info(
        f"WS upgrade code={code} userId={user_id[:8]} "
        f"origin={websocket.headers.get('origin')}"
    )
    await websocket.accept()

    try:
        connection = protocol.connect(websocket, code, user_id)
    except ProtocolError as e:
        await WebSocketHandler.reject(websocket, e)
        return

    try:
        # Reader and writer run side by side; whichever finishes first ends both
        async with anyio.create_task_group() as task_group:

            async def run_reader() -> None:
                await WebSocketHandler.read_frames(
                    websocket=websocket, connection=connection, protocol=protocol
                )
                task_group.cancel_scope.cancel()

            task_group.start_soon(run_reader)
            await connection.run_writer()
            task_group.cancel_scope.cancel()

    except Exception as e:
        log.error(f"WebSocket error for {connection!r}: {e}")
        raise

    finally:
        protocol.disconnect(connection)
        await WebSocketHandler.close(websocket)
