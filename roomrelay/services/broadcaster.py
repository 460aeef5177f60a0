import logging

from ..models import OutboundMessage
from ..rooms import Connection, Room

log = logging.getLogger(__name__)


class Broadcaster:
    def broadcast(self, room: Room, message: OutboundMessage) -> int:
        """Queue ``message`` for every open member of ``room``.

        Returns the number of connections the message was queued for. Members that
        are closing are skipped.
        """
        message_json = message.to_json()
        delivered = 0

        for connection in room.clients:
            if not connection.is_open:
                continue
            try:
                if connection.deliver(message_json):
                    delivered += 1
            except Exception as e:
                log.warning(f"Dropping {message.type} for {connection!r}: {e!r}")

        return delivered

    def send(self, connection: Connection, message: OutboundMessage) -> bool:
        return connection.deliver(message.to_json())
