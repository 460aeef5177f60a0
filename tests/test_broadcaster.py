"""Tests for Broadcaster fan-out."""

from roomrelay.models import SystemNotice
from roomrelay.rooms import Connection, Room
from roomrelay.services import Broadcaster

from .helpers import FakeWebSocket, drain


def make_room(*connections: Connection) -> Room:
    room = Room(code="4821", capacity=10, created_at=0.0)
    for connection in connections:
        room.add_client(connection)
    return room


def make_connection(user_id: str, outbox_size: int = 8) -> Connection:
    return Connection(FakeWebSocket(), "4821", user_id, outbox_size=outbox_size)


NOTICE = SystemNotice(message="hello", ts=1)


class TestBroadcast:
    def test_reaches_every_open_member(self) -> None:
        members = [make_connection(f"user-{i}") for i in range(3)]
        room = make_room(*members)

        assert Broadcaster().broadcast(room, NOTICE) == 3
        assert len(room) == 3
        for member in members:
            assert drain(member) == [{"type": "system", "message": "hello", "ts": 1}]

    def test_skips_closed_and_disconnected_members(self) -> None:
        open_member = make_connection("open")
        closed_member = make_connection("closed")
        gone_member = make_connection("gone")
        closed_member.close()
        gone_member.websocket.disconnect()
        room = make_room(open_member, closed_member, gone_member)

        assert Broadcaster().broadcast(room, NOTICE) == 1
        assert drain(closed_member) == []
        assert drain(gone_member) == []

    def test_overflowing_member_is_closed_without_affecting_others(self) -> None:
        slow = make_connection("slow", outbox_size=1)
        fast = make_connection("fast")
        room = make_room(slow, fast)
        broadcaster = Broadcaster()

        assert broadcaster.broadcast(room, NOTICE) == 2
        assert broadcaster.broadcast(room, NOTICE) == 1

        assert not slow.is_open
        assert len(drain(fast)) == 2
        assert broadcaster.broadcast(room, NOTICE) == 1

    def test_member_leaving_mid_broadcast(self) -> None:
        room = make_room()
        second = make_connection("second")

        class LeavingConnection(Connection):
            def deliver(self, text: str) -> bool:
                room.remove_client(second)
                return super().deliver(text)

        room.add_client(LeavingConnection(FakeWebSocket(), "4821", "leaver"))
        room.add_client(make_connection("first"))
        room.add_client(second)

        assert Broadcaster().broadcast(room, NOTICE) == 3

    def test_empty_room(self) -> None:
        assert Broadcaster().broadcast(make_room(), NOTICE) == 0
