"""Shared fixtures for roomrelay tests."""

import random
from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from roomrelay import Settings, create_app
from roomrelay.rooms import RoomRegistry
from roomrelay.services import SessionProtocol

from .helpers import FakeClock


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry(clock: FakeClock) -> RoomRegistry:
    return RoomRegistry(capacity=2, ttl=600, clock=clock, rng=random.Random(1234))


@pytest.fixture
def protocol(registry: RoomRegistry) -> SessionProtocol:
    return SessionProtocol(registry, outbox_size=16)


@pytest.fixture
def app(clock: FakeClock) -> FastAPI:
    settings = Settings(
        room_capacity=2,
        room_ttl_seconds=600,
        cleanup_interval_seconds=60,
        room_history_limit=None,
        outbox_size=64,
        single_room_per_identity=True,
    )
    return create_app(settings, clock=clock, rng=random.Random(4821))


@pytest.fixture
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as client:
        yield client
