from typing import Annotated
from fastapi import Depends
from starlette.requests import HTTPConnection

from .rooms import RoomRegistry
from .services import SessionProtocol


def get_registry(connection: HTTPConnection) -> RoomRegistry:
    """Get the registry created by the application factory."""
    return connection.app.state.registry


def get_session_protocol(connection: HTTPConnection) -> SessionProtocol:
    """Get the session protocol bound to the application's registry."""
    return connection.app.state.protocol


# convenience type aliases for dependency injection
RegistryDep = Annotated[RoomRegistry, Depends(get_registry)]
SessionProtocolDep = Annotated[SessionProtocol, Depends(get_session_protocol)]
