from .messages import (
    ChatEvent,
    ChatRequest,
    ErrorNotice,
    History,
    ImageEvent,
    ImageRequest,
    Joined,
    JoinRequest,
    OutboundMessage,
    SystemNotice,
    parse_inbound,
)
from .rooms import Health, RoomCreated, RoomValidity

__all__ = [
    "ChatEvent",
    "ChatRequest",
    "ErrorNotice",
    "History",
    "ImageEvent",
    "ImageRequest",
    "Joined",
    "JoinRequest",
    "OutboundMessage",
    "SystemNotice",
    "parse_inbound",
    "Health",
    "RoomCreated",
    "RoomValidity",
]
