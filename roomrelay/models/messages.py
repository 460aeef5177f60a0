from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr, TypeAdapter
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


# Inbound frames sent by clients after the handshake


class JoinRequest(WireModel):
    type: Literal["join"]
    code: StrictStr | None = None
    user_id: StrictStr | None = None


class ChatRequest(WireModel):
    type: Literal["chat"]
    message: StrictStr = Field(min_length=1)
    code: StrictStr | None = None
    user_id: StrictStr | None = None


class ImageRequest(WireModel):
    type: Literal["image"]
    image: StrictStr = Field(min_length=1)
    code: StrictStr | None = None
    user_id: StrictStr | None = None


InboundMessage = Annotated[
    Union[JoinRequest, ChatRequest, ImageRequest], Field(discriminator="type")
]
inbound_adapter: TypeAdapter[InboundMessage] = TypeAdapter(InboundMessage)


def parse_inbound(raw: str | bytes) -> JoinRequest | ChatRequest | ImageRequest:
    """Parse one client frame, raising ``pydantic.ValidationError`` when it is not a known message."""
    return inbound_adapter.validate_json(raw)


# Outbound frames produced by the server


class ChatEvent(WireModel):
    type: Literal["chat"] = "chat"
    code: str
    user_id: str
    message: str
    ts: int


class ImageEvent(WireModel):
    type: Literal["image"] = "image"
    code: str
    user_id: str
    image: str
    ts: int


RoomEvent = Annotated[Union[ChatEvent, ImageEvent], Field(discriminator="type")]


class Joined(WireModel):
    type: Literal["joined"] = "joined"
    code: str


class History(WireModel):
    type: Literal["history"] = "history"
    messages: list[RoomEvent]


class SystemNotice(WireModel):
    type: Literal["system"] = "system"
    message: str
    ts: int


class ErrorNotice(WireModel):
    type: Literal["error"] = "error"
    message: str


OutboundMessage = Joined | History | SystemNotice | ErrorNotice | ChatEvent | ImageEvent
