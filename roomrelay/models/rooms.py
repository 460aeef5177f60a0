from pydantic import BaseModel


class RoomCreated(BaseModel):
    code: str


class RoomValidity(BaseModel):
    valid: bool


class Health(BaseModel):
    status: str
    rooms: int
