import re

from fastapi import APIRouter, HTTPException, status

from ..dependencies import RegistryDep
from ..models import Health, RoomCreated, RoomValidity

ROOM_CODE = re.compile(r"\d{4}")

router = APIRouter(prefix="/api/rooms")
health_router = APIRouter()


@router.post("/create", response_model=RoomCreated)
async def create_room(registry: RegistryDep):
    return RoomCreated(code=registry.create_room())


@router.get("/{code}", response_model=RoomValidity)
async def get_room(code: str, registry: RegistryDep):
    if not ROOM_CODE.fullmatch(code):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not found")
    return RoomValidity(valid=registry.validate(code))


@health_router.get("/healthz", response_model=Health)
async def healthz(registry: RegistryDep):
    return Health(status="ok", rooms=len(registry))
