from dataclasses import dataclass
from dotenv import load_dotenv

import os

load_dotenv()


def _optional_int(name: str) -> int | None:
    value = os.getenv(name, "").strip()
    if not value:
        return None
    return int(value)


HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "4000"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

ROOM_CAPACITY = int(os.getenv("ROOM_CAPACITY", "2"))
# 0 or empty disables idle eviction, rooms then live until process exit
ROOM_TTL_SECONDS = _optional_int("ROOM_TTL_SECONDS") if "ROOM_TTL_SECONDS" in os.environ else 600
CLEANUP_INTERVAL_SECONDS = float(os.getenv("CLEANUP_INTERVAL_SECONDS", "60"))
ROOM_HISTORY_LIMIT = _optional_int("ROOM_HISTORY_LIMIT")
OUTBOX_SIZE = int(os.getenv("OUTBOX_SIZE", "256"))
SINGLE_ROOM_PER_IDENTITY = os.environ.get("SINGLE_ROOM_PER_IDENTITY", "true").lower() == "true"


@dataclass(frozen=True)
class Settings:
    room_capacity: int = ROOM_CAPACITY
    room_ttl_seconds: float | None = ROOM_TTL_SECONDS
    cleanup_interval_seconds: float = CLEANUP_INTERVAL_SECONDS
    room_history_limit: int | None = ROOM_HISTORY_LIMIT
    outbox_size: int = OUTBOX_SIZE
    single_room_per_identity: bool = SINGLE_ROOM_PER_IDENTITY

    @property
    def eviction_enabled(self) -> bool:
        return bool(self.room_ttl_seconds) and self.room_ttl_seconds > 0
