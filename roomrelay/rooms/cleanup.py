import logging

import anyio

from .registry import RoomRegistry

log = logging.getLogger(__name__)


async def run_cleanup_loop(registry: RoomRegistry, interval: float = 60) -> None:
    """Sweep idle rooms every ``interval`` seconds until cancelled."""
    log.info(f"Starting room cleanup every {interval}s (ttl={registry.ttl}s)")
    while True:
        await anyio.sleep(interval)
        try:
            registry.evict_idle()
        except Exception as e:
            log.exception(f"Room cleanup sweep failed: {e}")
