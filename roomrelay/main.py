import logging
import random
import time
from collections.abc import Callable
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import Settings
from .errors import RoomCodesExhaustedError
from .middleware import add_cors_middleware, add_logging_middleware
from .rooms import RoomRegistry, run_cleanup_loop
from .routers import health_router, rooms_router, websocket_router
from .services import SessionProtocol

log = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    clock: Callable[[], float] = time.time,
    rng: random.Random | None = None,
) -> FastAPI:
    """Build the relay application with its own registry and session protocol."""
    settings = settings or Settings()
    registry = RoomRegistry(
        capacity=settings.room_capacity,
        ttl=settings.room_ttl_seconds,
        history_limit=settings.room_history_limit,
        single_room_per_identity=settings.single_room_per_identity,
        clock=clock,
        rng=rng,
    )
    protocol = SessionProtocol(registry, outbox_size=settings.outbox_size)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        async with anyio.create_task_group() as task_group:
            if settings.eviction_enabled:
                task_group.start_soon(
                    run_cleanup_loop, registry, settings.cleanup_interval_seconds
                )
            else:
                log.info("Room eviction disabled, rooms live until shutdown")
            yield
            task_group.cancel_scope.cancel()
        registry.close()
        log.info("shutting down")

    app = FastAPI(title="roomrelay", lifespan=lifespan)
    app.state.settings = settings
    app.state.registry = registry
    app.state.protocol = protocol

    app.add_middleware(add_cors_middleware)
    app.add_middleware(add_logging_middleware)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        # unknown paths and unsupported methods look the same to clients
        if exc.status_code in (status.HTTP_404_NOT_FOUND, status.HTTP_405_METHOD_NOT_ALLOWED):
            return JSONResponse({"error": "Not found"}, status_code=status.HTTP_404_NOT_FOUND)
        return JSONResponse({"error": exc.detail}, status_code=exc.status_code)

    @app.exception_handler(RoomCodesExhaustedError)
    async def codes_exhausted_handler(request: Request, exc: RoomCodesExhaustedError):
        log.error(str(exc))
        return JSONResponse(
            {"error": "No room codes available"},
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    app.include_router(rooms_router)
    app.include_router(health_router)
    app.include_router(websocket_router)
    return app


app = create_app()
