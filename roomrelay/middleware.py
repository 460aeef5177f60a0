import logging

from starlette.datastructures import MutableHeaders
from starlette.responses import Response

log = logging.getLogger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET,POST,OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, Accept, ngrok-skip-browser-warning",
}


def add_cors_middleware(app):
    """Answer every preflight with 204 and stamp CORS headers on every HTTP response."""

    async def middleware(scope, receive, send):
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        if scope["method"] == "OPTIONS":
            response = Response(status_code=204, headers=CORS_HEADERS)
            await response(scope, receive, send)
            return

        async def send_with_cors(message):
            if message["type"] == "http.response.start":
                headers = MutableHeaders(scope=message)
                for name, value in CORS_HEADERS.items():
                    headers[name] = value
            await send(message)

        await app(scope, receive, send_with_cors)

    return middleware


def add_logging_middleware(app):
    async def middleware(scope, receive, send):
        if scope["type"] in ("http", "websocket"):
            log.debug(f"Request: {scope.get('method', 'WS')} {scope['path']}")
        await app(scope, receive, send)

    return middleware
