"""
Body Size Middleware - rejects oversized request bodies

Declared Content-Length is checked up front; bodies without one (chunked
uploads) are counted as they are read and cut off at the limit.
"""
from starlette.datastructures import Headers
from starlette.responses import JSONResponse
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from kiosk_backend.utils.logger import get_logger

logger = get_logger(__name__)


class BodyTooLarge(Exception):
    """Raised from receive() once the streamed body passes the limit"""


class BodySizeLimitMiddleware:
    """Answers 413 when a request body exceeds max_bytes"""

    def __init__(self, app: ASGIApp, max_bytes: int):
        self.app = app
        self.max_bytes = max_bytes

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        content_length = Headers(scope=scope).get("content-length")
        if content_length and content_length.isdigit() and int(content_length) > self.max_bytes:
            await self._reject(scope, receive, send, f"declared {content_length} bytes")
            return

        received = 0

        async def limited_receive() -> Message:
            nonlocal received
            message = await receive()
            if message["type"] == "http.request":
                received += len(message.get("body", b""))
                if received > self.max_bytes:
                    raise BodyTooLarge()
            return message

        try:
            await self.app(scope, limited_receive, send)
        except BodyTooLarge:
            await self._reject(scope, receive, send, f"streamed more than {self.max_bytes} bytes")

    async def _reject(self, scope: Scope, receive: Receive, send: Send, reason: str) -> None:
        logger.warning(f"Rejected {scope['method']} {scope['path']}: {reason}")
        response = JSONResponse(
            status_code=413,
            content={"ok": False, "error": "Request body too large"}
        )
        await response(scope, receive, send)
