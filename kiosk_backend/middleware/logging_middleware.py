"""
Logging Middleware - one access line per request

Only method, path, status and duration are logged. Query strings can carry
the CRM api_key and request bodies carry visitor contact details, so
neither is ever written out.
"""
import time
from typing import Callable

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

from kiosk_backend.utils.logger import get_logger

logger = get_logger(__name__)

QUIET_PATHS = {"/api/health"}


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs completed and failed requests and sets X-Process-Time"""

    async def dispatch(self, request: Request, call_next: Callable):
        if request.url.path in QUIET_PATHS:
            return await call_next(request)

        start_time = time.time()
        line = f"{request.method} {request.url.path}"

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"✗ {line} ERROR ({elapsed_ms(start_time)}ms): {e}", exc_info=True)
            raise

        duration_ms = elapsed_ms(start_time)
        log = logger.warning if response.status_code >= 400 else logger.info
        log(f"← {line} {response.status_code} ({duration_ms}ms)")
        response.headers["X-Process-Time"] = str(duration_ms)
        return response


def elapsed_ms(start_time: float) -> int:
    return int((time.time() - start_time) * 1000)
