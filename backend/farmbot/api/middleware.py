"""
Request middleware for logging, timing, and request ID tracking.
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from farmbot.core.logging import get_logger

logger = get_logger(__name__)

QUIET_PATHS = {"/health", "/metrics"}
WEBHOOK_PATH = "/webhook"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware that:
    1. Assigns a unique request ID to each request
    2. Logs request method, path, status code, and duration
    3. Answers 200 on the webhook even if handling blew up, so Telegram
       keeps delivering updates
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = str(uuid.uuid4())[:8]
        start_time = time.perf_counter()

        # Bind request context for all downstream log calls
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
        )

        try:
            response = await call_next(request)
        except Exception as e:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            logger.exception("request_failed", error=str(e), duration_ms=duration_ms)
            if request.url.path != WEBHOOK_PATH:
                raise
            response = JSONResponse({"ok": True})
        else:
            duration_ms = round((time.perf_counter() - start_time) * 1000, 2)
            if request.url.path not in QUIET_PATHS:
                logger.info(
                    "request_completed",
                    status_code=response.status_code,
                    duration_ms=duration_ms,
                )

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        return response
