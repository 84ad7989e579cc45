"""
ArtCritic Backend — Request Logging Middleware
===============================================

What:  One access log line per request: method, path, status, duration, id.
Who:   Applied to every request; /health is skipped to keep probes out of the log.

Level by status:
    5xx → ERROR, 4xx → WARNING, otherwise INFO

Request bodies (images, prompts) and Authorization headers are never logged.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from artcritic.middleware.request_id import request_id_var

logger = logging.getLogger("artcritic.access")


def level_for_status(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    if status >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request after the response is produced.

    Duration covers the whole handler, so analyze requests are dominated by
    the vision model call (typically several seconds).
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path == "/health":
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        declared = request.headers.get("content-length", "")
        bytes_in = int(declared) if declared.isdigit() else 0

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        rid = request_id_var.get("")

        logger.log(
            level_for_status(status),
            "%s %s -> %d in %.1fms (%d bytes in) rid=%s ip=%s",
            request.method,
            path,
            status,
            duration_ms,
            bytes_in,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": request.method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "bytes_in": bytes_in,
                "client_ip": client_ip,
            },
        )
        return response
