"""
Type Editor Backend — Request Logging Middleware
=================================================

What:  One access log line per HTTP request.
How:   Times the request, then logs method, path, status, duration, request
       id and client address on the `type_editor.access` logger.
When:  Runs after RequestIDMiddleware, so the request id is already set.

Log line:
    2024-01-15T12:00:00 [INFO] type_editor.access: PUT /api/content/7 200 4.2ms [a1b2c3d4] from 127.0.0.1

Bodies are never logged: content_json and uploaded images stay out of the
logs.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from type_editor.middleware.request_id import request_id_var

logger = logging.getLogger("type_editor.access")

# /health and /health/detailed are polled every few seconds
SKIPPED_PATH_PREFIX = "/health"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs each request with a level chosen by the response status:
        5xx → ERROR, 4xx → WARNING, everything else → INFO
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path.startswith(SKIPPED_PATH_PREFIX):
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        rid = request_id_var.get("")

        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
