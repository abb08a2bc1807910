"""
GhostNote Backend — Request Logging Middleware
================================================

What:  One access log line per HTTP request with status and duration.
How:   Times the downstream call and logs at a level chosen from the status.
When:  After RequestIDMiddleware (uses request ID for correlation).

What we log vs what we DON'T log:
    ✅ Log: method, path, status, duration, client IP, request ID
    ❌ Don't log: request/response bodies (ciphertext), Authorization header,
       query strings
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from ghostnote.middleware.request_id import request_id_var

logger = logging.getLogger("ghostnote.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs structured information about each HTTP request and response.

    Level mapping:
        5xx → ERROR, 4xx → WARNING, everything else → INFO

    /health is skipped; load balancers poll it every few seconds.
    """

    SKIPPED_PATHS = {"/health"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in self.SKIPPED_PATHS:
            return await call_next(request)

        start_time = time.perf_counter()
        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        rid = request_id_var.get("")

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        status = response.status_code
        if status >= 500:
            log_level = logging.ERROR
        elif status >= 400:
            log_level = logging.WARNING
        else:
            log_level = logging.INFO

        # Share ids are bearer secrets; keep them out of the access log
        logged_path = "/api/share/<id>" if path.startswith("/api/share/") else path

        logger.log(
            log_level,
            "%s %s %d %.1fms [%s] from %s",
            method,
            logged_path,
            status,
            duration_ms,
            rid,
            client_ip,
            extra={
                "request_id": rid,
                "method": method,
                "path": logged_path,
                "status": status,
                "duration_ms": round(duration_ms, 2),
                "client_ip": client_ip,
            },
        )

        return response
