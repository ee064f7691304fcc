"""
After School Lessons Backend — Access Middleware
==================================================

What:  Tags every request with a correlation ID and writes one access line
       describing what the request was about.
How:   A single BaseHTTPMiddleware. The ID (client X-Request-ID, or a fresh
       short one) goes into a ContextVar that loggers and the error handlers
       read, and back out in the X-Request-ID response header.

Example lines:
    GET /search q='math' -> 200 3.1ms [a1b2c3d4] 127.0.0.1 'Mozilla/5.0'
    PUT /lessons/0b6f... lesson=0b6f... body=13B -> 404 2.4ms [77e0aa01] 10.0.0.4 'curl/8.5'

Request bodies are summarized by size only: orders carry names and phone
numbers.
"""

import logging
import re
import time
import uuid
from contextvars import ContextVar
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")

access_logger = logging.getLogger("afterschool.access")

_LESSON_PATH = re.compile(r"^/lessons/(?P<lesson_id>[^/]+)/?$")


def describe_target(request: Request) -> str:
    """
    Short, PII-free summary of what a request addresses.

    GET /search        → q='<term>'
    PUT /lessons/{id}  → lesson=<id>
    GET /images/{file} → image=<file>
    Anything with a body also gets body=<n>B (from Content-Length).
    """
    path = request.url.path
    parts = []

    if path == "/search":
        parts.append(f"q={request.query_params.get('q', '')!r}")
    elif path.startswith("/images/"):
        parts.append(f"image={path[len('/images/'):]}")
    else:
        match = _LESSON_PATH.match(path)
        if match:
            parts.append(f"lesson={match.group('lesson_id')}")

    length = request.headers.get("content-length")
    if length and length != "0":
        parts.append(f"body={length}B")

    return " ".join(parts)


def level_for(status: int) -> int:
    if status >= 500:
        return logging.ERROR
    return logging.WARNING if status >= 400 else logging.INFO


class AccessLogMiddleware(BaseHTTPMiddleware):
    """
    Correlation ID + access log.

    Paths in `quiet_paths` (default: /health) still get an ID but are not
    logged, so probes do not flood the log.
    """

    def __init__(self, app: ASGIApp, quiet_paths: Optional[Iterable[str]] = None):
        super().__init__(app)
        self.quiet_paths = frozenset(quiet_paths if quiet_paths is not None else ("/health",))

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        rid = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        request_id_var.set(rid)
        request.state.request_id = rid

        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers[REQUEST_ID_HEADER] = rid

        path = request.url.path
        if path not in self.quiet_paths:
            target = describe_target(request)
            client = request.client.host if request.client else "-"
            agent = request.headers.get("user-agent", "-")
            access_logger.log(
                level_for(response.status_code),
                "%s %s%s -> %d %.1fms [%s] %s %r",
                request.method,
                path,
                f" {target}" if target else "",
                response.status_code,
                elapsed_ms,
                rid,
                client,
                agent,
                extra={"request_id": rid, "status": response.status_code},
            )

        return response
