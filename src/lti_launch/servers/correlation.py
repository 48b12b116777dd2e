"""Correlation ID middleware for request tracing.

Reuses the caller's ``X-Correlation-ID`` header or generates a UUID4 hex
string, sets it in ``request.state.correlation_id`` for handlers and echoes it
in the response headers.

Secrets MUST NOT be logged.
"""

from __future__ import annotations

import logging
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

_HEADER_NAME = "X-Correlation-ID"
_MAX_LEN = 64
_logger = logging.getLogger("lti-launch.correlation")


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """ASGI middleware that attaches a per-request correlation ID."""

    def __init__(self, app: ASGIApp, header_name: str = _HEADER_NAME) -> None:
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        supplied = (request.headers.get(self.header_name) or "").strip()
        # Client-supplied ids end up in logs; keep them short and printable.
        if supplied and len(supplied) <= _MAX_LEN and supplied.isprintable():
            correlation_id = supplied
        else:
            correlation_id = uuid.uuid4().hex
        request.state.correlation_id = correlation_id
        _logger.debug(
            "%s %s correlation_id=%s", request.method, request.url.path, correlation_id
        )
        response = await call_next(request)
        response.headers[self.header_name] = correlation_id
        return response
