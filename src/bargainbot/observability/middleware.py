"""Per-request correlation for logs and responses.

Clients may send their own ``X-Request-ID``; otherwise one is minted.  Log
lines emitted while a request is being served carry it, along with the
service name and the request path.
"""

from __future__ import annotations

import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"
SERVICE_NAME = "bargainbot"


def resolve_request_id(request: Request) -> str:
    """Return the caller's request ID, or a fresh UUID4 when none (or blank) was sent."""
    supplied = request.headers.get(REQUEST_ID_HEADER, "").strip()
    return supplied or str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Tags each request's log context and response with a request ID."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = resolve_request_id(request)
        # every request starts from an empty log context
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            service=SERVICE_NAME,
            path=request.url.path,
        )
        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
