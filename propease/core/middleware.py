# propease/core/middleware.py
import logging
import time
import uuid
from typing import Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

log = logging.getLogger("propease.request")


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Tags every request with a request-id (incoming header or a fresh uuid4),
    echoes it on the response and writes one access line per request.
    Activity log rows pick the id up from request.state.
    """

    def __init__(self, app, header_name: str = "X-Request-Id"):
        super().__init__(app)
        self.header_name = header_name

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        rid = request.headers.get(self.header_name) or str(uuid.uuid4())
        request.state.request_id = rid

        started = time.perf_counter()
        response = await call_next(request)
        response.headers[self.header_name] = rid

        log.info(
            "request",
            extra={
                "request_id": rid,
                "method": request.method,
                "path": request.url.path,
                "status": response.status_code,
                "elapsed_ms": round((time.perf_counter() - started) * 1000, 1),
            },
        )
        return response
