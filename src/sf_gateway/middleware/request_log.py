"""Request logging middleware.

Assigns each request a short id (request.state.request_id, echoed back in the
X-Request-ID header and the ApiResponse envelope) and logs one line per
request once the response is ready:

    INFO [POST] /api/v1/snowflakes -> 200 (1ms) req_a1b2c3d4e5f6

Client errors log at WARNING, server errors at ERROR.
"""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.sf_common.response import new_request_id

logger = logging.getLogger("sf.request")


def _level_for(status_code: int) -> int:
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = new_request_id()
        request.state.request_id = request_id

        start = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        logger.log(
            _level_for(response.status_code),
            "[%s] %s -> %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request_id,
        )
        response.headers["X-Request-ID"] = request_id
        return response
