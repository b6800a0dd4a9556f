"""Request logging middleware.

One log line per HTTP request: method, path, status, latency and the
request id. A caller-supplied X-Request-ID header is reused, otherwise a
short id is generated. The id lands in request.state (for the response
envelope) and in the X-Request-ID response header.

    INFO [PUT] /api/v1/bank-accounts/<id>/deposit → 200 (23ms) req_a1b2c3d4e5f6
"""

import logging
import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("bank.request")

REQUEST_ID_HEADER = "X-Request-ID"
_MAX_INCOMING_ID_LEN = 64


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER)
        if incoming and len(incoming) <= _MAX_INCOMING_ID_LEN:
            request.state.request_id = incoming
        else:
            request.state.request_id = f"req_{uuid.uuid4().hex[:12]}"

        start = time.perf_counter()
        response: Response = await call_next(request)
        elapsed_ms = (time.perf_counter() - start) * 1000

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            "[%s] %s → %d (%.0fms) %s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.state.request_id,
        )
        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        return response
