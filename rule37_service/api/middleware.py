"""FastAPI middleware for request tracing and metrics"""

import uuid
import time
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from rule37_service.infrastructure.observability.metrics import request_duration_histogram

REQUEST_ID_HEADER = "X-Request-ID"
UNMATCHED_ROUTE_LABEL = "unmatched"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Propagate the caller's X-Request-ID, or mint one, for log correlation"""

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record HTTP request latency labelled by route template"""

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()

        response = await call_next(request)

        # Route template keeps label cardinality bounded; 404s share one label
        route = request.scope.get("route")
        endpoint = getattr(route, "path", UNMATCHED_ROUTE_LABEL)
        request_duration_histogram.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code,
        ).observe(time.perf_counter() - start)

        return response
