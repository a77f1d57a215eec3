"""Request context middleware: request IDs, household-scoped access logs and latency metrics"""

import logging
import time
import uuid
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from household_gateway.infrastructure.observability.metrics import request_duration_histogram

REQUEST_ID_HEADER = "X-Request-ID"


def route_template(request: Request) -> str:
    """Matched route path, e.g. /v1/households/{household_id}/tasks"""
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class RequestContextMiddleware(BaseHTTPMiddleware):
    """
    Tag each request with an ID, then record how it went.

    An ID supplied by an upstream proxy is reused. After routing, the
    household in the path (if any) and the calling user are added to the
    access log; the latency histogram only sees the route template so that
    household and project ids stay out of the label set.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id
        start_time = time.time()

        response = await call_next(request)

        duration = time.time() - start_time
        endpoint = route_template(request)
        request_duration_histogram.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code,
        ).observe(duration)

        logging.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "endpoint": endpoint,
                "status_code": response.status_code,
                "household_id": request.scope.get("path_params", {}).get("household_id"),
                "user_id": request.headers.get("X-User-ID"),
                "duration_ms": round(duration * 1000, 2),
            },
        )

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
