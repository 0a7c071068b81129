from __future__ import annotations

import time
import uuid
from collections.abc import Callable

import sentry_sdk
import structlog
from fastapi import Request, Response

REQUEST_ID_HEADER = "X-Request-ID"


def _duration_ms(start_ns: int) -> float:
    return round((time.perf_counter_ns() - start_ns) / 1_000_000.0, 3)


async def request_id_middleware(request: Request, call_next: Callable) -> Response:
    """Attach/propagate Request-ID and emit one structured access log line.

    - Prefer inbound X-Request-ID; generate UUID4 if absent
    - Bind request_id, method, path to contextvars so service logs carry them
    - Log event="http_request" with status and duration (error level + stack
      when the handler chain raises)
    - Always set X-Request-ID on the response
    """
    logger = structlog.get_logger(__name__)
    rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(
        request_id=rid, method=request.method, path=request.url.path
    )
    # No-op when Sentry is not initialised
    sentry_sdk.set_tag("request_id", rid)

    start_ns = time.perf_counter_ns()
    try:
        response = await call_next(request)
    except Exception:
        logger.error("http_request", status=500, duration_ms=_duration_ms(start_ns), exc_info=True)
        structlog.contextvars.clear_contextvars()
        raise

    logger.info(
        "http_request",
        status=response.status_code,
        duration_ms=_duration_ms(start_ns),
        client_ip=(request.client.host if request.client else None) or "-",
    )
    response.headers[REQUEST_ID_HEADER] = rid

    # Clear per-request bindings to avoid leakage across tasks
    structlog.contextvars.clear_contextvars()
    return response
