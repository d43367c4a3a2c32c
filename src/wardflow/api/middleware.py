"""
Request span middleware: correlation id, timing and cache headers.
"""

import logging
import time
import uuid

from fastapi import Request

logger = logging.getLogger(__name__)

CORRELATION_HEADER = "x-correlation-id"


async def request_span_middleware(request: Request, call_next):
    """Tag each request with a correlation id and log its duration."""
    request_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
    request.state.request_id = request_id
    span = f"{request.method} {request.url.path}"
    started = time.perf_counter()

    try:
        response = await call_next(request)
    except Exception:
        duration_ms = round((time.perf_counter() - started) * 1000, 2)
        logger.error(
            f"💥 {span} failed after {duration_ms}ms",
            exc_info=True,
            extra={"request_id": request_id, "duration_ms": duration_ms},
        )
        raise

    duration_ms = round((time.perf_counter() - started) * 1000, 2)
    logger.info(
        f"📡 {span} -> {response.status_code} ({duration_ms}ms)",
        extra={
            "request_id": request_id,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )

    response.headers[CORRELATION_HEADER] = request_id
    response.headers["x-api-span"] = span
    response.headers["x-server-time"] = str(int(time.time() * 1000))
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate"
    response.headers["Pragma"] = "no-cache"
    return response
