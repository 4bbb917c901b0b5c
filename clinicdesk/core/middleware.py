"""
Request middleware: request ids and timing.
"""
import time
import logging
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"
PROCESS_TIME_HEADER = "X-Process-Time"

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tags each call with a request id and logs how long it took.

    A caller supplied ``X-Request-ID`` is kept so desktop clients can
    correlate their own logs with ours.
    """
    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        label = f"{request.method} {request.url.path}"

        logger.info(f"[{request_id}] {label} started")
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"[{request_id}] {label} raised {type(e).__name__}: {str(e)} after {time.perf_counter() - started:.4f}s")
            raise

        elapsed = time.perf_counter() - started
        response.headers[REQUEST_ID_HEADER] = request_id
        response.headers[PROCESS_TIME_HEADER] = f"{elapsed:.4f}"

        log = logger.warning if response.status_code >= 500 else logger.info
        log(f"[{request_id}] {label} -> {response.status_code} in {elapsed:.4f}s")
        return response


def setup_middlewares(app):
    """Register the request middleware on the application."""
    app.add_middleware(RequestLoggingMiddleware)
