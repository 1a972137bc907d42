"""
Custom middleware for the FastAPI application.
"""
import time
import logging
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
import uuid

# Set up logging
logger = logging.getLogger(__name__)

class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Tag every request with an ID and log who did what at the desk.

    A caller-supplied X-Request-ID is kept so front-end and API logs line up.
    The acting staff member (X-User-Id) is recorded on request.state for the
    handlers and in each log line.
    """

    async def dispatch(self, request: Request, call_next):
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        acting_user = request.headers.get("x-user-id") or "anonymous"
        request.state.request_id = request_id
        request.state.acting_user = acting_user

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                f"[{request_id}] {request.method} {request.url.path} by user {acting_user} "
                f"crashed after {(time.perf_counter() - started) * 1000:.1f}ms: {str(e)}"
            )
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = f"{elapsed_ms:.1f}ms"

        # Client and server errors at warning level
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            f"[{request_id}] {request.method} {request.url.path} by user {acting_user} "
            f"-> {response.status_code} in {elapsed_ms:.1f}ms"
        )
        return response


def setup_middlewares(app):
    """
    Set up all custom middlewares for the application.

    Args:
        app: FastAPI application instance
    """
    app.add_middleware(RequestLoggingMiddleware)
