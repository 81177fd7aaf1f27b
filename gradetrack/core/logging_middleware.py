import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseHTTPMiddleware):
    """Access log tagged with the caller identity from the X-User-* headers.

    Rejected requests (4xx/5xx) are logged at WARNING so denied uploads and
    ownership failures stand out from normal traffic.
    """

    async def dispatch(self, request: Request, call_next):
        start = time.monotonic()

        response = await call_next(request)

        elapsed_ms = (time.monotonic() - start) * 1000
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "%s %s -> %s (%.1fms) %s:%s",
            request.method,
            request.url.path,
            response.status_code,
            elapsed_ms,
            request.headers.get("x-user-role", "anonymous"),
            request.headers.get("x-user-id", "-"),
        )

        return response
