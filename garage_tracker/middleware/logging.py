"""
Access Log Middleware

Writes one line per request to the "garage_tracker.access" logger:

    METHOD PATH STATUS DURATION_MS IP:<client>

and stamps the response with X-Process-Time (seconds). Server errors are
logged at WARNING so they stand out from normal traffic.

Headers are never logged: the Authorization header carries a bearer
token that is as good as a password until the signing secret rotates.
"""

import logging
import time

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("garage_tracker.access")


def client_ip(request: Request) -> str:
    """First hop of X-Forwarded-For when behind a proxy, else the peer address."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Access logging around every request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            elapsed = time.perf_counter() - started
            logger.warning(
                f"{request.method} {request.url.path} failed after {elapsed * 1000:.2f}ms "
                f"IP:{client_ip(request)}"
            )
            raise

        elapsed = time.perf_counter() - started
        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        logger.log(
            level,
            f"{request.method} {request.url.path} {response.status_code} "
            f"{elapsed * 1000:.2f}ms IP:{client_ip(request)}"
        )

        response.headers["X-Process-Time"] = f"{elapsed:.6f}"
        return response


def add_logging_middleware(app: FastAPI) -> None:
    app.add_middleware(LoggingMiddleware)
