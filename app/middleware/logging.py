"""
Request Logging

One log line per HTTP request on the "todo_service" logger:

    PUT /api/todos/3 200 4.12ms IP:10.0.0.7

The elapsed time is also returned to the client in X-Process-Time
(seconds). configure_logging() applies LOG_LEVEL at import of app.main.
"""

import time
import logging
from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.setting import settings

logger = logging.getLogger("todo_service")

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Times each request and logs method, path, status and client."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        logger.info(
            f"{request.method} {request.url.path} "
            f"{response.status_code} {elapsed * 1000:.2f}ms "
            f"IP:{client_address(request)}"
        )

        response.headers["X-Process-Time"] = f"{elapsed:.6f}"
        return response


def client_address(request: Request) -> str:
    """
    Best guess at the caller's address.

    Behind a proxy the first X-Forwarded-For entry is the original client.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    return request.client.host if request.client else "unknown"


def configure_logging() -> None:
    """
    Apply LOG_LEVEL to the service loggers.

    A handler is attached only when the root logger has none, so uvicorn's
    or the test runner's logging setup is left alone.
    """
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    if not logging.getLogger().handlers:
        logging.basicConfig(format=LOG_FORMAT)

    for name in ("todo_service", "app"):
        logging.getLogger(name).setLevel(level)


def add_logging_middleware(app: FastAPI) -> None:
    app.add_middleware(LoggingMiddleware)
