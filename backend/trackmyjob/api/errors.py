"""
Exception handlers and request logging.
"""

import logging
import time
import traceback

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from trackmyjob.config import settings

logger = logging.getLogger(__name__)


def _describe(request: Request) -> str:
    return f"{request.method} {request.url.path}"


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{_describe(request)} -> {exc.status_code}: {exc.detail}")
    elif exc.status_code >= 400:
        logger.warning(f"{_describe(request)} -> {exc.status_code}: {exc.detail}")

    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Last resort: log the traceback, answer with a generic 500."""
    logger.error(
        f"Unhandled {type(exc).__name__} on {_describe(request)}: {exc}\n"
        f"{''.join(traceback.format_exception(type(exc), exc, exc.__traceback__))}"
    )

    content = {"detail": "Internal server error"}
    if settings.debug:
        content["error"] = str(exc)
        content["type"] = type(exc).__name__
    return JSONResponse(status_code=500, content=content)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request with its status and duration."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"{_describe(request)} failed: {type(e).__name__}: {e}")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        level = logging.ERROR if response.status_code >= 500 else logging.DEBUG
        logger.log(level, f"{_describe(request)} -> {response.status_code} ({elapsed_ms:.1f} ms)")
        return response


def register_error_handling(app: FastAPI) -> None:
    app.add_exception_handler(HTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_unexpected_error)
    app.add_middleware(RequestLoggingMiddleware)
