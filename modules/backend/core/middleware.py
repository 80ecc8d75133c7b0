"""
Request Context Middleware.

Binds request id, calling frontend and timing to every request so that API
logs can be matched with the editor or CLI session that caused them. The
editor sends `X-Frontend-ID: editor` on every autosave PUT.

    request.state.request_id   echoed back as X-Request-ID
    request.state.frontend     one of KNOWN_FRONTENDS or "unknown"
    X-Response-Time            whole milliseconds, e.g. "12ms"
"""

import time
import uuid

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from modules.backend.core.logging import VALID_SOURCES, get_logger

logger = get_logger(__name__)

KNOWN_FRONTENDS = VALID_SOURCES - {"unknown"}


def _frontend(request: Request) -> str:
    claimed = request.headers.get("X-Frontend-ID", "").lower()
    return claimed if claimed in KNOWN_FRONTENDS else "unknown"


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        frontend = _frontend(request)
        request.state.request_id = request_id
        request.state.frontend = frontend

        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(
            request_id=request_id,
            frontend=frontend,
            method=request.method,
            path=request.url.path,
        )

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                "Request failed with exception",
                extra={"duration_ms": _elapsed_ms(started), "error_type": type(exc).__name__},
            )
            raise
        else:
            duration_ms = _elapsed_ms(started)
            response.headers["X-Request-ID"] = request_id
            response.headers["X-Response-Time"] = f"{duration_ms}ms"
            logger.debug(
                "Request completed",
                extra={"status_code": response.status_code, "duration_ms": duration_ms},
            )
            return response
        finally:
            # Must not leak into the next request handled on this task
            structlog.contextvars.clear_contextvars()
