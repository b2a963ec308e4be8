from __future__ import annotations

import logging
import threading
import time
import uuid
from contextvars import ContextVar
from typing import Dict, Optional

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

# Context variables to carry across the request lifecycle
request_id_ctx: ContextVar[str] = ContextVar("request_id", default="-")
route_ctx: ContextVar[str] = ContextVar("route", default="-")

REQUEST_ID_HEADER = "X-Request-ID"

# In-memory basic counters (process-local) for quick metrics
_METRICS_LOCK = threading.Lock()
_METRICS: Dict[str, float] = {
    "requests_total": 0.0,
    "requests_errors_total": 0.0,
    "transactions_created_total": 0.0,
    "decrypt_success_total": 0.0,
    "decrypt_failures_total": 0.0,
    "authorization_failures_total": 0.0,
}


def metrics_snapshot() -> Dict[str, float]:
    """Return a shallow copy of current metrics."""
    with _METRICS_LOCK:
        return dict(_METRICS)


# PUBLIC_INTERFACE
def increment_metric(name: str, inc: float = 1.0) -> None:
    """Increment a named metric counter by inc."""
    with _METRICS_LOCK:
        _METRICS[name] = _METRICS.get(name, 0.0) + inc


def get_current_request_id() -> str:
    return request_id_ctx.get()


def mask_secret_value(value: Optional[str], keep: int = 4) -> Optional[str]:
    """Mask a secret for safe logging. Keep last N chars."""
    if value is None:
        return None
    v = str(value)
    if len(v) <= keep:
        return "*" * len(v)
    return "*" * (len(v) - keep) + v[-keep:]


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to attach a correlation/request ID and emit structured logs + metrics."""

    def __init__(self, app, logger: Optional[logging.Logger] = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger(__name__)

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        rid = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request_id_ctx.set(rid)
        route_ctx.set(request.url.path)

        increment_metric("requests_total", 1.0)

        self.logger.info(
            "request_start",
            extra={
                "method": request.method,
                "path": request.url.path,
                "client": request.client.host if request.client else None,
            },
        )
        status = 500
        try:
            response: Response = await call_next(request)
            status = response.status_code
            if status >= 400:
                increment_metric("requests_errors_total", 1.0)
            response.headers[REQUEST_ID_HEADER] = rid
            return response
        except Exception as ex:
            increment_metric("requests_errors_total", 1.0)
            self.logger.exception("request_error", extra={"error": type(ex).__name__})
            raise
        finally:
            dur_ms = (time.perf_counter() - start) * 1000.0
            self.logger.info(
                "request_end",
                extra={"status_code": status, "duration_ms": round(dur_ms, 2)},
            )


# PUBLIC_INTERFACE
def get_structured_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a structured logger that adds correlation attributes through logging Filters."""
    logger = logging.getLogger(name or __name__)
    if not any(isinstance(f, ContextFilter) for f in logger.filters):
        logger.addFilter(ContextFilter())
    return logger


class ContextFilter(logging.Filter):
    """Inject request context (request_id, route) into records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_ctx.get()
        record.route = route_ctx.get()
        return True
