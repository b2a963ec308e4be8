import logging
import json
from typing import Optional

from .observability import ContextFilter, get_structured_logger
from .settings import get_settings

_RESERVED_ATTRS = frozenset(
    (
        "msg", "args", "exc_info", "exc_text", "stack_info", "stacklevel", "levelno", "levelname",
        "msecs", "relativeCreated", "created", "thread", "threadName", "processName", "process",
        "pathname", "filename", "module", "lineno", "funcName", "name", "taskName", "message",
    )
)


class JsonFormatter(logging.Formatter):
    """Emit logs as single-line JSON with common fields and context (request_id, route)."""

    def format(self, record: logging.LogRecord) -> str:
        base = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            # Context fields added by filter (see observability.ContextFilter)
            "request_id": getattr(record, "request_id", "-"),
            "route": getattr(record, "route", "-"),
        }
        # Include extras if present (avoid non-serializable)
        for key, val in record.__dict__.items():
            if key in _RESERVED_ATTRS or key in ("request_id", "route"):
                continue
            try:
                json.dumps({key: val})
                base[key] = val
            except (TypeError, ValueError):
                base[key] = str(val)
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(base, separators=(",", ":"))


def _configure_root_logger(level: str, fmt: str) -> logging.Logger:
    logger = logging.getLogger()
    if not logger.handlers:
        handler = logging.StreamHandler()
        if fmt == "json":
            handler.setFormatter(JsonFormatter())
        else:
            handler.setFormatter(
                logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | [%(request_id)s %(route)s] %(message)s")
            )
        # records from third-party loggers need the context fields too
        handler.addFilter(ContextFilter())
        logger.addHandler(handler)
    logger.setLevel(level.upper())
    return logger


_settings = get_settings()
root_logger = _configure_root_logger(_settings.server.LOG_LEVEL, _settings.log.LOG_FORMAT)


# PUBLIC_INTERFACE
def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a module logger configured with the global format and level."""
    return get_structured_logger(name or __name__)
