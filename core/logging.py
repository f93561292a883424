# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# EPOCH: 1 - HOST HEALTH GATE
# STATUS: Core - Structured logging with request context
# PURPOSE: One log format for the server, the checkers and uvicorn
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Human-readable lines for journald by default, JSON lines with
LOG_FORMAT=json.

Every record carries the fields of the active log context: the request
id assigned by GET /healthy, the checker currently running and, where
set, the target being probed.

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger(__name__)

    with log_context(request_id="a1b2c3", check="ports"):
        logger.info("Running checks")

Context lives in a ContextVar. Each request is its own asyncio task, so
concurrent requests never see each other's fields.
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, fields, replace
from datetime import datetime, timezone
from typing import Any, Dict, IO, Optional, Union

# Loggers uvicorn writes to; started with log_config=None
UVICORN_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access")


# ============================================================================
# CONTEXT
# ============================================================================

@dataclass(frozen=True)
class LogContext:
    """Fields attached to every record logged inside log_context()."""
    request_id: Optional[str] = None
    check: Optional[str] = None
    target: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Set fields only, extra merged in."""
        data = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if f.name != "extra" and getattr(self, f.name) is not None
        }
        data.update(self.extra)
        return data

    def labels(self) -> str:
        """Short `req=.., check=..` form for human-readable lines."""
        parts = []
        for key, label in (("request_id", "req"), ("check", "check"), ("target", "target")):
            value = getattr(self, key)
            if value:
                parts.append(f"{label}={value}")
        return ", ".join(parts)


_current_context: ContextVar[LogContext] = ContextVar("log_context", default=LogContext())


def get_current_context() -> LogContext:
    """Context of the running task."""
    return _current_context.get()


@contextmanager
def log_context(**kwargs):
    """
    Layer fields onto the current context for the duration of the block.

    Fields not given are inherited; `extra` is merged with the parent's.

    Example:
        with log_context(request_id="a1b2c3"):
            with log_context(check="services"):
                logger.warning("Service query timed out")
    """
    parent = get_current_context()
    extra = {**parent.extra, **kwargs.pop("extra", {})}
    context = replace(parent, extra=extra, **kwargs)

    token = _current_context.set(context)
    try:
        yield context
    finally:
        _current_context.reset(token)


# ============================================================================
# FORMATTERS
# ============================================================================

def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def __init__(self, include_source: bool = True):
        super().__init__()
        self.include_source = include_source

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": _utc_now().isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = get_current_context().to_dict()
        if context:
            entry["context"] = context

        data = getattr(record, "data", None)
        if data:
            entry["data"] = data

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        if self.include_source:
            entry["source"] = f"{record.filename}:{record.lineno}"

        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """`2026-10-19 12:00:00 INFO     health.executor [req=a1b2c3]: ...`"""

    def format(self, record: logging.LogRecord) -> str:
        labels = get_current_context().labels()
        line = (
            f"{_utc_now():%Y-%m-%d %H:%M:%S} {record.levelname:<8} "
            f"{record.name}{f' [{labels}]' if labels else ''}: {record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


# ============================================================================
# LOGGERS
# ============================================================================

class ContextLogger(logging.LoggerAdapter):
    """
    Adapter that copies caller-supplied `extra` into `record.data`.

    Context fields are read by the formatters at format time, so records
    from plain stdlib loggers (uvicorn) carry them too.
    """

    def process(self, msg, kwargs):
        data = kwargs.pop("extra", None)
        if data:
            kwargs["extra"] = {"data": dict(data)}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """Context-aware logger for a module (pass __name__)."""
    return ContextLogger(logging.getLogger(name), {})


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """
    Install a single root handler. Called once at startup.

    Args:
        level: Log level name or number (unknown names fall back to INFO)
        json_output: JSON lines instead of human-readable lines
        stream: Output stream (default stdout)
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(StructuredFormatter() if json_output else HumanFormatter())

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in UVICORN_LOGGERS:
        uv_logger = logging.getLogger(name)
        uv_logger.handlers.clear()
        uv_logger.propagate = True


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
]
