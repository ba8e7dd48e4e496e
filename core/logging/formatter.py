from __future__ import annotations

import json
import logging
import time
from typing import Any, Dict

from .context import get_context

_LEVEL_COLORS = {
    "TRACE": "\033[90m",
    "DEBUG": "\033[37m",
    "INFO": "\033[36m",
    "SUCCESS": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}
_RESET = "\033[0m"


def _timestamp(record: logging.LogRecord) -> str:
    return time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created)) + f".{int(record.msecs):03d}Z"


def _record_context(record: logging.LogRecord) -> Dict[str, Any]:
    # Set by ContextFilter on the emitting thread; the file handler formats on
    # the queue listener thread where the context var is empty.
    ctx = getattr(record, "context", None)
    return ctx if ctx is not None else get_context()


def _record_metadata(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        "timestamp": _timestamp(record),
        "level": record.levelname,
        "logger": record.name,
        "service": getattr(record, "service", None),
        "module": record.module,
        "function": record.funcName,
        "line_number": record.lineno,
        "task": getattr(record, "taskName", None),
    }


class ConsoleFormatter(logging.Formatter):
    """One coloured line per record: ``ts | LEVEL | service | where | msg | ctx``."""

    def __init__(self, *, color: bool = True) -> None:
        super().__init__()
        self.color = color

    def format(self, record: logging.LogRecord) -> str:
        md = _record_metadata(record)
        parts = [
            md["timestamp"],
            f"{record.levelname:<8}",
            md["service"] or "-",
            f"{md['module']}:{md['function']}:{md['line_number']}",
            record.getMessage(),
        ]
        exec_ms = getattr(record, "execution_time_ms", None)
        if exec_ms is not None:
            parts.append(f"t={exec_ms}ms")
        ctx = _record_context(record)
        if ctx:
            parts.append(" ".join(f"{k}={v}" for k, v in sorted(ctx.items())))
        line = " | ".join(parts)
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        if not self.color:
            return line
        return f"{_LEVEL_COLORS.get(record.levelname, '')}{line}{_RESET}"


class JSONFormatter(logging.Formatter):
    """JSON-lines records for the rotating log file."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = _record_metadata(record)
        payload["message"] = record.getMessage()
        ctx = _record_context(record)
        if ctx:
            payload["context"] = ctx
        exec_ms = getattr(record, "execution_time_ms", None)
        if exec_ms is not None:
            payload["execution_time_ms"] = exec_ms
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str, separators=(",", ":"))
