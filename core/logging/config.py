from __future__ import annotations

import logging
import os
from logging.handlers import QueueHandler, QueueListener, RotatingFileHandler
from pathlib import Path
from queue import Queue
from typing import Optional

from .context import get_context
from .formatter import ConsoleFormatter, JSONFormatter
from .logger import register_levels, to_level

_listener: QueueListener | None = None


class ContextFilter(logging.Filter):
    """Snapshot the bound context onto the record before it changes threads."""

    def __init__(self, service: str) -> None:
        super().__init__()
        self.service = service

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = get_context()
        if getattr(record, "service", None) is None:
            record.service = self.service
        return True


def bootstrap_logging(
    *,
    service: str = "tracker",
    level: str | int | None = None,
    log_dir: Optional[Path] = None,
    log_file_name: str = "tracker.jsonl",
    max_bytes: int = 5_000_000,
    backup_count: int = 5,
) -> None:
    """Install console and (optionally) rotating JSON-lines handlers on root.

    Console output is on unless ``LOG_CONSOLE=false``; the file handler is
    written from a background ``QueueListener`` so request handlers never block
    on disk I/O.
    """
    global _listener
    shutdown_logging()
    register_levels()
    root = logging.getLogger()
    root.handlers.clear()
    lvl = to_level(level or os.getenv("LOG_LEVEL", "INFO"))
    root.setLevel(lvl)
    context_filter = ContextFilter(service)

    if os.getenv("LOG_CONSOLE", "true").strip().lower() == "true":
        console = logging.StreamHandler()
        console_level_str = os.getenv("LOG_CONSOLE_LEVEL", "")
        console.setLevel(to_level(console_level_str) if console_level_str else lvl)
        console.setFormatter(ConsoleFormatter(color=os.getenv("NO_COLOR") is None))
        console.addFilter(context_filter)
        root.addHandler(console)

    if log_dir:
        log_dir.mkdir(parents=True, exist_ok=True)
        json_handler = RotatingFileHandler(
            str(log_dir / log_file_name), maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
        )
        json_handler.setLevel(lvl)
        json_handler.setFormatter(JSONFormatter())
        q: Queue[logging.LogRecord] = Queue(-1)
        qh = QueueHandler(q)
        qh.addFilter(context_filter)
        root.addHandler(qh)
        _listener = QueueListener(q, json_handler, respect_handler_level=True)
        _listener.start()

    # uvicorn installs its own handlers; route its records through ours.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        lg = logging.getLogger(name)
        lg.handlers.clear()
        lg.propagate = True


def shutdown_logging() -> None:
    global _listener
    if _listener:
        _listener.stop()
        _listener = None
