"""Structured logging for the tracker service."""
from .config import bootstrap_logging, shutdown_logging
from .context import bind, context, get_context
from .logger import LogLevel, StructuredLogger, get_logger

__all__ = [
    "bootstrap_logging",
    "shutdown_logging",
    "bind",
    "context",
    "get_context",
    "LogLevel",
    "StructuredLogger",
    "get_logger",
]
