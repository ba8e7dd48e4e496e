"""Presentation CLI exports."""
from .serve_command import ServeCommand
from .refresh_command import RefreshCommand
from .cache_check_command import CacheCheckCommand

__all__ = [
    "ServeCommand",
    "RefreshCommand",
    "CacheCheckCommand",
]
