from __future__ import annotations

import contextvars
from typing import Any, Dict

# Each asyncio task gets its own copy, so one player's reconciliation never
# leaks its puuid into another player's records.
_context: contextvars.ContextVar[Dict[str, Any]] = contextvars.ContextVar("log_context", default={})


def get_context() -> Dict[str, Any]:
    return dict(_context.get())


def bind(**values: Any) -> None:
    current = get_context()
    current.update({k: v for k, v in values.items() if v is not None})
    _context.set(current)


class context(object):
    """Bind values for the duration of a ``with`` block.

    Works for both ``with`` and ``async with`` so it can wrap a coroutine body.
    """

    def __init__(self, **values: Any) -> None:
        self._values = values
        self._token = None

    def __enter__(self) -> Dict[str, Any]:
        current = get_context()
        current.update({k: v for k, v in self._values.items() if v is not None})
        self._token = _context.set(current)
        return current

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._token is not None:
            _context.reset(self._token)
            self._token = None
        return False

    async def __aenter__(self) -> Dict[str, Any]:
        return self.__enter__()

    async def __aexit__(self, exc_type, exc, tb) -> bool:
        return self.__exit__(exc_type, exc, tb)
