"""Sliding-window rate limiting for Riot API endpoint families."""
import asyncio
import logging
import time
from collections import deque
from typing import Deque, Dict, List, Sequence, Tuple

logger = logging.getLogger(__name__)

# (max requests, window seconds)
Window = Tuple[int, float]


class RateLimiter:
    """
    Allows a request only when every window has room for it.

    Riot applies a short (1 s) and a long (120 s) window per key; both are
    modelled as ``(limit, seconds)`` pairs.
    """

    def __init__(self, windows: Sequence[Window]):
        if not windows:
            raise ValueError("at least one window is required")
        self.windows: List[Window] = list(windows)
        self._stamps: List[Deque[float]] = [deque() for _ in self.windows]
        self._lock = asyncio.Lock()

    def _wait_time(self, now: float) -> float:
        wait = 0.0
        for (limit, span), stamps in zip(self.windows, self._stamps):
            while stamps and now - stamps[0] > span:
                stamps.popleft()
            if len(stamps) >= limit:
                wait = max(wait, span - (now - stamps[0]) + 0.01)
        return wait

    async def acquire(self) -> None:
        async with self._lock:
            while True:
                now = time.monotonic()
                wait = self._wait_time(now)
                if wait <= 0:
                    for stamps in self._stamps:
                        stamps.append(now)
                    return
                logger.debug(f"Rate limit — waiting {wait:.2f}s")
                await asyncio.sleep(wait)

    def get_status(self) -> List[Tuple[int, int, float]]:
        """``(used, limit, window seconds)`` per window."""
        now = time.monotonic()
        return [
            (sum(1 for t in stamps if now - t <= span), limit, span)
            for (limit, span), stamps in zip(self.windows, self._stamps)
        ]

    async def reset(self) -> None:
        async with self._lock:
            for stamps in self._stamps:
                stamps.clear()


class EndpointRateLimiter:
    """Per-endpoint rate limiters. Endpoints without one are not limited."""

    def __init__(self):
        self.limiters: Dict[str, RateLimiter] = {}

    def add_endpoint_limiter(
        self,
        endpoint: str,
        requests_per_1_sec: int,
        requests_per_2_min: int,
    ) -> None:
        self.limiters[endpoint] = RateLimiter([(requests_per_1_sec, 1.0), (requests_per_2_min, 120.0)])

    async def acquire(self, endpoint: str) -> None:
        limiter = self.limiters.get(endpoint)
        if limiter:
            await limiter.acquire()

    async def reset_endpoint(self, endpoint: str) -> None:
        limiter = self.limiters.get(endpoint)
        if limiter:
            await limiter.reset()
