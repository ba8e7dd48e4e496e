"""Riot Games API client."""
import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

import httpx

from config import settings
from domain.enums import Region
from domain.errors import RemoteUnavailable
from .rate_limiter import EndpointRateLimiter

logger = logging.getLogger(__name__)


class RiotAPIClient:
    """Asynchronous Riot API client with per-endpoint rate limiting.

    Every failure surfaces as ``RemoteUnavailable``; callers decide whether it
    is fatal. Use as an async context manager so the connection pool is closed.
    """

    def __init__(
        self,
        api_key: str,
        region: Region = Region.NA1,
        *,
        timeout: Optional[float] = None,
        max_retries: Optional[int] = None,
        retry_backoff: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.region = region
        self.session: Optional[httpx.AsyncClient] = None
        self.timeout = settings.REQUEST_TIMEOUT if timeout is None else timeout
        self.max_retries = settings.MAX_RETRIES if max_retries is None else max_retries
        self.retry_backoff = settings.RETRY_BACKOFF if retry_backoff is None else retry_backoff
        self._transport = transport
        self._endpoint_cooldown: dict[str, float] = {}

        self.rate_limiter = EndpointRateLimiter()
        self.rate_limiter.add_endpoint_limiter(
            "match",
            requests_per_1_sec=settings.MATCH_RATE_LIMIT_PER_1_SEC,
            requests_per_2_min=settings.MATCH_RATE_LIMIT_PER_2_MIN,
        )
        self.rate_limiter.add_endpoint_limiter(
            "league",
            requests_per_1_sec=settings.LEAGUE_RATE_LIMIT_PER_1_SEC,
            requests_per_2_min=settings.LEAGUE_RATE_LIMIT_PER_2_MIN,
        )

    async def __aenter__(self):
        http2 = False
        if self._transport is None:
            try:
                import h2  # noqa: F401  # type: ignore
                http2 = True
            except ImportError:
                pass
        self.session = httpx.AsyncClient(
            timeout=self.timeout,
            headers={"X-Riot-Token": self.api_key},
            http2=http2,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *_):
        if self.session:
            await self.session.aclose()
            self.session = None

    @property
    def platform_url(self) -> str:
        return f"https://{self.region.platform_route}.api.riotgames.com"

    @property
    def regional_url(self) -> str:
        return f"https://{self.region.regional_route}.api.riotgames.com"

    def _backoff(self, attempt: int) -> float:
        return self.retry_backoff * (2 ** attempt)

    @staticmethod
    def _retry_after(response: httpx.Response, default: float = 5.0) -> float:
        """Seconds from a ``Retry-After`` header; HTTP-date or junk values get ``default``."""
        try:
            return max(0.0, float(response.headers.get("Retry-After", default)))
        except ValueError:
            return default

    async def _make_request(
        self,
        url: str,
        endpoint_type: str,
        params: Optional[Dict[str, Any]] = None,
        not_found: Any = None,
    ) -> Any:
        """GET ``url`` and decode JSON.

        ``not_found`` is returned for a 404 when given; otherwise a 404 is a
        failure like any other non-success status.
        """
        if self.session is None:
            raise RuntimeError("RiotAPIClient used outside 'async with'")

        last_error = "no attempt made"
        for attempt in range(self.max_retries + 1):
            # honour per-endpoint cooldown after 429
            cd = self._endpoint_cooldown.get(endpoint_type, 0.0)
            now = time.monotonic()
            if cd > now:
                await asyncio.sleep(cd - now)

            await self.rate_limiter.acquire(endpoint_type)

            try:
                response = await self.session.get(url, params=params)
            except httpx.TimeoutException:
                last_error = f"timeout after {self.timeout}s"
                logger.warning(f"Timeout for {url} (attempt {attempt + 1})")
            except httpx.HTTPError as exc:
                last_error = f"network error: {exc}"
                logger.warning(f"Network error for {url}: {exc}")
            else:
                if response.status_code == 200:
                    try:
                        return response.json()
                    except ValueError as exc:
                        raise RemoteUnavailable(f"invalid JSON from {url}: {exc}", status_code=200) from exc

                if response.status_code == 404 and not_found is not None:
                    return not_found

                if response.status_code == 401 or response.status_code == 403:
                    logger.error(f"{response.status_code} from Riot — check RIOT_API_KEY")
                    raise RemoteUnavailable(f"HTTP {response.status_code} for {url}", response.status_code)

                if response.status_code == 429:
                    retry_after = self._retry_after(response)
                    logger.warning(f"429 rate-limited — waiting {retry_after}s")
                    self._endpoint_cooldown[endpoint_type] = time.monotonic() + retry_after
                    await self.rate_limiter.reset_endpoint(endpoint_type)
                    last_error = "rate limited"
                    if attempt < self.max_retries:
                        continue
                    raise RemoteUnavailable(f"HTTP 429 for {url}", 429)

                if response.status_code < 500:
                    logger.warning(f"HTTP {response.status_code} for {url}")
                    raise RemoteUnavailable(f"HTTP {response.status_code} for {url}", response.status_code)

                last_error = f"HTTP {response.status_code}"
                if attempt >= self.max_retries:
                    raise RemoteUnavailable(f"HTTP {response.status_code} for {url}", response.status_code)

            if attempt < self.max_retries:
                await asyncio.sleep(self._backoff(attempt))

        raise RemoteUnavailable(f"{url}: {last_error}")

    # ── Match API ──────────────────────────────────────────────────────

    async def get_match_ids_by_puuid(self, puuid: str, start: int = 0, count: int = 100) -> List[str]:
        url = f"{self.regional_url}/lol/match/v5/matches/by-puuid/{puuid}/ids"
        return await self._make_request(url, "match", params={"start": start, "count": min(count, 100)})

    async def get_match_by_id(self, match_id: str) -> Dict[str, Any]:
        return await self._make_request(f"{self.regional_url}/lol/match/v5/matches/{match_id}", "match")

    # ── League API ─────────────────────────────────────────────────────

    async def get_league_entries_by_puuid(self, puuid: str) -> List[Dict[str, Any]]:
        return await self._make_request(
            f"{self.platform_url}/lol/league/v4/entries/by-puuid/{puuid}", "league", not_found=[]
        )
