"""Application settings and configuration."""
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import List
from dotenv import load_dotenv

ENV_PATH = Path(__file__).resolve().parent / '.env'
load_dotenv(dotenv_path=ENV_PATH)

_DEFAULT_ROSTER = (
    "Yd31laKpHbFE7Hwjh1tHyrNVzYwaCj_vKZWNFFLGKj3RnvGO7CZuJaDFndOKfeNLKjKQUTO59YP5EA,"
    "GjTtoWxns42nUfeqYSBftixDwj6ht9CPqoBksR0VB9sUHiH4JXCjhf1Xeq_Cvv6X427zPtfKjOT8rw,"
    "b-FT89rX9vC0YS9nIvPaFHukttLmEK_rytKRJmZ5MMtBr0lDJ7wcpNPhAnZL-b14libQXuaxxOY80g,"
    "ElKIhMvxt51I2Ko_MZcNXvqz4DLIXfXm-m6l1i61VSAJxq1kxs9yttVddsyxbPEx-NfDgE3tyjYsYw,"
    "RRT4-anZRvG23G4X5OXdAKZb1WPtpHHuixw1PKc_sYs1QPP9FQ3swagTSOeXVPXhg3PDNa6Tx3zmfQ,"
    "YVOQWMOpmS4aj2CqiobzWNGBcMLWJhnIC_-BGEVK5yPGc_abJmmERmaB4cHSpLM49X_TDpMxyzn0gA,"
    "6ckB0ilRl8Wh9h0RJbqJo4Tkljarg4OIZszCOBMOXBIUblzKySlFZWF23i6k-Hu3wuAAq4Hdsb4JTA,"
    "DIG6vOz6kJvN29vRLnirmUg01Ji9P-Km_7dltrgjB8ugTx_3AKfaab2WZEuuebKgLyI8h8Kjd-Kibg"
)


def _csv(value: str) -> List[str]:
    return [v.strip() for v in value.split(',') if v.strip()]


def _epoch_ms(iso: str) -> int:
    """ISO-8601 instant -> Unix milliseconds. Naive values are taken as UTC."""
    dt = datetime.fromisoformat(iso.strip().replace('Z', '+00:00'))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp() * 1000)


class Settings:
    """
    Everything here can be overridden from ``config/.env`` or the process
    environment. Values are read once at import time.
    """

    RIOT_API_KEY: str = os.getenv('RIOT_API_KEY', '')

    # Platform host for league endpoints; the regional host used by the match
    # endpoints is derived from it (na1 -> americas).
    PLATFORM: str = os.getenv('PLATFORM', 'na1')

    # ── Roster ─────────────────────────────────────────────────────────────
    TRACKED_PUUIDS: List[str] = _csv(os.getenv('TRACKED_PUUIDS', _DEFAULT_ROSTER))

    # ── Match filter ───────────────────────────────────────────────────────
    SEASON_START:        str       = os.getenv('SEASON_START', '2025-01-09T00:00:00Z')
    SEASON_START_MS:     int       = _epoch_ms(SEASON_START)
    RANKED_QUEUE_IDS:    frozenset = frozenset(
        int(q) for q in _csv(os.getenv('RANKED_QUEUE_IDS', '420,440'))
    )
    # Anything shorter is a remake / early surrender.
    MIN_GAME_DURATION_S: int       = int(os.getenv('MIN_GAME_DURATION_S', '300'))

    # ── Match history paging ───────────────────────────────────────────────
    MATCH_ID_PAGE_SIZE: int = int(os.getenv('MATCH_ID_PAGE_SIZE', '100'))
    MAX_MATCH_IDS:      int = int(os.getenv('MAX_MATCH_IDS', '1000'))

    # ── Rate limits (per 1 second / per 2 minutes) ─────────────────────────
    # Riot personal key hard limits: 20/s and 100/120s
    MATCH_RATE_LIMIT_PER_1_SEC:  int = 18
    MATCH_RATE_LIMIT_PER_2_MIN:  int = 90
    LEAGUE_RATE_LIMIT_PER_1_SEC: int = 15
    LEAGUE_RATE_LIMIT_PER_2_MIN: int = 75

    # ── HTTP ───────────────────────────────────────────────────────────────
    REQUEST_TIMEOUT: float = float(os.getenv('REQUEST_TIMEOUT', '10'))
    MAX_RETRIES:     int   = int(os.getenv('MAX_RETRIES', '3'))
    RETRY_BACKOFF:   float = float(os.getenv('RETRY_BACKOFF', '0.5'))  # seconds, doubled per attempt

    # ── Concurrency ────────────────────────────────────────────────────────
    MAX_CONCURRENT_PLAYERS:       int = int(os.getenv('MAX_CONCURRENT_PLAYERS', '4'))
    MAX_CONCURRENT_MATCH_FETCHES: int = int(os.getenv('MAX_CONCURRENT_MATCH_FETCHES', '8'))

    # A player reconciled more recently than this is served from the cache.
    REFRESH_INTERVAL_S: float = float(os.getenv('REFRESH_INTERVAL_S', '300'))

    # ── Paths ──────────────────────────────────────────────────────────────
    BASE_DIR:   Path = Path(__file__).resolve().parent.parent
    DATA_DIR:   Path = BASE_DIR / 'data'
    CACHE_PATH: Path = Path(os.getenv('CACHE_PATH', str(DATA_DIR / 'cache' / 'aggregates.sqlite')))
    LOG_DIR:    Path = Path(os.getenv('LOG_DIR', str(DATA_DIR / 'logs')))
    STATIC_DIR: Path = Path(os.getenv('STATIC_DIR', str(BASE_DIR / 'public')))

    # ── Server ─────────────────────────────────────────────────────────────
    HOST: str = os.getenv('HOST', '0.0.0.0')
    PORT: int = int(os.getenv('PORT', '3000'))

    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def validate(cls) -> None:
        if not cls.RIOT_API_KEY:
            raise ValueError("RIOT_API_KEY must be set in config/.env")
        if not cls.TRACKED_PUUIDS:
            raise ValueError("TRACKED_PUUIDS must name at least one player")

    @classmethod
    def create_directories(cls) -> None:
        cls.CACHE_PATH.parent.mkdir(parents=True, exist_ok=True)
        cls.LOG_DIR.mkdir(parents=True, exist_ok=True)


settings = Settings()
