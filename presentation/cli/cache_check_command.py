from __future__ import annotations

from pathlib import Path
from typing import Optional

from config import settings
from core.logging.logger import get_logger
from domain.errors import PersistenceFailure
from infrastructure import SqliteAggregateStore
from application.services import present


class CacheCheckCommand:
    """Inspect the persisted aggregates and report rows that fail to load.

    A corrupt file is reported and left in place, unlike the service, which
    moves it aside on startup.
    """

    def __init__(self, db_path: Optional[Path] = None) -> None:
        self.log = get_logger(__name__, service="cache-cli")
        self.db_path = Path(db_path) if db_path is not None else settings.CACHE_PATH

    def run(self) -> int:
        print("\n=== Cache Check ===", flush=True)
        print(f"Store: {self.db_path}", flush=True)
        if not self.db_path.exists():
            print("No cache file yet.", flush=True)
            return 0
        store = SqliteAggregateStore(self.db_path, quarantine_corrupt=False)
        try:
            aggregates = store.load_all()
        except PersistenceFailure as e:
            self.log.error(lambda: f"cache-load-failed {e}")
            print(f"Error: {e}", flush=True)
            return 1
        finally:
            store.close()

        tracked = set(settings.TRACKED_PUUIDS)
        bad = len(store.skipped_rows)
        for puuid, reason in sorted(store.skipped_rows.items()):
            print(f"- {puuid[:10]}.. UNREADABLE: {reason}", flush=True)
        for puuid, aggregate in sorted(aggregates.items()):
            s = present(aggregate)
            marker = "" if puuid in tracked else "  (not tracked)"
            updated = aggregate.last_updated.isoformat() if aggregate.last_updated else "never"
            print(
                f"- {puuid[:10]}.. seen={len(aggregate.seen_match_ids)} games={s.games_played} "
                f"winrate={s.winrate} main={s.most_played_champion} rank={s.rank} updated={updated}{marker}",
                flush=True,
            )

        missing = tracked - set(aggregates)
        if missing:
            print(f"{len(missing)} tracked player(s) not cached yet.", flush=True)
        print(f"{len(aggregates)} aggregate(s), {bad} problem(s).", flush=True)
        return 1 if bad else 0
