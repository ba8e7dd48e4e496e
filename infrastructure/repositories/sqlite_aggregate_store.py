"""SQLite-backed aggregate store."""
import json
import logging
import sqlite3
import threading
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Optional

from domain.entities import PlayerAggregate
from domain.errors import MalformedRecord, PersistenceFailure
from domain.interfaces import IAggregateStore

logger = logging.getLogger(__name__)


class SqliteAggregateStore(IAggregateStore):
    """One row per player, the aggregate serialized as a JSON document.

    Every ``save`` is a single transaction and the database runs in WAL mode,
    so a reader sees either the previous or the new state of a batch.
    """

    def __init__(self, db_path: Path, *, quarantine_corrupt: bool = True):
        """
        Args:
            db_path: SQLite file, created on first write
            quarantine_corrupt: move an unreadable file aside on load; off for
                inspection, which must leave the file where it is
        """
        self.db_path = Path(db_path)
        self.quarantine_corrupt = quarantine_corrupt
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.Lock()
        # puuid -> reason, for rows the last load_all could not decode
        self.skipped_rows: Dict[str, str] = {}

    def _connect(self) -> sqlite3.Connection:
        if self._conn is None:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            try:
                conn.execute("PRAGMA journal_mode=WAL")
                conn.execute("PRAGMA synchronous=NORMAL")
                conn.execute(
                    "CREATE TABLE IF NOT EXISTS player_aggregates ("
                    "puuid TEXT PRIMARY KEY, payload TEXT NOT NULL, updated_at TEXT NOT NULL)"
                )
                conn.commit()
            except sqlite3.Error:
                conn.close()
                raise
            self._conn = conn
        return self._conn

    def _quarantine(self) -> None:
        """Move an unreadable database aside so the next open starts empty."""
        self.close()
        suffix = time.strftime("%Y%m%dT%H%M%S")
        for path in (self.db_path, Path(f"{self.db_path}-wal"), Path(f"{self.db_path}-shm")):
            if path.exists():
                target = path.with_name(f"{path.name}.corrupt-{suffix}")
                path.replace(target)
                logger.warning(f"Moved unreadable cache file {path} to {target}")

    def load_all(self) -> Dict[str, PlayerAggregate]:
        if not self.db_path.exists():
            return {}
        with self._lock:
            try:
                rows = self._connect().execute("SELECT puuid, payload FROM player_aggregates").fetchall()
            except sqlite3.DatabaseError as exc:
                if not self.quarantine_corrupt:
                    self.close()
                else:
                    try:
                        self._quarantine()
                    except OSError as move_exc:
                        logger.error(f"Could not move unreadable cache aside: {move_exc}")
                raise PersistenceFailure(f"cannot read {self.db_path}: {exc}") from exc

        self.skipped_rows = {}
        aggregates: Dict[str, PlayerAggregate] = {}
        for puuid, payload in rows:
            try:
                aggregates[puuid] = PlayerAggregate.from_dict(json.loads(payload))
            except (ValueError, MalformedRecord) as exc:
                logger.warning(f"Skipping unreadable cache row for {puuid}: {exc}")
                self.skipped_rows[puuid] = str(exc)
        return aggregates

    def save(self, aggregates: Iterable[PlayerAggregate]) -> None:
        now = datetime.now(timezone.utc).isoformat()
        rows = [
            (a.puuid, json.dumps(a.to_dict(), separators=(",", ":")), now)
            for a in aggregates
        ]
        if not rows:
            return
        with self._lock:
            try:
                conn = self._connect()
                with conn:
                    conn.executemany(
                        "INSERT INTO player_aggregates(puuid, payload, updated_at) VALUES(?, ?, ?) "
                        "ON CONFLICT(puuid) DO UPDATE SET payload=excluded.payload, updated_at=excluded.updated_at",
                        rows,
                    )
            except sqlite3.Error as exc:
                raise PersistenceFailure(f"cannot write {self.db_path}: {exc}") from exc

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
