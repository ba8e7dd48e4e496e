import sqlite3
from datetime import datetime, timezone

import pytest

from domain.entities import PlayerAggregate
from domain.errors import PersistenceFailure
from infrastructure import SqliteAggregateStore


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "cache" / "aggregates.sqlite"


def _aggregate(puuid: str, games: int) -> PlayerAggregate:
    a = PlayerAggregate.empty(puuid)
    for i in range(games):
        a.record_game(f"{puuid}_{i}", "Ahri" if i % 2 else "Lux", i % 3 == 0)
    a.mark_seen(f"{puuid}_aram")
    a.rank = "EMERALD III (77 LP)"
    a.last_updated = datetime(2025, 4, 2, 8, 30, tzinfo=timezone.utc)
    return a


def test_missing_file_loads_empty(db_path):
    store = SqliteAggregateStore(db_path)
    assert store.load_all() == {}
    assert not db_path.exists()


def test_saved_aggregates_load_in_a_new_process(db_path):
    store = SqliteAggregateStore(db_path)
    first, second = _aggregate("p1", 3), _aggregate("p2", 0)
    store.save([first, second])
    store.close()

    reopened = SqliteAggregateStore(db_path)
    loaded = reopened.load_all()
    reopened.close()
    assert loaded == {"p1": first, "p2": second}


def test_save_replaces_existing_row(db_path):
    store = SqliteAggregateStore(db_path)
    a = _aggregate("p1", 1)
    store.save([a])
    a.record_game("p1_new", "Zed", True)
    store.save([a])

    assert store.load_all()["p1"].games_played == 2
    with sqlite3.connect(db_path) as conn:
        assert conn.execute("SELECT COUNT(*) FROM player_aggregates").fetchone()[0] == 1
    store.close()


def test_corrupt_file_is_moved_aside(db_path):
    db_path.parent.mkdir(parents=True)
    db_path.write_bytes(b"this is not a sqlite database" * 100)

    store = SqliteAggregateStore(db_path)
    with pytest.raises(PersistenceFailure):
        store.load_all()

    assert not db_path.exists()
    assert any(p.name.startswith("aggregates.sqlite.corrupt-") for p in db_path.parent.iterdir())

    store.save([_aggregate("p1", 2)])
    assert store.load_all()["p1"].games_played == 2
    store.close()


def test_inconsistent_row_is_skipped(db_path):
    store = SqliteAggregateStore(db_path)
    store.save([_aggregate("good", 2)])
    conn = sqlite3.connect(db_path)
    conn.execute(
        "INSERT INTO player_aggregates(puuid, payload, updated_at) VALUES(?, ?, ?)",
        ("bad", '{"puuid": "bad", "games_played": 3, "wins": 1, "champion_counts": {}}', "x"),
    )
    conn.execute(
        "INSERT INTO player_aggregates(puuid, payload, updated_at) VALUES(?, ?, ?)",
        ("garbled", "{not json", "x"),
    )
    conn.commit()
    conn.close()

    loaded = store.load_all()
    assert set(loaded) == {"good"}
    assert set(store.skipped_rows) == {"bad", "garbled"}
    store.close()
