import pytest
from fastapi.testclient import TestClient

from config import Settings
from presentation.runtime import open_runtime
from presentation.web import create_app
from conftest import ARAM, OTHER, PLAYER, SEASON_START_MS, FakeMatchSource, MemoryStore, make_match


class LocalSettings(Settings):
    TRACKED_PUUIDS = [PLAYER, OTHER]
    SEASON_START_MS = SEASON_START_MS
    RANKED_QUEUE_IDS = frozenset({420, 440})
    MIN_GAME_DURATION_S = 300
    REFRESH_INTERVAL_S = 0


@pytest.fixture
def source() -> FakeMatchSource:
    source = FakeMatchSource()
    source.add(PLAYER, make_match("NA1_1", PLAYER, "Ahri"), make_match("NA1_2", PLAYER, "Lux", win=False))
    source.add(PLAYER, make_match("NA1_3", PLAYER, "Ahri", queue_id=ARAM))
    source.set_rank(PLAYER, "GOLD", "II", 45)
    return source


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def client(source, store, tmp_path):
    static = tmp_path / "public"
    static.mkdir()
    (static / "index.html").write_text("<h1>Roster</h1>")
    app = create_app(lambda: open_runtime(LocalSettings, source=source, store=store), static_dir=static)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


def test_players_in_roster_order(client):
    response = client.get("/api/players")

    assert response.status_code == 200
    assert response.json() == [
        {"puuid": PLAYER, "gamesPlayed": 2, "winrate": "50.0%", "mostPlayedChampion": "Ahri", "rank": "GOLD II (45 LP)"},
        {"puuid": OTHER, "gamesPlayed": 0, "winrate": "N/A", "mostPlayedChampion": "N/A", "rank": "Unranked"},
    ]


def test_single_player(client):
    response = client.get(f"/api/players/{OTHER}")

    assert response.status_code == 200
    assert response.json()["rank"] == "Unranked"


def test_untracked_player_is_404(client):
    response = client.get("/api/players/nobody")

    assert response.status_code == 404
    assert response.json() == {"detail": "Player is not tracked"}


def test_failed_listing_marks_player_stale(client, source):
    client.get("/api/players")
    source.fail_listing.add(PLAYER)

    body = client.get(f"/api/players/{PLAYER}").json()

    assert body["gamesPlayed"] == 2
    assert body["stale"] is True
    assert "listing down" in body["error"]


def test_health_counts_cached_players(client):
    assert client.get("/health").json() == {"status": "ok", "players": 2, "cached": 0}
    client.get("/api/players")
    assert client.get("/health").json() == {"status": "ok", "players": 2, "cached": 2}


def test_static_front_end(client):
    response = client.get("/")

    assert response.status_code == 200
    assert "Roster" in response.text


def test_unexpected_error_is_500(client):
    async def boom():
        raise RuntimeError("kaput")

    client.app.state.runtime.roster.execute = boom

    response = client.get("/api/players")

    assert response.status_code == 500
    assert response.json() == {"detail": "Server error fetching stats"}


def test_shutdown_flushes_store(source, store, tmp_path):
    app = create_app(lambda: open_runtime(LocalSettings, source=source, store=store), static_dir=tmp_path)
    with TestClient(app) as client:
        client.get("/api/players")

    assert set(store.data) == {PLAYER, OTHER}
    assert store.data[PLAYER]["games_played"] == 2
