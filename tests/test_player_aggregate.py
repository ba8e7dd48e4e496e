from datetime import datetime, timezone

import pytest

from domain.entities import PlayerAggregate
from domain.errors import MalformedRecord


def test_record_game_keeps_counters_consistent():
    a = PlayerAggregate.empty("p")
    a.record_game("m1", "Ahri", True)
    a.record_game("m2", "Ahri", False)
    a.record_game("m3", "Lux", True)
    assert (a.games_played, a.wins, a.losses) == (3, 2, 1)
    assert a.champion_counts == {"Ahri": 2, "Lux": 1}
    assert a.check_invariants() == []


def test_record_game_ignores_seen_match():
    a = PlayerAggregate.empty("p")
    a.record_game("m1", "Ahri", True)
    a.mark_seen("m2")
    a.record_game("m1", "Ahri", True)
    a.record_game("m2", "Ahri", True)
    assert a.games_played == 1
    assert a.seen_match_ids == {"m1", "m2"}


def test_dict_form_survives_reload():
    a = PlayerAggregate.empty("p")
    a.record_game("m2", "Zed", False)
    a.mark_seen("m1")
    a.rank = "SILVER I (10 LP)"
    a.last_updated = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

    data = a.to_dict()
    assert data["seen_match_ids"] == ["m1", "m2"]
    assert PlayerAggregate.from_dict(data) == a


def test_copy_is_independent():
    a = PlayerAggregate.empty("p")
    b = a.copy()
    b.record_game("m1", "Ahri", True)
    assert a.games_played == 0 and not a.seen_match_ids and not a.champion_counts


@pytest.mark.parametrize(
    "data",
    [
        {"seen_match_ids": []},
        {"puuid": "p", "games_played": "many"},
        {"puuid": "p", "games_played": 1, "wins": 2, "champion_counts": {"Ahri": 1}, "seen_match_ids": ["m"]},
        {"puuid": "p", "games_played": 2, "wins": 1, "champion_counts": {"Ahri": 1}, "seen_match_ids": ["a", "b"]},
        {"puuid": "p", "last_updated": "yesterday"},
    ],
)
def test_malformed_dicts_are_rejected(data):
    with pytest.raises(MalformedRecord):
        PlayerAggregate.from_dict(data)
