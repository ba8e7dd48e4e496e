import httpx
import pytest

from domain.enums import Rank, Region
from domain.errors import MalformedRecord, RemoteUnavailable
from infrastructure import RiotAPIClient, RiotMatchSource
from conftest import run

PUUID = "abc-123"


def _match_payload(match_id="NA1_42", **info_overrides):
    info = {
        "gameCreation": 1_740_000_000_000,
        "gameDuration": 1712,
        "gameEndTimestamp": 1_740_000_000_000 + 1_712_000,
        "queueId": 420,
        "participants": [
            {"puuid": PUUID, "championName": "Ahri", "win": True, "kills": 7},
            {"puuid": "someone", "championName": "Zed", "win": False, "kills": 2},
        ],
    }
    info.update(info_overrides)
    return {"metadata": {"matchId": match_id}, "info": info}


def _source(handler, **kwargs):
    """Run ``fn(source)`` inside an entered client backed by ``handler``."""
    kwargs.setdefault("max_retries", 2)
    kwargs.setdefault("retry_backoff", 0)

    async def _run(fn):
        client = RiotAPIClient("test-key", Region.NA1, transport=httpx.MockTransport(handler), **kwargs)
        async with client:
            return await fn(RiotMatchSource(client))

    return _run


def test_match_id_page_request():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=["NA1_3", "NA1_2"])

    ids = run(_source(handler)(lambda s: s.list_match_ids(PUUID, 100, 100)))

    assert ids == ["NA1_3", "NA1_2"]
    request = seen[0]
    assert request.url.host == "americas.api.riotgames.com"
    assert request.url.path == f"/lol/match/v5/matches/by-puuid/{PUUID}/ids"
    assert request.url.params["start"] == "100"
    assert request.url.params["count"] == "100"
    assert request.headers["X-Riot-Token"] == "test-key"


def test_match_is_parsed_to_record():
    def handler(request):
        return httpx.Response(200, json=_match_payload())

    record = run(_source(handler)(lambda s: s.get_match("NA1_42")))

    assert record.match_id == "NA1_42"
    assert record.queue_id == 420
    assert record.duration_s == 1712
    assert record.participant(PUUID).champion_name == "Ahri"
    assert record.participant(PUUID).win is True
    assert record.participant("missing") is None


def test_legacy_millisecond_duration():
    payload = _match_payload(gameDuration=1_712_000)
    del payload["info"]["gameEndTimestamp"]

    record = run(_source(lambda r: httpx.Response(200, json=payload))(lambda s: s.get_match("NA1_42")))
    assert record.duration_s == 1712


@pytest.mark.parametrize("payload", [
    {"metadata": {}},
    {"metadata": "NA1_42", "info": _match_payload()["info"]},
    _match_payload(queueId="ranked"), _match_payload(participants=[{"puuid": PUUID}]),
])
def test_malformed_match(payload):
    with pytest.raises(MalformedRecord):
        run(_source(lambda r: httpx.Response(200, json=payload))(lambda s: s.get_match("NA1_42")))


def test_missing_metadata_falls_back_to_requested_id():
    payload = {"metadata": None, "info": _match_payload()["info"]}

    record = run(_source(lambda r: httpx.Response(200, json=payload))(lambda s: s.get_match("NA1_7")))
    assert record.match_id == "NA1_7"
    assert record.participant(PUUID).champion_name == "Ahri"


def test_ranked_standing_uses_solo_queue_on_platform_host():
    hosts = []

    def handler(request):
        hosts.append(request.url.host)
        return httpx.Response(200, json=[
            {"queueType": "RANKED_FLEX_SR", "tier": "SILVER", "rank": "I", "leaguePoints": 3},
            {"queueType": "RANKED_SOLO_5x5", "tier": "GOLD", "rank": "II", "leaguePoints": 45},
        ])

    standing = run(_source(handler)(lambda s: s.get_ranked_standing(PUUID)))

    assert hosts == ["na1.api.riotgames.com"]
    assert standing.tier is Rank.GOLD
    assert standing.display == "GOLD II (45 LP)"


def test_no_solo_entry_or_404_means_unranked():
    flex_only = [{"queueType": "RANKED_FLEX_SR", "tier": "SILVER", "rank": "I", "leaguePoints": 3}]
    assert run(_source(lambda r: httpx.Response(200, json=flex_only))(lambda s: s.get_ranked_standing(PUUID))) is None
    assert run(_source(lambda r: httpx.Response(404))(lambda s: s.get_ranked_standing(PUUID))) is None


def test_server_errors_are_retried():
    responses = [httpx.Response(503), httpx.Response(502), httpx.Response(200, json=["NA1_1"])]

    def handler(request):
        return responses.pop(0)

    assert run(_source(handler)(lambda s: s.list_match_ids(PUUID, 0, 100))) == ["NA1_1"]
    assert responses == []


def test_rate_limit_waits_then_retries():
    responses = [httpx.Response(429, headers={"Retry-After": "0"}), httpx.Response(200, json=[])]
    assert run(_source(lambda r: responses.pop(0))(lambda s: s.list_match_ids(PUUID, 0, 100))) == []


@pytest.mark.parametrize("header, expected", [("2", 2.0), ("Wed, 21 Oct 2015 07:28:00 GMT", 5.0), ("soon", 5.0), (None, 5.0)])
def test_retry_after_header_parsing(header, expected):
    headers = {"Retry-After": header} if header is not None else {}
    assert RiotAPIClient._retry_after(httpx.Response(429, headers=headers)) == expected


def test_persistent_server_error_raises():
    calls = []

    def handler(request):
        calls.append(1)
        return httpx.Response(500)

    with pytest.raises(RemoteUnavailable) as info:
        run(_source(handler)(lambda s: s.get_match("NA1_1")))
    assert info.value.status_code == 500
    assert len(calls) == 3


@pytest.mark.parametrize("status", [400, 401, 403, 404])
def test_client_errors_raise_without_retry(status):
    calls = []

    def handler(request):
        calls.append(1)
        return httpx.Response(status)

    with pytest.raises(RemoteUnavailable) as info:
        run(_source(handler)(lambda s: s.get_match("NA1_1")))
    assert info.value.status_code == status
    assert len(calls) == 1


def test_timeout_becomes_remote_unavailable():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    with pytest.raises(RemoteUnavailable, match="timeout"):
        run(_source(handler, max_retries=1)(lambda s: s.list_match_ids(PUUID, 0, 100)))


def test_non_list_page_is_malformed():
    with pytest.raises(MalformedRecord):
        run(_source(lambda r: httpx.Response(200, json={"status": "?"}))(lambda s: s.list_match_ids(PUUID, 0, 100)))
