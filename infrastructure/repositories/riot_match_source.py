"""Match source backed by the Riot API."""
import logging
from typing import List, Optional

from domain.entities import MatchParticipant, MatchRecord, RankedStanding
from domain.enums import QueueType, Rank
from domain.errors import MalformedRecord
from domain.interfaces import IMatchSource
from infrastructure.api import RiotAPIClient

logger = logging.getLogger(__name__)


class RiotMatchSource(IMatchSource):
    """Adapts raw Riot API payloads to domain entities."""

    def __init__(self, api_client: RiotAPIClient, ranked_queue: QueueType = QueueType.RANKED_SOLO_5x5):
        """
        Initialize match source.

        Args:
            api_client: Riot API client instance (already entered)
            ranked_queue: league queue whose standing is reported as the rank
        """
        self.api_client = api_client
        self.ranked_queue = ranked_queue

    async def list_match_ids(self, puuid: str, start: int, count: int) -> List[str]:
        ids = await self.api_client.get_match_ids_by_puuid(puuid, start=start, count=count)
        if not isinstance(ids, list) or not all(isinstance(i, str) for i in ids):
            raise MalformedRecord(f"match id page for {puuid} is not a list of strings")
        return ids

    async def get_match(self, match_id: str) -> MatchRecord:
        data = await self.api_client.get_match_by_id(match_id)
        return self._parse_match_data(match_id, data)

    async def get_ranked_standing(self, puuid: str) -> Optional[RankedStanding]:
        entries = await self.api_client.get_league_entries_by_puuid(puuid)
        if not isinstance(entries, list):
            raise MalformedRecord(f"league entries for {puuid} are not a list")
        logger.debug(f"Rank data for {puuid}: {entries}")
        entry = next(
            (e for e in entries if isinstance(e, dict) and e.get('queueType') == self.ranked_queue.api_queue_name),
            None,
        )
        if entry is None:
            return None
        return self._parse_league_entry(entry)

    def _parse_match_data(self, match_id: str, data) -> MatchRecord:
        """Parse raw API match data into a MatchRecord."""
        info = data.get('info') if isinstance(data, dict) else None
        if not isinstance(info, dict):
            raise MalformedRecord(f"match {match_id} has no info block")
        metadata = data.get('metadata') or {}
        if not isinstance(metadata, dict):
            raise MalformedRecord(f"match {match_id} has a malformed metadata block")
        try:
            participants = tuple(
                MatchParticipant(
                    puuid=str(p['puuid']),
                    champion_name=str(p['championName']),
                    win=bool(p['win']),
                )
                for p in info.get('participants', [])
            )
            return MatchRecord(
                match_id=metadata.get('matchId', match_id),
                queue_id=int(info['queueId']),
                created_at_ms=int(info['gameCreation']),
                duration_s=self._duration_seconds(info),
                participants=participants,
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedRecord(f"match {match_id} is malformed: {exc!r}") from exc

    @staticmethod
    def _duration_seconds(info: dict) -> int:
        # Before patch 11.20 gameDuration was milliseconds and there was no
        # gameEndTimestamp; its presence marks the seconds format.
        duration = int(info['gameDuration'])
        if 'gameEndTimestamp' not in info:
            return duration // 1000
        return duration

    def _parse_league_entry(self, entry: dict) -> RankedStanding:
        tier = Rank.from_string(str(entry.get('tier', '')))
        if tier is None:
            raise MalformedRecord(f"unknown tier {entry.get('tier')!r}")
        try:
            return RankedStanding(
                queue_type=entry['queueType'],
                tier=tier,
                division=str(entry['rank']),
                league_points=int(entry['leaguePoints']),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedRecord(f"league entry is malformed: {exc!r}") from exc
