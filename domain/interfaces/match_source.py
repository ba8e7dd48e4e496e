"""Contract the aggregation cache needs from the remote match source."""
from abc import ABC, abstractmethod
from typing import List, Optional

from ..entities import MatchRecord, RankedStanding


class IMatchSource(ABC):
    """Read-only view of a player's match history and ranked standing.

    Every method raises ``RemoteUnavailable`` when the source cannot answer and
    ``MalformedRecord`` when it answers with something unexpected.
    """

    @abstractmethod
    async def list_match_ids(self, puuid: str, start: int, count: int) -> List[str]:
        """One page of match ids, most recent first. Empty means no more pages."""

    @abstractmethod
    async def get_match(self, match_id: str) -> MatchRecord:
        """The full record of one match."""

    @abstractmethod
    async def get_ranked_standing(self, puuid: str) -> Optional[RankedStanding]:
        """Solo/duo standing, or None when the player is unranked there."""
