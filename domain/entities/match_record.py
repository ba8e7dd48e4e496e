"""Match record as returned by the remote match source."""
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class MatchParticipant:
    """One player's line in a match."""

    puuid: str
    champion_name: str
    win: bool


@dataclass(frozen=True)
class MatchRecord:
    """The slice of a completed match the tracker needs."""

    match_id: str
    queue_id: int
    created_at_ms: int  # Unix timestamp milliseconds
    duration_s: int
    participants: tuple[MatchParticipant, ...] = field(default_factory=tuple)

    def participant(self, puuid: str) -> Optional[MatchParticipant]:
        """Find ``puuid`` among the participants, or None."""
        return next((p for p in self.participants if p.puuid == puuid), None)
