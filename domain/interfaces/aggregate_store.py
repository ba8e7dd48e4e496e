"""Contract for durable storage of player aggregates."""
from abc import ABC, abstractmethod
from typing import Dict, Iterable

from ..entities import PlayerAggregate


class IAggregateStore(ABC):
    """Keyed by puuid. Writes are atomic: readers see the old or the new state."""

    @abstractmethod
    def load_all(self) -> Dict[str, PlayerAggregate]:
        """Every stored aggregate. Raises ``PersistenceFailure`` when unreadable."""

    @abstractmethod
    def save(self, aggregates: Iterable[PlayerAggregate]) -> None:
        """Upsert the given aggregates in one transaction."""

    def close(self) -> None:
        pass
