"""Queue type enumeration for ranked matches."""
from enum import Enum


class QueueType(Enum):
    """Ranked queue types in League of Legends.

    Provides:
    - queue_id: numeric queue id carried by match records
    - api_queue_name: string used by league endpoints
    """

    RANKED_SOLO_5x5 = 420  # Solo/Duo Queue
    RANKED_FLEX_SR = 440   # Flex 5v5 Queue

    @property
    def queue_id(self) -> int:
        return self.value

    @property
    def api_queue_name(self) -> str:
        return self.name
