"""Domain enumerations."""
from .region import Region
from .queue_type import QueueType
from .rank import Rank

__all__ = [
    'Region',
    'QueueType',
    'Rank',
]
