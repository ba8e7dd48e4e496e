"""Infrastructure layer - API client and repositories."""
from .api import RiotAPIClient, RateLimiter, EndpointRateLimiter
from .repositories import RiotMatchSource, SqliteAggregateStore

__all__ = [
    'RiotAPIClient',
    'RateLimiter',
    'EndpointRateLimiter',
    'RiotMatchSource',
    'SqliteAggregateStore',
]
