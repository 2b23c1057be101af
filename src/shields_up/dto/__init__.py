"""Data Transfer Objects for API contracts.

These Pydantic models define the JSON endpoints' external contract.
Proxied pages and assets are returned as raw responses, not DTOs.
"""

from .responses import CacheClearResponse, CacheStatsResponse, CacheTierStats, HealthCheckResponse

__all__ = [
    "CacheClearResponse",
    "CacheStatsResponse",
    "CacheTierStats",
    "HealthCheckResponse",
]
