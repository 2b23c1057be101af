"""Response DTOs for API endpoints."""

from pydantic import BaseModel, Field


class CacheTierStats(BaseModel):
    """Statistics for one cache tier."""

    name: str = Field(..., description="Cache tier name")
    entries: int = Field(..., description="Live entries", ge=0)
    max_entries: int = Field(..., description="Capacity bound before LRU eviction", ge=1)
    ttl_seconds: float = Field(..., description="Entry lifetime in seconds", gt=0)
    hits: int = Field(..., description="Lookups served from cache", ge=0)
    misses: int = Field(..., description="Lookups that missed or found an expired entry", ge=0)
    evictions: int = Field(0, description="Entries evicted for capacity", ge=0)


class CacheStatsResponse(BaseModel):
    """Response DTO for cache statistics."""

    page_cache: CacheTierStats
    asset_cache: CacheTierStats


class CacheClearResponse(BaseModel):
    """Response DTO for cache clear operation."""

    success: bool = Field(..., description="Whether the operation succeeded")
    deleted_count: int = Field(..., description="Entries removed across both tiers", ge=0)
    message: str = Field(..., description="Human-readable status message")


class HealthCheckResponse(BaseModel):
    """Response DTO for health check."""

    status: str = Field(..., description="Health status: 'healthy'")
    browser_ready: bool = Field(..., description="Whether the shared browser is launched and connected")
    adblock_rules: int = Field(..., description="Number of loaded ad-block network rules", ge=0)
