"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cached_asset import CachedAssetEntity
from .proxied import CacheStatus, ProxiedAssetEntity, ProxiedPageEntity
from .request_info import RequestInfoEntity

__all__ = [
    "CacheStatus",
    "CachedAssetEntity",
    "ProxiedAssetEntity",
    "ProxiedPageEntity",
    "RequestInfoEntity",
]
