"""Results handed from the proxy service to the handler layer."""

from dataclasses import dataclass
from enum import Enum

from .cached_asset import CachedAssetEntity


class CacheStatus(str, Enum):
    """Value of the X-Proxy-Cache response header."""

    HIT = "HIT"
    MISS = "MISS"


@dataclass(frozen=True)
class ProxiedPageEntity:
    """A fully rewritten HTML document.

    Attributes:
        url: The upstream page URL
        html: Rewritten document with the client shim injected
        cache_status: Whether the document came from the page cache
    """

    url: str
    html: str
    cache_status: CacheStatus


@dataclass(frozen=True)
class ProxiedAssetEntity:
    """An upstream subresource ready to be passed through."""

    url: str
    asset: CachedAssetEntity
    cache_status: CacheStatus
