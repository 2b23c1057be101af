"""Repository layer for data access.

This layer wraps external collaborators (the in-process cache stores,
the headless browser, the ad-block filter lists) behind protocol-based
interfaces. Any class implementing the required methods satisfies the
protocol; tests substitute in-memory fakes.
"""

from shields_up.protocols import AdBlocker, CacheStore, RenderingAgent, RenderingSession

from .adblock_filter import FilterListBlocker
from .memory_cache_repository import InMemoryCacheRepository
from .playwright_agent import PlaywrightRenderingAgent, PlaywrightSession

__all__ = [
    "AdBlocker",
    "CacheStore",
    "RenderingAgent",
    "RenderingSession",
    "FilterListBlocker",
    "InMemoryCacheRepository",
    "PlaywrightRenderingAgent",
    "PlaywrightSession",
]
