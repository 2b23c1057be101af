"""Protocol interfaces for swappable implementations.

This package contains protocol definitions using structural typing.
Protocols enable:
- Swapping the rendering agent or ad blocker without touching services
- Unit testing with in-memory fakes
- Clear separation of concerns
"""

from .ad_blocker import AdBlocker
from .cache_store import CacheStore
from .rendering_agent import NavigationResponse, RenderingAgent, RenderingSession, RequestPredicate

__all__ = [
    "AdBlocker",
    "CacheStore",
    "NavigationResponse",
    "RenderingAgent",
    "RenderingSession",
    "RequestPredicate",
]
