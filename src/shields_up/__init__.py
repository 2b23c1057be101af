"""Shields-Up - filtering reverse proxy.

Renders third-party pages in a headless browser with ad/tracker blocking,
rewrites every subresource reference to re-enter the proxy, and injects a
client shim so runtime fetch/XHR/navigation stays proxied too.

Layers:
    - protocols: Interface contracts (CacheStore, RenderingAgent, AdBlocker)
    - repositories: Browser, filter-list and in-memory cache implementations
    - services: URL resolution, rewriting, shim, header policy, orchestration
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from shields_up.services import ProxyService

    proxy = ProxyService.create()
    page = await proxy.render_page("https://example.com/")
    ```

For HTTP API:
    ```python
    from shields_up.api.app import app
    ```
"""

from shields_up.config import get_settings, settings
from shields_up.entities import CachedAssetEntity, CacheStatus, ProxiedAssetEntity, ProxiedPageEntity
from shields_up.errors import (
    EmptyUpstreamResponseError,
    InvalidTargetError,
    ProxyError,
    UpstreamFailureError,
    UpstreamTimeoutError,
)
from shields_up.handlers import ProxyHandler
from shields_up.protocols import AdBlocker, CacheStore, RenderingAgent, RenderingSession
from shields_up.repositories import FilterListBlocker, InMemoryCacheRepository, PlaywrightRenderingAgent
from shields_up.services import ProxyService

__all__ = [
    # Configuration
    "settings",
    "get_settings",
    # Protocols (interfaces)
    "AdBlocker",
    "CacheStore",
    "RenderingAgent",
    "RenderingSession",
    # Services (business logic)
    "ProxyService",
    # Handlers (HTTP)
    "ProxyHandler",
    # Repositories (collaborators)
    "FilterListBlocker",
    "InMemoryCacheRepository",
    "PlaywrightRenderingAgent",
    # Entities (domain models)
    "CacheStatus",
    "CachedAssetEntity",
    "ProxiedAssetEntity",
    "ProxiedPageEntity",
    # Errors
    "ProxyError",
    "InvalidTargetError",
    "UpstreamTimeoutError",
    "UpstreamFailureError",
    "EmptyUpstreamResponseError",
]
