"""Proxy service for page rendering and asset pass-through.

This service orchestrates a request end to end: cache lookup, rendering
through the browser with ad blocking attached, rewriting, cache store.
Every rendering session it opens is closed on every exit path, including
timeouts and errors.

Concurrent requests for the same uncached URL are not coalesced: each
renders independently and the last write to the cache wins.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Awaitable, Callable, Iterable, TypeVar

from shields_up.config import Settings, settings
from shields_up.entities import (
    CachedAssetEntity,
    CacheStatus,
    ProxiedAssetEntity,
    ProxiedPageEntity,
    RequestInfoEntity,
)
from shields_up.entities.cached_asset import DEFAULT_CONTENT_TYPE
from shields_up.errors import EmptyUpstreamResponseError, ProxyError, UpstreamTimeoutError
from shields_up.protocols import AdBlocker, CacheStore, RenderingAgent, RenderingSession
from shields_up.repositories import (
    FilterListBlocker,
    InMemoryCacheRepository,
    PlaywrightRenderingAgent,
)

from .client_shim import inject_client_shim
from .html_rewriter import rewrite_html
from .security_headers import build_security_headers, with_cache_status
from .url_resolver import ensure_http_url

logger = logging.getLogger(__name__)

T = TypeVar("T")

PAGE_WAIT_UNTIL = "networkidle"
ASSET_WAIT_UNTIL = "domcontentloaded"


def is_hard_blocked(url: str, domains: Iterable[str]) -> bool:
    """Check url against the hard-block domain substrings."""
    return any(domain in url for domain in domains)


class ProxyService:
    """Core proxy orchestration service.

    This service depends on PROTOCOLS, not concrete implementations:
    - CacheStore: one instance for pages, one for assets
    - RenderingAgent: Playwright in production, fakes in tests
    - AdBlocker: filter lists in production

    Example:
        ```python
        from shields_up.services import ProxyService

        proxy = ProxyService.create()
        page = await proxy.render_page("https://example.com/")
        print(page.cache_status, len(page.html))
        ```
    """

    def __init__(
        self,
        page_cache: CacheStore,
        asset_cache: CacheStore,
        agent: RenderingAgent,
        ad_blocker: AdBlocker,
        origin: str,
        hard_block_domains: Iterable[str] = (),
        page_timeout: float = 60.0,
        asset_timeout: float = 45.0,
    ) -> None:
        """Initialize the proxy service.

        Args:
            page_cache: Store for rewritten HTML keyed by page URL.
            asset_cache: Store for CachedAssetEntity keyed by asset URL.
            agent: Shared rendering agent.
            ad_blocker: Blocker attached to every session.
            origin: Public origin used in every proxy-relative link.
            hard_block_domains: Substrings that always abort a request.
            page_timeout: Render bound in seconds.
            asset_timeout: Asset fetch bound in seconds.
        """
        self._page_cache = page_cache
        self._asset_cache = asset_cache
        self._agent = agent
        self._ad_blocker = ad_blocker
        self._origin = origin.rstrip("/")
        self._hard_block_domains = tuple(hard_block_domains)
        self._page_timeout = page_timeout
        self._asset_timeout = asset_timeout
        self._security_headers = build_security_headers(self._origin)

    @classmethod
    def create(
        cls,
        config: Settings | None = None,
        agent: RenderingAgent | None = None,
        ad_blocker: AdBlocker | None = None,
        clock: Callable[[], float] | None = None,
    ) -> "ProxyService":
        """Factory method wiring the default collaborators from settings.

        Args:
            config: Settings to use. If None, uses the global settings.
            agent: Rendering agent. If None, a Playwright agent is created.
            ad_blocker: Blocker. If None, a filter-list blocker is created.
            clock: Time source for both caches.

        Returns:
            Configured ProxyService instance
        """
        config = config or settings
        return cls(
            page_cache=InMemoryCacheRepository(
                max_entries=config.page_cache_max_entries,
                ttl=config.page_cache_ttl,
                clock=clock,
                name="page_cache",
            ),
            asset_cache=InMemoryCacheRepository(
                max_entries=config.asset_cache_max_entries,
                ttl=config.asset_cache_ttl,
                clock=clock,
                name="asset_cache",
            ),
            agent=agent or PlaywrightRenderingAgent.create(headless=config.browser_headless),
            ad_blocker=ad_blocker or FilterListBlocker.create(config.adblock_lists),
            origin=config.origin,
            hard_block_domains=config.hard_block_domains,
            page_timeout=config.page_render_timeout,
            asset_timeout=config.asset_fetch_timeout,
        )

    async def render_page(self, target_url: str | None) -> ProxiedPageEntity:
        """Return the rewritten document for target_url.

        Business logic:
        1. Validate the URL (before any resource is acquired)
        2. Serve from the page cache when fresh
        3. Otherwise render, rewrite, inject the shim and cache the result

        Raises:
            InvalidTargetError: If target_url is not absolute http(s)
            UpstreamTimeoutError: If rendering exceeded the page timeout
            UpstreamFailureError: If navigation failed
        """
        target_url = ensure_http_url(target_url)
        cache_key = f"html:{target_url}"

        cached = self._page_cache.get(cache_key)
        if cached is not None:
            logger.debug("Page cache HIT %s", target_url)
            return ProxiedPageEntity(url=target_url, html=cached, cache_status=CacheStatus.HIT)

        logger.debug("Page cache MISS %s", target_url)
        raw_html = await self._bounded(self._render(target_url), self._page_timeout, target_url)

        html = rewrite_html(raw_html, target_url, self._origin)
        html = inject_client_shim(html, target_url, self._origin)

        self._page_cache.set(cache_key, html)
        return ProxiedPageEntity(url=target_url, html=html, cache_status=CacheStatus.MISS)

    async def fetch_asset(self, target_url: str | None) -> ProxiedAssetEntity:
        """Return upstream bytes and content type for target_url.

        Callers route HTML-like URLs to render_page; this method fetches
        whatever it is given.

        Raises:
            InvalidTargetError: If target_url is not absolute http(s)
            UpstreamTimeoutError: If the fetch exceeded the asset timeout
            EmptyUpstreamResponseError: If navigation produced no response
            UpstreamFailureError: If navigation failed
        """
        target_url = ensure_http_url(target_url)
        cache_key = f"asset:{target_url}"

        cached = self._asset_cache.get(cache_key)
        if cached is not None:
            logger.debug("Asset cache HIT %s", target_url)
            return ProxiedAssetEntity(url=target_url, asset=cached, cache_status=CacheStatus.HIT)

        logger.debug("Asset cache MISS %s", target_url)
        asset = await self._bounded(self._download(target_url), self._asset_timeout, target_url)

        self._asset_cache.set(cache_key, asset)
        return ProxiedAssetEntity(url=target_url, asset=asset, cache_status=CacheStatus.MISS)

    def security_headers(self, cache_status: CacheStatus) -> dict[str, str]:
        """Headers for an HTML response; only the cache status varies."""
        return with_cache_status(self._security_headers, cache_status)

    def is_hard_blocked(self, request: RequestInfoEntity) -> bool:
        return is_hard_blocked(request.url, self._hard_block_domains)

    async def _bounded(self, work: Awaitable[T], timeout: float, target_url: str) -> T:
        try:
            return await asyncio.wait_for(work, timeout=timeout)
        except asyncio.TimeoutError as e:
            logger.warning("Upstream timeout after %.0fs for %s", timeout, target_url)
            raise UpstreamTimeoutError(target_url, f"exceeded {timeout:.0f}s") from e
        except ProxyError as e:
            logger.warning("Upstream failure for %s: %s", target_url, e.reason or e)
            raise

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[RenderingSession]:
        session = await self._agent.new_session()
        try:
            await self._ad_blocker.attach(session)
            # Registered last so it is consulted before the ad blocker
            await session.intercept_requests(self.is_hard_blocked)
            yield session
        finally:
            await session.close()

    async def _render(self, target_url: str) -> str:
        async with self._session() as session:
            await session.navigate(
                target_url,
                wait_until=PAGE_WAIT_UNTIL,
                timeout_ms=self._page_timeout * 1000,
            )
            return await session.content()

    async def _download(self, target_url: str) -> CachedAssetEntity:
        async with self._session() as session:
            response = await session.navigate(
                target_url,
                wait_until=ASSET_WAIT_UNTIL,
                timeout_ms=self._asset_timeout * 1000,
            )
            if response is None:
                raise EmptyUpstreamResponseError(target_url, "navigation returned no response")

            body = await response.body()
            content_type = response.headers.get("content-type") or DEFAULT_CONTENT_TYPE
            return CachedAssetEntity(body=body, content_type=content_type)

    def get_stats(self) -> dict:
        """Get statistics for both cache tiers."""
        return {
            "page_cache": self._page_cache.get_stats(),
            "asset_cache": self._asset_cache.get_stats(),
        }

    def clear(self) -> int:
        """Clear both caches.

        Returns:
            Number of entries deleted
        """
        return self._page_cache.clear() + self._asset_cache.clear()

    def health(self) -> dict:
        """Report collaborator readiness."""
        return {
            "browser_ready": self._agent.is_ready,
            "adblock_rules": self._ad_blocker.rule_count,
        }

    async def shutdown(self) -> None:
        """Release the browser and blocker resources."""
        await self._agent.shutdown()
        await self._ad_blocker.close()

    @property
    def origin(self) -> str:
        """Get the public origin used for proxy links."""
        return self._origin
