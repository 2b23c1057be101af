"""HTTP handlers for proxy operations.

Handlers convert service results into responses and map the error
taxonomy to status codes. Clients only ever see generic failure
messages; details go to the server log.
"""

import logging

from fastapi import status
from fastapi.responses import HTMLResponse, PlainTextResponse, RedirectResponse, Response

from shields_up.dto import CacheClearResponse, CacheStatsResponse, CacheTierStats, HealthCheckResponse
from shields_up.entities import CacheStatus
from shields_up.errors import EmptyUpstreamResponseError, InvalidTargetError, ProxyError
from shields_up.services import ProxyService, UrlKind, classify, ensure_http_url, to_page_url
from shields_up.services.security_headers import CACHE_STATUS_HEADER

logger = logging.getLogger(__name__)

LIVENESS_MESSAGE = "Shields-Up proxy is running. Use /proxy?url=https://..."
PAGE_FAILURE_MESSAGE = "Bad request or upstream failure."
ASSET_FAILURE_MESSAGE = "Asset fetch failed."
ASSET_EMPTY_MESSAGE = "Upstream asset error"


class ProxyHandler:
    """HTTP handlers for the page and asset endpoints.

    Example:
        ```python
        handler = ProxyHandler(proxy_service=ProxyService.create())

        @app.get("/proxy")
        async def proxy(url: str | None = None):
            return await handler.proxy_page(url)
        ```
    """

    def __init__(self, proxy_service: ProxyService, asset_max_age: int = 600) -> None:
        """Initialize the proxy handler.

        Args:
            proxy_service: The proxy service for business logic (required).
            asset_max_age: max-age advertised in Cache-Control for assets.
        """
        self._proxy = proxy_service
        self._asset_max_age = asset_max_age

    async def root(self) -> PlainTextResponse:
        """Handle GET / liveness requests."""
        return PlainTextResponse(LIVENESS_MESSAGE)

    async def proxy_page(self, url: str | None) -> Response:
        """Handle GET /proxy requests.

        Args:
            url: Absolute http(s) page URL from the query string

        Returns:
            Rewritten HTML with security headers, or 400 on any failure
        """
        try:
            page = await self._proxy.render_page(url)
        except ProxyError:
            return PlainTextResponse(PAGE_FAILURE_MESSAGE, status_code=status.HTTP_400_BAD_REQUEST)
        except Exception:
            logger.exception("Unexpected failure proxying page %s", url)
            return PlainTextResponse(PAGE_FAILURE_MESSAGE, status_code=status.HTTP_400_BAD_REQUEST)

        return HTMLResponse(page.html, headers=self._proxy.security_headers(page.cache_status))

    async def proxy_asset(self, url: str | None) -> Response:
        """Handle GET /asset requests.

        HTML-like URLs are redirected to /proxy so pages never bypass
        rewriting.

        Args:
            url: Absolute http(s) asset URL from the query string

        Returns:
            Upstream bytes with the upstream content type, a 302 for pages,
            400 on invalid input or failure, 502 when upstream sent nothing
        """
        try:
            target_url = ensure_http_url(url)
        except InvalidTargetError:
            return PlainTextResponse(ASSET_FAILURE_MESSAGE, status_code=status.HTTP_400_BAD_REQUEST)

        if classify(target_url) is UrlKind.HTML:
            return RedirectResponse(to_page_url("", target_url), status_code=status.HTTP_302_FOUND)

        try:
            result = await self._proxy.fetch_asset(target_url)
        except EmptyUpstreamResponseError:
            return PlainTextResponse(ASSET_EMPTY_MESSAGE, status_code=status.HTTP_502_BAD_GATEWAY)
        except ProxyError:
            return PlainTextResponse(ASSET_FAILURE_MESSAGE, status_code=status.HTTP_400_BAD_REQUEST)
        except Exception:
            logger.exception("Unexpected failure fetching asset %s", target_url)
            return PlainTextResponse(ASSET_FAILURE_MESSAGE, status_code=status.HTTP_400_BAD_REQUEST)

        return Response(
            content=result.asset.body,
            headers=self._asset_headers(result.asset.content_type, result.cache_status),
        )

    def _asset_headers(self, content_type: str, cache_status: CacheStatus) -> dict[str, str]:
        return {
            "Content-Type": content_type,
            "Cache-Control": f"public, max-age={self._asset_max_age}",
            "Access-Control-Allow-Origin": "*",
            CACHE_STATUS_HEADER: cache_status.value,
        }

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        health = self._proxy.health()
        return HealthCheckResponse(
            status="healthy",
            browser_ready=health["browser_ready"],
            adblock_rules=health["adblock_rules"],
        )

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /stats requests."""
        stats = self._proxy.get_stats()
        return CacheStatsResponse(
            page_cache=CacheTierStats(**stats["page_cache"]),
            asset_cache=CacheTierStats(**stats["asset_cache"]),
        )

    async def clear_cache(self) -> CacheClearResponse:
        """Handle DELETE /cache requests."""
        count = self._proxy.clear()
        logger.info("Cleared %d cache entries", count)
        return CacheClearResponse(
            success=True,
            deleted_count=count,
            message="Cache cleared successfully",
        )
