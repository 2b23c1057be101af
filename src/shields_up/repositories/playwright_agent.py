"""Playwright-based rendering agent.

One Chromium instance is launched lazily and shared by the whole process.
Each request gets its own browser context and page, so cookies, storage
and script state never leak between unrelated targets.

Requirements:
    - Playwright installed: `pip install playwright`
    - Browser downloaded: `playwright install chromium`
"""

import asyncio
import logging

from playwright.async_api import (
    Browser,
    BrowserContext,
    Page,
    Playwright,
    Response,
    Route,
    async_playwright,
)
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from shields_up.config import settings
from shields_up.entities import RequestInfoEntity
from shields_up.errors import UpstreamFailureError, UpstreamTimeoutError
from shields_up.protocols import RequestPredicate

logger = logging.getLogger(__name__)

DEFAULT_LAUNCH_ARGS = ("--no-sandbox", "--disable-setuid-sandbox")


class PlaywrightNavigationResponse:
    """NavigationResponse backed by a Playwright response."""

    def __init__(self, response: Response) -> None:
        self._response = response

    @property
    def status(self) -> int:
        return self._response.status

    @property
    def headers(self) -> dict[str, str]:
        return self._response.headers

    async def body(self) -> bytes:
        try:
            return await self._response.body()
        except PlaywrightError as e:
            raise UpstreamFailureError(self._response.url, f"body unavailable: {e}") from e


class PlaywrightSession:
    """RenderingSession backed by a dedicated browser context and page.

    Usable as an async context manager; leaving the block closes the
    context on every exit path.
    """

    def __init__(self, context: BrowserContext, page: Page) -> None:
        self._context = context
        self._page = page
        self._document_url = ""
        self._closed = False

    async def __aenter__(self) -> "PlaywrightSession":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def intercept_requests(self, predicate: RequestPredicate) -> None:
        async def handle_route(route: Route) -> None:
            request = route.request
            info = RequestInfoEntity(
                url=request.url,
                resource_type=request.resource_type,
                document_url=self._document_url,
            )
            if predicate(info):
                await route.abort()
                return
            # Let the next registered handler decide, or continue to the network
            await route.fallback()

        await self._page.route("**/*", handle_route)

    async def navigate(
        self,
        url: str,
        wait_until: str,
        timeout_ms: float,
    ) -> PlaywrightNavigationResponse | None:
        self._document_url = url
        try:
            response = await self._page.goto(url, wait_until=wait_until, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise UpstreamTimeoutError(url, f"navigation exceeded {timeout_ms:.0f}ms") from e
        except PlaywrightError as e:
            raise UpstreamFailureError(url, str(e)) from e

        if response is None:
            return None
        return PlaywrightNavigationResponse(response)

    async def content(self) -> str:
        try:
            return await self._page.content()
        except PlaywrightError as e:
            raise UpstreamFailureError(self._document_url, f"content unavailable: {e}") from e

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            await self._context.close()
        except PlaywrightError as e:
            # The browser may already be gone; the context is released either way
            logger.warning("Failed to close rendering session for %s: %s", self._document_url, e)


class PlaywrightRenderingAgent:
    """RenderingAgent backed by a single lazily launched Chromium.

    Launching is guarded by a lock, so concurrent first requests share
    one browser instead of racing to start two.

    Example:
        ```python
        agent = PlaywrightRenderingAgent.create()
        async with await agent.new_session() as session:
            await session.navigate("https://example.com", "networkidle", 60_000)
            html = await session.content()
        await agent.shutdown()
        ```
    """

    def __init__(
        self,
        headless: bool = True,
        launch_args: tuple[str, ...] = DEFAULT_LAUNCH_ARGS,
    ) -> None:
        """Initialize the agent without starting the browser.

        Args:
            headless: Run Chromium without a visible window.
            launch_args: Extra command line flags for Chromium.
        """
        self._headless = headless
        self._launch_args = launch_args
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._lock = asyncio.Lock()

    @classmethod
    def create(cls, headless: bool | None = None) -> "PlaywrightRenderingAgent":
        """Factory method to create the agent with defaults from settings."""
        return cls(headless=settings.browser_headless if headless is None else headless)

    @property
    def is_ready(self) -> bool:
        return self._browser is not None and self._browser.is_connected()

    async def launch(self) -> Browser:
        """Return the shared browser, launching it on first use.

        Returns:
            The connected Browser instance

        Raises:
            UpstreamFailureError: If Chromium cannot be started
        """
        async with self._lock:
            if self._browser is not None and self._browser.is_connected():
                return self._browser

            if self._browser is not None:
                logger.warning("Browser disconnected, relaunching")
                self._browser = None

            try:
                if self._playwright is None:
                    self._playwright = await async_playwright().start()
                self._browser = await self._playwright.chromium.launch(
                    headless=self._headless,
                    args=list(self._launch_args),
                )
            except PlaywrightError as e:
                raise UpstreamFailureError(None, f"browser launch failed: {e}") from e

            logger.info("Launched Chromium %s (headless=%s)", self._browser.version, self._headless)
            return self._browser

    async def new_session(self) -> PlaywrightSession:
        browser = await self.launch()
        try:
            context = await browser.new_context()
        except PlaywrightError as e:
            raise UpstreamFailureError(None, f"cannot open browser context: {e}") from e

        try:
            page = await context.new_page()
        except PlaywrightError as e:
            await context.close()
            raise UpstreamFailureError(None, f"cannot open page: {e}") from e

        return PlaywrightSession(context, page)

    async def shutdown(self) -> None:
        async with self._lock:
            if self._browser is not None:
                await self._browser.close()
                self._browser = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None
        logger.info("Browser shut down")
