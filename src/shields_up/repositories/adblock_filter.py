"""Filter-list ad blocker.

Loads Adblock Plus format lists (EasyList, EasyPrivacy, ...) from URLs or
local files and matches every request a rendering session issues against
them with adblockparser. Lists are loaded once per process, on first use.

A list that cannot be fetched is logged and skipped. If nothing loads the
blocker lets everything through rather than failing every request.
"""

import asyncio
import logging
import re
from pathlib import Path
from urllib.parse import urlsplit

import httpx
from adblockparser import AdblockRules

from shields_up.config import settings
from shields_up.entities import RequestInfoEntity
from shields_up.protocols import RenderingSession

logger = logging.getLogger(__name__)

# Browser resource types mapped to Adblock Plus type options
RESOURCE_TYPE_OPTIONS = {
    "script": "script",
    "image": "image",
    "stylesheet": "stylesheet",
    "xhr": "xmlhttprequest",
    "fetch": "xmlhttprequest",
    "media": "media",
    "websocket": "websocket",
    "ping": "ping",
    "font": "other",
    "other": "other",
}
TYPE_OPTIONS = frozenset(RESOURCE_TYPE_OPTIONS.values()) | {
    "subdocument",
    "document",
    "object",
    "object-subrequest",
}

# Cosmetic (element hiding) rules have no network meaning
COSMETIC_MARKERS = ("##", "#@#", "#?#", "#$#")


def parse_filter_lines(text: str) -> list[str]:
    """Extract network rules from an Adblock Plus list.

    Args:
        text: Raw list contents

    Returns:
        Rule lines without blanks, comments, headers or cosmetic rules
    """
    rules = []
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("!") or line.startswith("["):
            continue
        if any(marker in line for marker in COSMETIC_MARKERS):
            continue
        rules.append(line)
    return rules


def _host(url: str) -> str:
    host = (urlsplit(url).hostname or "").lower()
    return host[4:] if host.startswith("www.") else host


def request_options(request: RequestInfoEntity) -> dict[str, bool | str]:
    """Build the adblockparser options dict for a request.

    Every type option is present so typed rules are never skipped for
    lack of information.
    """
    options: dict[str, bool | str] = {option: False for option in TYPE_OPTIONS}

    if request.resource_type == "document":
        # Frames navigate as documents too; the top-level page itself is untyped
        if request.document_url and request.url != request.document_url:
            options["subdocument"] = True
    else:
        options[RESOURCE_TYPE_OPTIONS.get(request.resource_type, "other")] = True

    page_host = _host(request.document_url)
    request_host = _host(request.url)
    options["third-party"] = bool(page_host) and not (
        request_host == page_host or request_host.endswith("." + page_host)
    )
    if page_host:
        options["domain"] = page_host
    return options


def compile_rules(lines: list[str]) -> AdblockRules:
    """Build AdblockRules with every rule regex already compiled.

    adblockparser compiles the regex of a rule with options on its first
    match, which would otherwise happen inside a request interceptor.
    """
    rules = AdblockRules(lines, skip_unsupported_rules=True)
    for rule in rules.rules:
        if rule.regex_re is None:
            rule.regex_re = re.compile(rule.regex)
    return rules


class FilterListBlocker:
    """AdBlocker backed by adblockparser rules.

    This class satisfies the AdBlocker protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        blocker = FilterListBlocker.create()
        await blocker.load()
        blocker.should_block(RequestInfoEntity(url="https://doubleclick.net/ad.js"))
        ```
    """

    def __init__(
        self,
        sources: tuple[str, ...] | list[str],
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ) -> None:
        """Initialize the blocker without loading any list.

        Args:
            sources: List URLs (http/https) or local file paths.
            http_client: Client for remote lists. Created lazily if None.
            timeout: Download timeout per list in seconds.
        """
        self._sources = tuple(sources)
        self._client = http_client
        self._timeout = timeout
        self._rules: AdblockRules | None = None
        self._rule_count = 0
        self._loaded = False
        self._lock = asyncio.Lock()

    @classmethod
    def create(cls, sources: tuple[str, ...] | None = None) -> "FilterListBlocker":
        """Factory method to create the blocker with lists from settings."""
        return cls(sources=sources if sources is not None else settings.adblock_lists)

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
        return self._client

    @property
    def rule_count(self) -> int:
        return self._rule_count

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    async def load(self) -> "FilterListBlocker":
        """Load and compile all sources once; later calls return immediately.

        Returns:
            self, for chaining
        """
        async with self._lock:
            if self._loaded:
                return self

            lines: list[str] = []
            for source in self._sources:
                try:
                    text = await self._read_source(source)
                except (httpx.HTTPError, OSError) as e:
                    logger.warning("Skipping ad-block list %s: %s", source, e)
                    continue
                parsed = parse_filter_lines(text)
                logger.info("Loaded %d rules from %s", len(parsed), source)
                lines.extend(parsed)

            if lines:
                # Compiling thousands of rules is CPU bound; keep it off the event loop
                self._rules = await asyncio.to_thread(compile_rules, lines)
            else:
                logger.warning("No ad-block rules loaded, request blocking disabled")
            self._rule_count = len(lines)
            self._loaded = True
        return self

    async def _read_source(self, source: str) -> str:
        if source.lower().startswith(("http://", "https://")):
            response = await self.client.get(source)
            response.raise_for_status()
            return response.text
        return Path(source).read_text(encoding="utf-8")

    def should_block(self, request: RequestInfoEntity) -> bool:
        """Check whether request matches a blocking rule."""
        if self._rules is None:
            return False
        return bool(self._rules.should_block(request.url, request_options(request)))

    async def attach(self, session: RenderingSession) -> None:
        await self.load()
        await session.intercept_requests(self.should_block)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
