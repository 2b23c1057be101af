"""URL absolutization, classification and proxy-link construction."""

import re
from enum import Enum
from urllib.parse import quote, urljoin, urlsplit

from shields_up.errors import InvalidTargetError

HTTP_URL = re.compile(r"^https?://", re.IGNORECASE)

# Extensions served by page-generating backends rather than as static files
HTML_EXTENSIONS = frozenset({"html", "htm", "php", "asp", "aspx", "jsp", "do"})
_EXTENSION = re.compile(r"\.([A-Za-z0-9]+)$")

ASSET_ENDPOINT = "/asset"
PAGE_ENDPOINT = "/proxy"


class UrlKind(str, Enum):
    """Routing class of a target URL."""

    HTML = "html"
    ASSET = "asset"


def is_http_url(value: str | None) -> bool:
    """Check that value is an absolute http(s) URL with a host."""
    if not value or not HTTP_URL.match(value):
        return False
    try:
        return bool(urlsplit(value).netloc)
    except ValueError:
        return False


def ensure_http_url(value: str | None) -> str:
    """Validate a target URL taken from a request.

    Raises:
        InvalidTargetError: If value is missing or not absolute http(s)
    """
    if not is_http_url(value):
        raise InvalidTargetError(value, "not an absolute http(s) URL")
    return value


def resolve(base: str, reference: str) -> str | None:
    """Resolve reference against base.

    Args:
        base: URL of the document the reference appears in
        reference: Attribute value, absolute or relative

    Returns:
        The absolute http(s) URL, or None when the reference cannot be
        resolved to one (javascript:, data:, malformed base, ...)
    """
    reference = reference.strip()
    if not reference:
        return None
    try:
        absolute = urljoin(base, reference)
    except ValueError:
        return None
    return absolute if is_http_url(absolute) else None


def classify(url: str) -> UrlKind:
    """Classify url as a page to render or an asset to pass through.

    A path whose last segment has no extension counts as a page, so
    routes like /news/today get rewritten instead of served as bytes.
    """
    try:
        path = urlsplit(url).path
    except ValueError:
        return UrlKind.ASSET

    match = _EXTENSION.search(path.rsplit("/", 1)[-1])
    if match is None or match.group(1).lower() in HTML_EXTENSIONS:
        return UrlKind.HTML
    return UrlKind.ASSET


def to_proxy_url(origin: str, absolute_url: str) -> str:
    """Build the asset endpoint URL carrying absolute_url.

    Every character outside the unreserved set is percent-encoded, so
    distinct inputs always produce distinct outputs.
    """
    return f"{origin}{ASSET_ENDPOINT}?url={quote(absolute_url, safe='')}"


def to_page_url(origin: str, absolute_url: str) -> str:
    """Build the page endpoint URL carrying absolute_url.

    An empty origin yields a path relative to this server.
    """
    return f"{origin}{PAGE_ENDPOINT}?url={quote(absolute_url, safe='')}"


def is_proxied(origin: str, value: str) -> bool:
    """Check whether value already points at this proxy's endpoints."""
    return value.startswith(
        (f"{origin}{ASSET_ENDPOINT}?url=", f"{origin}{PAGE_ENDPOINT}?url=")
    )
