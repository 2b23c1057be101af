"""Response header policy for rewritten HTML."""

from shields_up.entities import CacheStatus

CACHE_STATUS_HEADER = "X-Proxy-Cache"


def build_content_security_policy(origin: str) -> str:
    """Build the CSP for proxied pages.

    Subresources are already rewritten to the proxy, so network access is
    limited to this origin plus inline, data: and blob: content. <base>
    may point upstream so the shim's fallback element takes effect.
    """
    sources = f"'self' {origin}"
    return " ".join(
        [
            f"default-src {sources} data: blob:;",
            f"img-src {sources} data: blob:;",
            f"media-src {sources} data: blob:;",
            f"font-src {sources} data: blob:;",
            f"style-src {sources} 'unsafe-inline';",
            f"script-src {sources} 'unsafe-inline';",
            f"connect-src {sources};",
            f"frame-src {sources};",
            "frame-ancestors 'self';",
            "object-src 'none';",
            "base-uri 'self' http: https:;",
            f"form-action {sources};",
        ]
    )


def build_security_headers(origin: str) -> dict[str, str]:
    """Build the fixed header set applied to every HTML response."""
    return {
        "Content-Security-Policy": build_content_security_policy(origin),
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "SAMEORIGIN",
        "Referrer-Policy": "no-referrer",
    }


def with_cache_status(headers: dict[str, str], cache_status: CacheStatus) -> dict[str, str]:
    """Return a copy of headers with the cache-status header set."""
    return {**headers, CACHE_STATUS_HEADER: cache_status.value}
