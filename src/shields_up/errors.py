"""Error taxonomy for the proxy engine.

Services raise these; the handler layer maps them to HTTP status codes.
A single attribute that fails to resolve during rewriting is not an
error at all: the rewriter leaves it untouched.
"""


class ProxyError(Exception):
    """Base class for request-level proxy failures."""

    def __init__(self, target_url: str | None, reason: str = "") -> None:
        self.target_url = target_url
        self.reason = reason
        message = f"{target_url}: {reason}" if reason else str(target_url)
        super().__init__(message)


class InvalidTargetError(ProxyError):
    """The target URL is missing or not an absolute http(s) URL."""


class UpstreamTimeoutError(ProxyError):
    """Rendering or fetching exceeded its time bound."""


class UpstreamFailureError(ProxyError):
    """Navigation failed at the transport level."""


class EmptyUpstreamResponseError(UpstreamFailureError):
    """Navigation completed without producing a response."""
