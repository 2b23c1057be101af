"""Rendering agent protocol.

The rendering agent loads a URL in a full browser environment, executes
its scripts and exposes the resulting document and network response.
A single agent is shared by the whole process; every request opens its
own isolated session against it and closes it when done.
"""

from typing import Callable, Protocol, runtime_checkable

from shields_up.entities import RequestInfoEntity

RequestPredicate = Callable[[RequestInfoEntity], bool]


@runtime_checkable
class NavigationResponse(Protocol):
    """Main-resource response produced by a navigation."""

    @property
    def status(self) -> int:
        """HTTP status code of the response."""
        ...

    @property
    def headers(self) -> dict[str, str]:
        """Response headers with lower-cased names."""
        ...

    async def body(self) -> bytes:
        """Return the raw response body."""
        ...


@runtime_checkable
class RenderingSession(Protocol):
    """A single page/tab owned by exactly one request."""

    async def intercept_requests(self, predicate: RequestPredicate) -> None:
        """Abort every request for which predicate returns True.

        Requests the predicate lets through continue to any other
        interceptor and then to the network.
        """
        ...

    async def navigate(
        self,
        url: str,
        wait_until: str,
        timeout_ms: float,
    ) -> NavigationResponse | None:
        """Navigate the session to url.

        Args:
            url: Absolute http(s) URL
            wait_until: "networkidle" for pages, "domcontentloaded" for assets
            timeout_ms: Navigation bound in milliseconds

        Returns:
            The main-resource response, or None if the browser produced none

        Raises:
            UpstreamTimeoutError: If the navigation exceeded timeout_ms
            UpstreamFailureError: On transport-level failures
        """
        ...

    async def content(self) -> str:
        """Return the serialized document after scripts have run."""
        ...

    async def close(self) -> None:
        """Release the session. Safe to call more than once."""
        ...


@runtime_checkable
class RenderingAgent(Protocol):
    """Process-wide handle to the browser."""

    @property
    def is_ready(self) -> bool:
        """Whether the browser has been launched and is connected."""
        ...

    async def new_session(self) -> RenderingSession:
        """Open a fresh, isolated session, launching the browser on first use."""
        ...

    async def shutdown(self) -> None:
        """Close the browser and release the automation driver."""
        ...
