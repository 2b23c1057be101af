"""Ad-block collaborator protocol.

Once attached, the session silently drops requests matching the loaded
advertising/tracking rules. Callers never see blocked requests as
distinct from absent ones.
"""

from typing import Protocol, runtime_checkable

from .rendering_agent import RenderingSession


@runtime_checkable
class AdBlocker(Protocol):
    """Protocol for ad/tracker blockers."""

    @property
    def rule_count(self) -> int:
        """Number of network rules loaded (0 before loading)."""
        ...

    async def attach(self, session: RenderingSession) -> None:
        """Install request blocking on session, loading rules on first use."""
        ...

    async def close(self) -> None:
        """Release any resources held for loading rule lists."""
        ...
