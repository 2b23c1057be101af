"""Cached asset domain entity."""

from dataclasses import dataclass

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class CachedAssetEntity:
    """Upstream bytes exactly as received after ad-block filtering.

    Attributes:
        body: The raw response payload
        content_type: Content-Type copied from the upstream response
    """

    body: bytes
    content_type: str = DEFAULT_CONTENT_TYPE
