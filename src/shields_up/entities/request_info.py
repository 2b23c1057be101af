"""Intercepted request domain entity."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestInfoEntity:
    """A request issued by a rendering session, as seen by interceptors.

    Attributes:
        url: The requested URL
        resource_type: Browser resource type (document, script, image, xhr, ...)
        document_url: URL the session was navigated to, empty before navigation
    """

    url: str
    resource_type: str = "other"
    document_url: str = ""
