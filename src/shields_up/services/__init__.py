"""Service layer for business logic.

This layer contains the proxy engine: URL resolution, HTML rewriting,
client shim generation, header policy and the request orchestration
that ties them to the cache and rendering collaborators.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Browser / Cache / Filter lists)
"""

from .client_shim import build_client_shim, inject_client_shim
from .html_rewriter import rewrite_html
from .proxy_service import ProxyService, is_hard_blocked
from .security_headers import build_security_headers
from .url_resolver import UrlKind, classify, ensure_http_url, resolve, to_page_url, to_proxy_url

__all__ = [
    "ProxyService",
    "UrlKind",
    "build_client_shim",
    "build_security_headers",
    "classify",
    "ensure_http_url",
    "inject_client_shim",
    "is_hard_blocked",
    "resolve",
    "rewrite_html",
    "to_page_url",
    "to_proxy_url",
]
