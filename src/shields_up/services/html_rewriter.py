"""HTML attribute rewriting.

The rendered document is parsed into a tree, resource-bearing attributes
are rewritten to proxy-relative URLs, and the tree is serialized back.
Values that do not resolve to an absolute http(s) URL are left as they
are: a skipped attribute never aborts the rest of the document.

URLs inside <style> blocks, style attributes and srcset are not rewritten.
"""

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.formatter import HTMLFormatter

from .url_resolver import is_proxied, resolve, to_proxy_url

REWRITE_ATTRIBUTES = ("src", "href", "poster", "data-src", "data-href")

# Void elements serialize as <img ...> rather than <img .../>
_FORMATTER = HTMLFormatter(
    entity_substitution=EntitySubstitution.substitute_xml,
    void_element_close_prefix=None,
)


def rewrite_reference(value: str, base_url: str, origin: str) -> str | None:
    """Rewrite a single attribute value.

    Returns:
        The proxy-relative URL, or None to leave the value untouched
    """
    stripped = value.strip()
    if not stripped or stripped.startswith("#") or is_proxied(origin, stripped):
        return None

    absolute = resolve(base_url, stripped)
    if absolute is None:
        return None
    return to_proxy_url(origin, absolute)


def _document_base(soup: BeautifulSoup, base_url: str) -> str:
    # A <base href> in the document changes what relative links resolve to
    base = soup.find("base", href=True)
    if base is None:
        return base_url
    return resolve(base_url, base["href"]) or base_url


def rewrite_html(html: str, base_url: str, origin: str) -> str:
    """Rewrite every resource-bearing attribute in html.

    Args:
        html: Serialized document from the rendering agent
        base_url: URL the document was loaded from
        origin: Public origin of this proxy

    Returns:
        The re-serialized document
    """
    soup = BeautifulSoup(html, "html.parser")
    effective_base = _document_base(soup, base_url)

    for element in soup.find_all(True):
        if element.name == "base":
            continue
        for attribute in REWRITE_ATTRIBUTES:
            value = element.get(attribute)
            if not isinstance(value, str):
                continue
            rewritten = rewrite_reference(value, effective_base, origin)
            if rewritten is not None:
                element[attribute] = rewritten

    return soup.decode(formatter=_FORMATTER)
