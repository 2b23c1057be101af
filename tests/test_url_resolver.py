"""Tests for URL resolution, classification and proxy links."""

from urllib.parse import parse_qs, urlsplit

import pytest

from shields_up.errors import InvalidTargetError
from shields_up.services.url_resolver import (
    UrlKind,
    classify,
    ensure_http_url,
    is_proxied,
    resolve,
    to_page_url,
    to_proxy_url,
)

ORIGIN = "http://proxy.test"
BASE = "https://example.com/news/index.html"


@pytest.mark.parametrize(
    "reference, expected",
    [
        ("/logo.png", "https://example.com/logo.png"),
        ("img/a.png", "https://example.com/news/img/a.png"),
        ("../style.css", "https://example.com/style.css"),
        ("//cdn.example.net/app.js", "https://cdn.example.net/app.js"),
        ("https://other.org/x?y=1", "https://other.org/x?y=1"),
        ("  /padded.png  ", "https://example.com/padded.png"),
    ],
)
def test_resolve_absolutizes(reference, expected):
    assert resolve(BASE, reference) == expected


@pytest.mark.parametrize(
    "reference",
    ["", "javascript:void(0)", "data:image/png;base64,AAAA", "mailto:me@example.com", "http://[::1"],
)
def test_resolve_returns_none_for_unrewritable(reference):
    assert resolve(BASE, reference) is None


def test_resolve_relative_against_malformed_base():
    assert resolve("not a url", "/logo.png") is None


@pytest.mark.parametrize(
    "url, kind",
    [
        ("https://example.com/page.html", UrlKind.HTML),
        ("https://example.com/page.htm", UrlKind.HTML),
        ("https://example.com/index.PHP?id=3", UrlKind.HTML),
        ("https://example.com/login.do", UrlKind.HTML),
        ("https://example.com/default.aspx", UrlKind.HTML),
        ("https://example.com/", UrlKind.HTML),
        ("https://example.com", UrlKind.HTML),
        ("https://example.com/news/today", UrlKind.HTML),
        ("https://example.com/logo.png", UrlKind.ASSET),
        ("https://example.com/app.js?next=page.html", UrlKind.ASSET),
        ("https://example.com/docs/report.pdf", UrlKind.ASSET),
    ],
)
def test_classify(url, kind):
    assert classify(url) is kind


def test_to_proxy_url_encodes_target():
    assert (
        to_proxy_url(ORIGIN, "https://example.com/logo.png")
        == "http://proxy.test/asset?url=https%3A%2F%2Fexample.com%2Flogo.png"
    )


def test_to_page_url_relative_without_origin():
    assert to_page_url("", "https://example.com/a.html") == "/proxy?url=https%3A%2F%2Fexample.com%2Fa.html"


URLS = [
    "https://example.com/",
    "https://example.com/a?b=1&c=2",
    "https://example.com/a?b=1%262",
    "https://example.com/search?q=a+b",
    "https://example.com/search?q=a%20b",
    "https://example.com/path#frag",
    "http://example.com/café",
    "https://user@example.com:8443/x;y=1",
]


@pytest.mark.parametrize("url", URLS)
def test_to_proxy_url_round_trips(url):
    proxied = to_proxy_url(ORIGIN, url)
    assert parse_qs(urlsplit(proxied).query)["url"] == [url]


def test_to_proxy_url_is_injective():
    assert len({to_proxy_url(ORIGIN, url) for url in URLS}) == len(URLS)


def test_is_proxied():
    assert is_proxied(ORIGIN, to_proxy_url(ORIGIN, "https://example.com/x.png"))
    assert is_proxied(ORIGIN, to_page_url(ORIGIN, "https://example.com/"))
    assert not is_proxied(ORIGIN, "https://example.com/asset?url=x")


@pytest.mark.parametrize(
    "value",
    [None, "", "example.com", "ftp://example.com/f", "javascript:alert(1)", "https://", "//example.com"],
)
def test_ensure_http_url_rejects(value):
    with pytest.raises(InvalidTargetError):
        ensure_http_url(value)


def test_ensure_http_url_accepts_any_case_scheme():
    assert ensure_http_url("HTTPS://Example.com/x") == "HTTPS://Example.com/x"
