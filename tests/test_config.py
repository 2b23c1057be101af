"""
Tests for settings validation.
"""

import pytest

from shields_up.config import DEFAULT_HARD_BLOCK_DOMAINS, Settings


def test_origin_defaults_to_localhost():
    """Test origin fallback when no public origin is configured."""
    assert Settings(public_origin="", port=3000).origin == "http://localhost:3000"


def test_origin_strips_trailing_slash():
    """Test that a configured public origin is normalized."""
    assert Settings(public_origin="https://shields.example/").origin == "https://shields.example"


def test_rejects_non_http_origin():
    """Test that the public origin must be http(s)."""
    with pytest.raises(ValueError):
        Settings(public_origin="ftp://shields.example")


@pytest.mark.parametrize("field", ["page_cache_max_entries", "asset_cache_ttl", "page_render_timeout"])
def test_rejects_non_positive_values(field):
    """Test that capacities, lifetimes and timeouts must be positive."""
    with pytest.raises(ValueError):
        Settings(**{field: 0})


def test_hard_block_defaults():
    """Test the built-in hard-block list."""
    assert len(DEFAULT_HARD_BLOCK_DOMAINS) == 11
    assert "doubleclick.net" in DEFAULT_HARD_BLOCK_DOMAINS
