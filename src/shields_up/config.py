import logging
import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

DEFAULT_ADBLOCK_LISTS = (
    "https://easylist.to/easylist/easylist.txt",
    "https://easylist.to/easylist/easyprivacy.txt",
)

DEFAULT_HARD_BLOCK_DOMAINS = (
    "googlesyndication.com",
    "doubleclick.net",
    "google-analytics.com",
    "g.doubleclick.net",
    "facebook.net",
    "taboola.com",
    "outbrain.com",
    "criteo.net",
    "criteo.com",
    "scorecardresearch.com",
    "quantserve.com",
)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Read a comma separated environment variable into a tuple."""
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Server
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))
    # Externally reachable base URL, empty means http://localhost:{port}
    public_origin: str = os.getenv("PUBLIC_ORIGIN", "")

    # Page cache (rewritten HTML)
    page_cache_max_entries: int = int(os.getenv("PAGE_CACHE_MAX_ENTRIES", "200"))
    page_cache_ttl: float = float(os.getenv("PAGE_CACHE_TTL", "300"))  # 5 min

    # Asset cache (raw bytes + content type)
    asset_cache_max_entries: int = int(os.getenv("ASSET_CACHE_MAX_ENTRIES", "500"))
    asset_cache_ttl: float = float(os.getenv("ASSET_CACHE_TTL", "600"))  # 10 min
    asset_max_age: int = int(os.getenv("ASSET_MAX_AGE", "600"))

    # Rendering agent
    page_render_timeout: float = float(os.getenv("PAGE_RENDER_TIMEOUT", "60"))
    asset_fetch_timeout: float = float(os.getenv("ASSET_FETCH_TIMEOUT", "45"))
    browser_headless: bool = os.getenv("BROWSER_HEADLESS", "true").lower() == "true"

    # Blocking
    adblock_lists: tuple[str, ...] = _env_list("ADBLOCK_LISTS", DEFAULT_ADBLOCK_LISTS)
    hard_block_domains: tuple[str, ...] = _env_list("HARD_BLOCK_DOMAINS", DEFAULT_HARD_BLOCK_DOMAINS)

    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    @property
    def origin(self) -> str:
        """Base URL used to build every proxy-relative link.

        Returns:
            The public origin without a trailing slash
        """
        return self.public_origin.rstrip("/") or f"http://localhost:{self.port}"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        positive = {
            "PAGE_CACHE_MAX_ENTRIES": self.page_cache_max_entries,
            "PAGE_CACHE_TTL": self.page_cache_ttl,
            "ASSET_CACHE_MAX_ENTRIES": self.asset_cache_max_entries,
            "ASSET_CACHE_TTL": self.asset_cache_ttl,
            "PAGE_RENDER_TIMEOUT": self.page_render_timeout,
            "ASSET_FETCH_TIMEOUT": self.asset_fetch_timeout,
        }
        for name, value in positive.items():
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        if not self.origin.lower().startswith(("http://", "https://")):
            raise ValueError(f"PUBLIC_ORIGIN must be an http(s) URL, got {self.public_origin!r}")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging once for the process."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format=LOG_FORMAT,
    )
