"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from shields_up.config import configure_logging, get_settings
from shields_up.handlers import ProxyHandler
from shields_up.services import ProxyService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> ProxyHandler:
    """Dependency injection for ProxyHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The ProxyHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "proxy_handler", None)
    if handler is None:
        raise RuntimeError("ProxyHandler not initialized. Check lifespan setup.")
    return handler


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Repositories (browser, filter lists, caches) - wired by ProxyService.create
    2. Service (business logic) - stored in app.state.proxy_service
    3. Handler (HTTP endpoints) - stored in app.state.proxy_handler

    The browser and filter lists are loaded lazily by the first request.

    Cleanup:
        Shuts the browser down and removes all services from app.state
    """
    settings = get_settings()
    configure_logging(settings.log_level)

    proxy_service = ProxyService.create(config=settings)
    proxy_handler = ProxyHandler(proxy_service=proxy_service, asset_max_age=settings.asset_max_age)

    # Store in app.state (FastAPI pattern)
    app.state.proxy_service = proxy_service
    app.state.proxy_handler = proxy_handler

    logger.info("Shields-Up proxy at %s", settings.origin)
    logger.info(
        "Page cache: %d entries / %.0fs, asset cache: %d entries / %.0fs",
        settings.page_cache_max_entries,
        settings.page_cache_ttl,
        settings.asset_cache_max_entries,
        settings.asset_cache_ttl,
    )

    yield

    await proxy_service.shutdown()
    del app.state.proxy_handler
    del app.state.proxy_service
    logger.info("Shields-Up proxy shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[ProxyHandler, Depends(get_handler)]
