from fastapi import FastAPI, Query
from fastapi.responses import PlainTextResponse, Response

from shields_up.api.dependencies import HandlerDep, lifespan
from shields_up.config import settings
from shields_up.dto import CacheClearResponse, CacheStatsResponse, HealthCheckResponse

app = FastAPI(
    title="Shields-Up Proxy",
    description="Filtering reverse proxy that renders pages, blocks ads and trackers, and rewrites links",
    version="0.1.0",
    lifespan=lifespan,
)

TargetUrl = Query(None, description="Absolute http(s) URL of the upstream resource")


@app.get("/", response_class=PlainTextResponse)
async def root(handler: HandlerDep) -> PlainTextResponse:
    """Liveness endpoint."""
    return await handler.root()


@app.get("/proxy")
async def proxy_page(handler: HandlerDep, url: str | None = TargetUrl) -> Response:
    """Render, filter and rewrite an upstream page."""
    return await handler.proxy_page(url)


@app.get("/asset")
async def proxy_asset(handler: HandlerDep, url: str | None = TargetUrl) -> Response:
    """Fetch an upstream subresource through the blocking stack."""
    return await handler.proxy_asset(url)


@app.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@app.get("/stats", response_model=CacheStatsResponse)
async def get_stats(handler: HandlerDep) -> CacheStatsResponse:
    """Get cache statistics for both tiers."""
    return await handler.get_stats()


@app.delete("/cache", response_model=CacheClearResponse)
async def clear_cache(handler: HandlerDep) -> CacheClearResponse:
    """Clear the page and asset caches."""
    return await handler.clear_cache()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "shields_up.api.app:app",
        host=settings.host,
        port=settings.port,
    )
