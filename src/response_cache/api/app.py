import logging
from typing import Any

from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from response_cache.api.dependencies import HandlerDep, lifespan
from response_cache.config import get_settings
from response_cache.dto import (
    CacheStatsResponse,
    ClearModelResponse,
    HealthCheckResponse,
    LookupRequest,
    LookupResponse,
    StoreRequest,
    StoreResponse,
)
from response_cache.services import SemanticCache

router = APIRouter()


@router.get("/")
async def root() -> dict[str, Any]:
    """Root endpoint with API information."""
    return {
        "name": "Semantic Response Cache API",
        "version": "0.1.0",
        "description": "Reuses AI completions for semantically equivalent queries",
        "endpoints": {
            "lookup": "/cache/lookup",
            "store": "/cache/store",
            "stats": "/cache/stats",
            "health": "/health",
            "docs": "/docs",
        },
    }


@router.get("/health", response_model=HealthCheckResponse)
async def health(handler: HandlerDep) -> HealthCheckResponse:
    """Health check endpoint."""
    return await handler.health_check()


@router.post("/cache/lookup", response_model=LookupResponse)
async def lookup(request: LookupRequest, handler: HandlerDep) -> LookupResponse:
    """Look up a cached response for a semantically equivalent query."""
    return await handler.lookup(request)


@router.post("/cache/store", response_model=StoreResponse)
async def store(request: StoreRequest, handler: HandlerDep) -> StoreResponse:
    """Cache a generated response."""
    return await handler.store(request)


@router.get("/cache/stats", response_model=CacheStatsResponse)
async def stats(handler: HandlerDep, model: str | None = None) -> CacheStatsResponse:
    """Get cache statistics, optionally for one model."""
    return await handler.stats(model)


@router.delete("/cache/{model:path}", response_model=ClearModelResponse)
async def clear_model(model: str, handler: HandlerDep) -> ClearModelResponse:
    """Delete every cached entry of one completion model."""
    return await handler.clear_model(model)


def create_app(cache: SemanticCache | None = None) -> FastAPI:
    """Create the FastAPI application.

    Args:
        cache: Cache to serve. If None, one is built from settings at startup.
    """
    app = FastAPI(
        title="Semantic Response Cache API",
        description="Semantic caching of AI completions using embeddings and Redis",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.injected_cache = cache

    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    return app


app = create_app()


def main() -> None:
    import uvicorn

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(
        "response_cache.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    main()
