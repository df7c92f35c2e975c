"""FastAPI application factory for the translation relay."""

from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from deeplx_pool.api.routes import health_router, translate_router
from deeplx_pool.core.config import Settings, get_settings
from deeplx_pool.core.errors import PoolError
from deeplx_pool.services.endpoint_store import EndpointStore


def create_app(
    store: EndpointStore,
    settings: Optional[Settings] = None,
    upstream_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup: open the upstream client. Shutdown: close it."""
        owned = upstream_client is None
        app.state.upstream_client = upstream_client or httpx.AsyncClient(
            timeout=settings.upstream_timeout_seconds
        )
        yield
        if owned:
            await app.state.upstream_client.aclose()

    app = FastAPI(
        title="DeepLX Pool",
        description="Self-healing pool of DeepLX translation endpoints",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.store = store
    app.state.settings = settings

    app.include_router(health_router)
    app.include_router(translate_router)

    @app.exception_handler(PoolError)
    async def pool_error_handler(request: Request, exc: PoolError) -> JSONResponse:
        """Map custom exceptions to JSON response."""
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": exc.error_code,
                "message": exc.message,
                "details": exc.details,
            },
        )

    @app.get("/")
    async def root() -> dict:
        return {"service": "deeplx-pool", "endpoints": len(store), "docs": "/docs"}

    return app
