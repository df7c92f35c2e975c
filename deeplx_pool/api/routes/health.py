"""Health, readiness, metrics and pool inspection endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from deeplx_pool.api.dependencies import get_store
from deeplx_pool.core.telemetry import get_metrics
from deeplx_pool.models.schemas import EndpointListResponse
from deeplx_pool.services.endpoint_store import EndpointStore

router = APIRouter(tags=["health"])


@router.get("/health")
async def health() -> dict:
    """Liveness: minimal check, <10ms."""
    return {"status": "ok"}


@router.get("/readiness", response_model=None)
async def readiness(store: EndpointStore = Depends(get_store)):
    """Readiness: at least one live endpoint in the pool."""
    size = len(store)
    if size == 0:
        return JSONResponse(
            status_code=503,
            content={"status": "unready", "error": "endpoint pool is empty"},
        )
    return {"status": "ready", "endpoints": size}


@router.get("/metrics")
async def metrics() -> dict:
    return get_metrics()


@router.get("/v1/endpoints", response_model=EndpointListResponse)
async def list_endpoints(store: EndpointStore = Depends(get_store)) -> EndpointListResponse:
    endpoints = store.snapshot()
    return EndpointListResponse(count=len(endpoints), endpoints=endpoints)
