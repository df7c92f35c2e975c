"""POST /translate: relay to one endpoint of the live pool."""

import random

import httpx
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from deeplx_pool.api.dependencies import get_store, get_upstream_client
from deeplx_pool.core.errors import NoUpstreamAvailableError, UpstreamError
from deeplx_pool.core.logging import structured_log
from deeplx_pool.core.telemetry import record_upstream_error
from deeplx_pool.models.schemas import ErrorResponse, TranslateRequest
from deeplx_pool.services.endpoint_store import EndpointStore

router = APIRouter(tags=["translate"])


@router.post(
    "/translate",
    response_model=None,
    responses={502: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def translate(
    body: TranslateRequest,
    store: EndpointStore = Depends(get_store),
    client: httpx.AsyncClient = Depends(get_upstream_client),
) -> JSONResponse:
    endpoints = store.snapshot()
    if not endpoints:
        raise NoUpstreamAvailableError()
    endpoint = random.choice(endpoints)
    try:
        resp = await client.post(endpoint, json=body.model_dump())
        content = resp.json()
    except (httpx.HTTPError, ValueError) as e:
        record_upstream_error()
        structured_log(
            "WARNING",
            "Upstream translate failed",
            operation="translate.forward",
            endpoint=endpoint,
            error={"type": type(e).__name__, "message": str(e)},
        )
        raise UpstreamError(endpoint, str(e) or type(e).__name__) from e
    return JSONResponse(status_code=resp.status_code, content=content)
