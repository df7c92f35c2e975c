"""FastAPI dependencies: endpoint store, settings and the shared upstream client."""

import httpx
from fastapi import Request

from deeplx_pool.core.config import Settings
from deeplx_pool.services.endpoint_store import EndpointStore


def get_store(request: Request) -> EndpointStore:
    return request.app.state.store


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_upstream_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.upstream_client
