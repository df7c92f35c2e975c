"""API route modules."""

from deeplx_pool.api.routes.health import router as health_router
from deeplx_pool.api.routes.translate import router as translate_router

__all__ = ["health_router", "translate_router"]
