"""Routes package initialization.

This module exports the route collection for the application.
"""

from fastapi import APIRouter

from shortlinks.api.routes import shortlinks, redirect, health
from shortlinks.core.config import settings

# Create root router
api_router = APIRouter()

# Include shortening and resolution routes with API prefix
api_router.include_router(
    shortlinks.router,
    prefix=settings.API_PREFIX
)

# Include health check routes with API prefix
api_router.include_router(
    health.router,
    prefix=settings.API_PREFIX
)

# Short URLs are served from /short/{code} at the site root
api_router.include_router(
    redirect.router
)

__all__ = ["api_router"]
