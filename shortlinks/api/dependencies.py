"""API dependencies for FastAPI.

This module provides dependency injection functions for FastAPI endpoints
to access service instances.
"""

from functools import lru_cache

from fastapi import HTTPException, status

from shortlinks.core.config import settings
from shortlinks.repositories.shortlink_repository import ShortLinkRepository
from shortlinks.services.exceptions import (
    ShortlinkAmbiguousError,
    ShortlinkError,
    ShortlinkNotFoundError,
)
from shortlinks.services.shortener import ShortenerEngine


@lru_cache()
def get_shortlink_repository() -> ShortLinkRepository:
    """Get the shared short-link repository."""
    return ShortLinkRepository()


@lru_cache()
def get_shortener_engine() -> ShortenerEngine:
    """Get the shortener engine configured from settings."""
    return ShortenerEngine.from_settings(settings, repository=get_shortlink_repository())


def to_http_exception(error: ShortlinkError) -> HTTPException:
    """Map a service error to the HTTP error returned to clients."""
    if isinstance(error, ShortlinkNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, ShortlinkAmbiguousError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(error))
