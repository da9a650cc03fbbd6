"""Main application module.

This module initializes the FastAPI application, includes routes,
and configures middleware and exception handlers.
"""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shortlinks.api import api_router
from shortlinks.core.config import settings
from shortlinks.core.logging import setup_logging
from shortlinks.db.base import init_models

# Setup logging
logger = setup_logging(log_to_file=settings.ENVIRONMENT.value != "testing")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Run startup and shutdown tasks."""
    logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION}")
    logger.info(f"Environment: {settings.ENVIRONMENT.value}")
    logger.info(f"Short code algorithm: {settings.SHORTLINK_HASH_ALGORITHM}")

    if settings.DB_CREATE_TABLES_ON_STARTUP:
        await init_models()

    yield

    logger.info(f"Shutting down {settings.APP_NAME}")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs" if settings.DEBUG else None,
    redoc_url="/redoc" if settings.DEBUG else None,
    lifespan=lifespan,
)

# Include API router
app.include_router(api_router)


# Add exception handlers
@app.exception_handler(HTTPException)
async def http_exception_handler(request, exc):
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail}
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors with detailed information."""
    logger.error(f"Request validation error: {exc}")
    return JSONResponse(
        status_code=422,
        content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to catch and log all unhandled exceptions."""
    error_id = f"error-{time.time()}"

    logger.opt(exception=exc).error(
        f"Unhandled exception in {request.method} {request.url.path} ({error_id})"
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": "Internal server error occurred",
            "error_id": error_id,
            "message": str(exc) if settings.DEBUG else "Internal server error"
        }
    )
