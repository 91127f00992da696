"""Main entry point for the VowSwap trust and promotions API."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from vowswap.api.v1 import (
    moderation_router,
    promotions_router,
    seller_promotions_router,
)
from vowswap.core.settings import settings
from vowswap.services.errors import StoreFailure, VowSwapError

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="VowSwap API",
    description="Content moderation and coupon redemption for the VowSwap marketplace",
    version=settings.app_version,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allow_methods,
    allow_headers=settings.cors_allow_headers,
)

# Add GZip middleware for compression
app.add_middleware(GZipMiddleware)

# Include API routers
app.include_router(moderation_router, prefix="/api/v1")
app.include_router(promotions_router, prefix="/api/v1")
app.include_router(seller_promotions_router, prefix="/api/v1")


@app.exception_handler(VowSwapError)
async def handle_service_error(request: Request, exc: VowSwapError) -> JSONResponse:
    """Translate service exceptions into JSON error responses."""
    if isinstance(exc, StoreFailure):
        logger.error("Store failure while handling %s %s", request.method, request.url.path)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(SQLAlchemyError)
async def handle_store_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Hide unexpected database errors behind a generic 500."""
    logger.error(
        "Unhandled database error on %s %s",
        request.method, request.url.path, exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal Server Error"},
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint to verify the service is running."""
    return {"status": "ok"}


@app.get("/")
async def root() -> dict[str, str]:
    """Root endpoint with basic information about the API."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "docs": "/docs",
        "redoc": "/redoc",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("vowswap.main:app", host="0.0.0.0", port=8000, reload=settings.debug)
