"""
FastAPI Application Entry Point

Main application with proper lifecycle management for HTTP clients.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import API_VERSION, scheduling_router
from app.core.config import settings
from app.core.errors import AppError, error_payload
from app.core.logging import get_trace_id, setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.
    Handles startup and shutdown for HTTP clients.
    """
    # Startup
    setup_logging(settings.LOG_LEVEL)
    logger.info(f"Scheduling service starting up ({settings.APP_ENV})...")

    yield

    # Shutdown - close all HTTP clients gracefully
    logger.info("Scheduling service shutting down...")

    from app.tools import aclose_all_clients
    await aclose_all_clients()

    logger.info("Scheduling service shutdown complete")


# Initialize FastAPI app with lifespan
app = FastAPI(
    title="Contractor Scheduling Service",
    description="Ranks contractors for jobs by availability, distance and rating",
    version=API_VERSION,
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(scheduling_router, prefix="/api")
logger.info("Registered scheduling router")


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    """Render AppError raised outside an endpoint's own handling."""
    trace_id = get_trace_id()
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": error_payload(
            exc.code,
            exc.message,
            details=exc.details,
            trace_id=None if trace_id == "-" else trace_id
        )}
    )


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "service": "Contractor Scheduling Service",
        "status": "running",
        "version": API_VERSION
    }


@app.get("/health")
async def health():
    """Detailed health check."""
    return {
        "status": "healthy",
        "service": "scheduling_service",
        "environment": settings.APP_ENV,
        "components": {
            "api": "ok",
            "contractor_service": settings.CONTRACTOR_SERVICE_URL,
            "availability_service": settings.AVAILABILITY_SERVICE_URL
        }
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
