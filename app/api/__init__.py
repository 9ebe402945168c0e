"""
API Package - FastAPI Routers

Exports all API routers for main app registration.
"""

from app.api.scheduling import router as scheduling_router

# API Version
API_VERSION = "1.0.0"

__all__ = [
    "scheduling_router",
    "API_VERSION",
]
