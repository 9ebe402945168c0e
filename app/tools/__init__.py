"""
Tools Package

Service clients used by agents and API handlers.

Service Clients (with connection pooling and graceful shutdown):
- contractor_service_client: Contractor directory HTTP client
- availability_service_client: Availability calendar HTTP client

Shared helpers:
- service_http: headers, error mapping and value parsing

Clients create their httpx.AsyncClient lazily on first use, so importing
them has no connection side effects.
"""

import logging

from app.tools import contractor_service_client
from app.tools import availability_service_client

logger = logging.getLogger(__name__)

__all__ = [
    "contractor_service_client",
    "availability_service_client",
    "aclose_all_clients",
]


async def aclose_all_clients() -> None:
    """
    Close all HTTP clients gracefully.
    Should be called during FastAPI shutdown (lifespan).
    """
    for name, module in (
        ("contractor_service_client", contractor_service_client),
        ("availability_service_client", availability_service_client),
    ):
        try:
            await module.aclose_client()
        except Exception as e:
            logger.error(f"Error closing {name}: {e}")
