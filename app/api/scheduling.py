"""
Scheduling API Endpoints

Contractor recommendation and availability endpoints.

Endpoints:
- POST /scheduling/recommendations - Ranked contractors for a job
- GET /scheduling/contractors/{contractor_id}/status - One contractor's status for a date and block

The Authorization header, when present, is forwarded to the backend services.
"""

import logging
import uuid
from typing import Dict, Any, Optional

from fastapi import APIRouter, HTTPException, Request, status, Query

from app.algorithms.availability_resolver import (
    AvailabilityResolver,
    AvailabilitySnapshot,
    format_date_key,
    parse_date_key,
)
from app.constants.scheduling import AVAILABILITY_LABELS, TimeBlock
from app.core.errors import from_http_exception, to_http_exception
from app.core.logging import set_trace_id
from app.schemas.scheduling import (
    ContractorStatusResponse,
    RecommendationRequest,
    RecommendationResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/scheduling", tags=["scheduling"])


# ============================================================================
# Utilities
# ============================================================================

def get_trace_id(request: Request) -> str:
    """Extract or generate trace ID from request."""
    return request.headers.get("x-request-id", str(uuid.uuid4()))


def get_auth_header(request: Request) -> Optional[str]:
    """Extract Authorization header."""
    return request.headers.get("authorization")


def standard_response(
    message: str,
    data: Optional[Dict[str, Any]] = None,
    proofs: Optional[Dict[str, Any]] = None,
    trace_id: Optional[str] = None
) -> Dict[str, Any]:
    """Build standard response format."""
    return {
        "message": message,
        "data": data or {},
        "proofs": proofs or {"trace_id": trace_id}
    }


# ============================================================================
# Endpoints
# ============================================================================

@router.post("/recommendations", response_model=RecommendationResponse)
async def recommend_contractors(
    body: RecommendationRequest,
    request: Request
):
    """
    Rank contractors for a job.

    Contractors are scored on availability for the requested block,
    distance from the job site and overall rating, then sorted best first.
    Contractors whose distance or availability could not be determined are
    still ranked and listed under data.degraded.
    """
    trace_id = get_trace_id(request)
    set_trace_id(trace_id)

    from app.agents.scheduling_agent import SchedulingAgent

    context = {
        "entities": body.model_dump(mode="json", exclude_none=True),
        "trace_id": trace_id,
        "auth_header": get_auth_header(request)
    }

    result = await SchedulingAgent().execute(context)
    proofs = result.get("proofs", {})
    data = result.get("data") or {}

    if proofs.get("validation") == "failed":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=result.get("message", "Invalid scheduling request")
        )

    if proofs.get("status") == "failed":
        if data.get("error") == "backend_unavailable":
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail=result.get("message", "Contractor service unavailable")
            )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=result.get("message", "Failed to generate recommendations")
        )

    return standard_response(
        message=result["message"],
        data=data,
        proofs=proofs,
        trace_id=trace_id
    )


@router.get("/contractors/{contractor_id}/status", response_model=ContractorStatusResponse)
async def get_contractor_status(
    contractor_id: str,
    request: Request,
    date: str = Query(..., description="Date in YYYY-MM-DD format"),
    time_block: TimeBlock = Query(..., description="am, pm or evening")
):
    """
    Resolve one contractor's availability for a date and time block.

    A date without a record resolves to available.
    """
    trace_id = get_trace_id(request)
    set_trace_id(trace_id)

    # Malformed keys raise ValidationError, rendered as 400 by the app handler
    day = parse_date_key(date)

    from app.tools.availability_service_client import get_availability_for_date

    date_key = format_date_key(day)

    try:
        record = await get_availability_for_date(
            contractor_id,
            date_key,
            auth_header=get_auth_header(request),
            request_id=trace_id[:8]
        )
    except HTTPException as e:
        logger.warning(f"[{trace_id[:8]}] Availability lookup failed for {contractor_id}: {e.detail}")
        raise to_http_exception(from_http_exception(e))

    snapshot = AvailabilitySnapshot()
    if record is not None:
        snapshot.add(record, contractor_id)

    block_status = AvailabilityResolver(snapshot).resolve_status(contractor_id, day, time_block)

    return standard_response(
        message=f"{contractor_id} is {AVAILABILITY_LABELS[block_status].lower()} on {date_key} ({time_block.value})",
        data={
            "contractor_id": contractor_id,
            "date": date_key,
            "time_block": time_block.value,
            "status": block_status.value,
            "has_record": record is not None,
            "notes": record.notes if record is not None else None
        },
        proofs={
            "trace_id": trace_id,
            "sources": [{"service": "availability_service", "records": len(snapshot)}]
        }
    )
