"""
Scheduling Agent - Ranks contractors for a job

Responsibilities:
- Validate the scheduling request (date, time block, location, trades, filters)
- Fetch active contractors from the contractor service
- Fetch a one-day availability snapshot for the eligible contractors
- Run the recommendation ranker and format the top results

Fallback strategy:
- Contractor service down -> backend unavailable response (nothing to rank)
- Availability down for some contractors -> those contractors are scored as
  unavailable and flagged, the rest rank normally
"""

import logging
import time
from typing import Any, Dict, List

from fastapi import HTTPException
from pydantic import ValidationError as PydanticValidationError

from app.agents.base_agent import BaseAgent
from app.algorithms.availability_resolver import AvailabilityResolver, format_date_key
from app.algorithms.contractor_scoring import ALGORITHM_NAME, ScoringWeights
from app.algorithms.geo_distance import format_distance
from app.algorithms.ratings import rating_tier
from app.algorithms.recommendation_ranker import (
    effective_trades,
    is_eligible,
    rank_contractors,
)
from app.core.config import settings
from app.schemas.scheduling import (
    ContractorRecommendation,
    RecommendationListResult,
    RecommendationRequest,
    SchedulingRequest,
)
from app.tools import availability_service_client, contractor_service_client

logger = logging.getLogger(__name__)


class SchedulingAgent(BaseAgent):
    """Agent that recommends contractors for a job date, time block and location."""

    async def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """
        Rank contractors for the request in context["entities"].

        Entities follow RecommendationRequest: job_date, time_block,
        job_location, required_trades, filters, limit.
        """
        trace_id = self.get_trace_id(context)
        entities = self.get_entities(context)
        auth_header = self.get_auth_header(context)
        request_id = trace_id[:8]
        started = time.perf_counter()

        try:
            body = RecommendationRequest.model_validate(entities)
        except PydanticValidationError as e:
            first = e.errors()[0]
            field = ".".join(str(part) for part in first.get("loc", ())) or "request"
            return self.validation_error(
                message=f"Invalid scheduling request: {first.get('msg', 'invalid value')}.",
                suggestion="Provide job_date (YYYY-MM-DD), time_block (am, pm or evening) and a job_location.",
                missing_field=field,
                example='{"job_date": "2026-03-02", "time_block": "am", "job_location": {"lat": 35.47, "lng": -97.52}}',
                trace_id=trace_id
            )

        request = SchedulingRequest(
            job_date=body.job_date,
            time_block=body.time_block,
            job_location=body.job_location,
            required_trades=body.required_trades,
        )
        filters = body.filters
        limit = body.limit or settings.DEFAULT_RECOMMENDATION_LIMIT
        date_key = format_date_key(request.job_date)

        logger.info(f"[{request_id}] Recommending contractors for {date_key} {request.time_block.value}")

        try:
            contractors = await contractor_service_client.get_contractors(
                auth_header=auth_header,
                request_id=request_id
            )
        except HTTPException as e:
            logger.warning(f"[{request_id}] Contractor service failed: {e.detail}")
            return self._backend_unavailable_response(trace_id, date_key, request.time_block.value)

        # Only fetch availability for contractors that can pass the eligibility filter
        trades = effective_trades(request, filters)
        min_rating = filters.min_rating if filters is not None else None
        eligible_ids = [c.id for c in contractors if is_eligible(c, trades, min_rating)]

        snapshot = await availability_service_client.fetch_availability_snapshot(
            eligible_ids,
            request.job_date,
            auth_header=auth_header,
            request_id=request_id
        )

        weights = ScoringWeights.from_settings()
        ranked = rank_contractors(
            contractors,
            request,
            AvailabilityResolver(snapshot),
            filters=filters,
            weights=weights
        )
        top = ranked[:limit]

        result = RecommendationListResult(
            job_date=date_key,
            time_block=request.time_block,
            recommendations=top,
            total_candidates=len(contractors),
            total_ranked=len(ranked),
            degraded=[
                r.contractor_id for r in ranked
                if r.distance_unknown or r.availability_unknown
            ],
        )

        sources = [
            {"service": "contractor_service", "records": len(contractors)},
            {"service": "availability_service", "records": len(snapshot), "failed": sorted(snapshot.failed)},
        ]

        return self.success_response(
            message=self._format_message(top, date_key, request.time_block.value),
            data=result.model_dump(mode="json"),
            trace_id=trace_id,
            sources=sources,
            algorithm=ALGORITHM_NAME,
            weights=weights.as_dict(),
            latency_ms=round((time.perf_counter() - started) * 1000, 2)
        )

    def _format_message(
        self,
        recommendations: List[ContractorRecommendation],
        date_key: str,
        time_block: str
    ) -> str:
        """Format the top recommendations into a short summary."""
        if not recommendations:
            return f"No contractors match this job on {date_key} ({time_block}). Try relaxing the filters."

        message = f"Top {len(recommendations)} contractor(s) for {date_key} ({time_block}):"

        for i, rec in enumerate(recommendations[:3], 1):
            name = rec.contractor.business_name or rec.contractor_id
            distance = "distance unknown" if rec.distance is None else format_distance(rec.distance)
            message += (
                f"\n{i}. {name} - score {rec.score}/100, {distance}, "
                f"rating {rec.rating:.1f} ({rating_tier(rec.rating)}), {rec.availability_status.value}"
            )
            if not rec.is_within_service_radius:
                message += " [outside service radius]"

        return message

    def _backend_unavailable_response(
        self,
        trace_id: str,
        date_key: str,
        time_block: str
    ) -> Dict[str, Any]:
        """Return response when the contractor directory is unavailable."""
        return {
            "message": "Contractor recommendations are temporarily unavailable.",
            "data": {
                "error": "backend_unavailable",
                "reason": "Contractor service is not responding",
                "requested_params": {
                    "job_date": date_key,
                    "time_block": time_block
                },
                "suggested_action": "Please try again in a moment"
            },
            "proofs": {
                "trace_id": trace_id,
                "status": "failed"
            }
        }
