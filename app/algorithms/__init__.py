"""
Algorithms Package

Deterministic scoring and ranking for contractor scheduling:
- geo_distance: haversine distance in miles with explicit "no location" handling
- availability_resolver: date keys, time blocks and the default-available lookup
- contractor_scoring: weighted composite score (availability, distance, rating)
- recommendation_ranker: eligibility filters, scoring, post-filters and ordering
- ratings: overall rating and display tiers

All algorithms are pure calculations (no I/O, no randomness).
"""

from app.algorithms.geo_distance import distance_miles, address_distance
from app.algorithms.availability_resolver import (
    AvailabilityResolver,
    AvailabilitySnapshot,
    format_date_key,
    parse_date_key,
)
from app.algorithms.contractor_scoring import ScoringWeights, score_contractor
from app.algorithms.recommendation_ranker import (
    rank_contractors,
    top_recommendations,
    available_contractors,
)

__all__ = [
    "distance_miles",
    "address_distance",
    "AvailabilityResolver",
    "AvailabilitySnapshot",
    "format_date_key",
    "parse_date_key",
    "ScoringWeights",
    "score_contractor",
    "rank_contractors",
    "top_recommendations",
    "available_contractors",
]
