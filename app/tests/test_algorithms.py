"""
Algorithm Tests

Tests for deterministic algorithm functions:
- geo_distance.distance_miles()
- availability_resolver.AvailabilityResolver
- contractor_scoring.score_contractor()
- recommendation_ranker.rank_contractors()
- ratings helpers

Run: pytest app/tests/test_algorithms.py -v
"""

import math
import pytest
from datetime import date, datetime, timedelta, timezone


JOB_LAT = 35.4676
JOB_LNG = -97.5164
JOB_DATE = date(2026, 3, 2)


# ==================== Helpers ====================

def _lat_offset(miles: float) -> float:
    """Degrees of latitude that put a point `miles` due north of the job site."""
    from app.constants.thresholds import EARTH_RADIUS_MILES
    return math.degrees(miles / EARTH_RADIUS_MILES)


def make_contractor(
    contractor_id: str,
    miles=None,
    overall: float = 4.0,
    trades=("installer",),
    service_radius=30.0,
    status: str = "active"
):
    from app.schemas.scheduling import Address, Contractor, Rating

    if miles is None:
        address = Address(city="Norman", state="OK")
    else:
        address = Address(lat=JOB_LAT + _lat_offset(miles), lng=JOB_LNG)

    return Contractor(
        id=contractor_id,
        business_name=f"{contractor_id} LLC",
        address=address,
        trades=list(trades),
        service_radius=service_radius,
        rating=Rating(overall=overall),
        status=status,
    )


def make_request(time_block: str = "am", required_trades=None):
    from app.schemas.scheduling import Address, SchedulingRequest

    return SchedulingRequest(
        job_date=JOB_DATE,
        time_block=time_block,
        job_location=Address(lat=JOB_LAT, lng=JOB_LNG),
        required_trades=required_trades,
    )


def make_resolver(*records):
    from app.algorithms.availability_resolver import AvailabilityResolver, AvailabilitySnapshot
    return AvailabilityResolver(AvailabilitySnapshot(records))


def make_record(contractor_id: str, status=None, blocks=None, day: str = "2026-03-02"):
    from app.schemas.scheduling import AvailabilityRecord, BlockStatus

    return AvailabilityRecord(
        contractor_id=contractor_id,
        date=day,
        status=status,
        blocks=BlockStatus(**blocks) if blocks is not None else None,
    )


# ==================== Geo Distance Tests ====================

def test_distance_identical_points_is_zero():
    """Distance from a point to itself is exactly zero."""
    from app.algorithms.geo_distance import distance_miles
    from app.schemas.scheduling import Coordinate

    p = Coordinate(lat=JOB_LAT, lng=JOB_LNG)
    assert distance_miles(p, p) == 0.0


def test_distance_is_symmetric():
    """distance(a, b) == distance(b, a)."""
    from app.algorithms.geo_distance import distance_miles
    from app.schemas.scheduling import Coordinate

    okc = Coordinate(lat=35.4676, lng=-97.5164)
    tulsa = Coordinate(lat=36.1540, lng=-95.9928)

    assert distance_miles(okc, tulsa) == distance_miles(tulsa, okc)
    # Straight-line OKC to Tulsa is roughly 100 miles
    assert 95 < distance_miles(okc, tulsa) < 110


def test_distance_along_meridian_matches_radius():
    """One degree of latitude is R * pi / 180 miles."""
    from app.algorithms.geo_distance import distance_miles
    from app.constants.thresholds import EARTH_RADIUS_MILES
    from app.schemas.scheduling import Coordinate

    d = distance_miles(Coordinate(0.0, 0.0), Coordinate(1.0, 0.0))
    assert d == pytest.approx(EARTH_RADIUS_MILES * math.pi / 180)


def test_distance_antipodal_points():
    """Antipodal points are half the circumference apart."""
    from app.algorithms.geo_distance import distance_miles
    from app.constants.thresholds import EARTH_RADIUS_MILES
    from app.schemas.scheduling import Coordinate

    d = distance_miles(Coordinate(0.0, 0.0), Coordinate(0.0, 180.0))
    assert d == pytest.approx(EARTH_RADIUS_MILES * math.pi)


def test_distance_unavailable_point_raises():
    """Missing coordinates are an error, never a silent zero."""
    from app.algorithms.geo_distance import distance_miles
    from app.core.errors import CoordinatesUnavailableError, GeoError
    from app.schemas.scheduling import UNAVAILABLE, Coordinate

    p = Coordinate(lat=JOB_LAT, lng=JOB_LNG)

    with pytest.raises(CoordinatesUnavailableError):
        distance_miles(p, UNAVAILABLE)
    with pytest.raises(GeoError):
        distance_miles(None, p)


@pytest.mark.parametrize("lat,lng", [(91.0, 0.0), (-90.5, 0.0), (0.0, 180.5), (float("nan"), 0.0)])
def test_distance_out_of_range_raises(lat, lng):
    """Coordinates outside WGS84 ranges are rejected."""
    from app.algorithms.geo_distance import distance_miles
    from app.core.errors import InvalidCoordinateError
    from app.schemas.scheduling import Coordinate

    with pytest.raises(InvalidCoordinateError):
        distance_miles(Coordinate(lat, lng), Coordinate(0.0, 0.0))


def test_address_without_coordinates_is_unavailable():
    """Address.coordinate() returns UNAVAILABLE when not geocoded."""
    from app.algorithms.geo_distance import address_distance
    from app.schemas.scheduling import UNAVAILABLE, Address

    address = Address(street="1 Main St", city="Norman", state="OK", lat=35.2)
    assert address.coordinate() is UNAVAILABLE
    assert address_distance(address, Address(lat=JOB_LAT, lng=JOB_LNG)) is None


def test_distance_display_helpers():
    """Formatting and category buckets."""
    from app.algorithms.geo_distance import distance_category, format_distance

    assert format_distance(0.4) == "< 1 mi"
    assert format_distance(12.34) == "12.3 mi"
    assert distance_category(3)["label"] == "Very Close"
    assert distance_category(10)["label"] == "Close"
    assert distance_category(30)["label"] == "Moderate"
    assert distance_category(31)["color"] == "red"


# ==================== Date Key Tests ====================

def test_format_date_key_plain_date():
    from app.algorithms.availability_resolver import format_date_key
    assert format_date_key(date(2026, 3, 2)) == "2026-03-02"


def test_format_date_key_aware_datetime_uses_utc_day():
    """An aware datetime late in the evening west of UTC is already the next UTC day."""
    from app.algorithms.availability_resolver import format_date_key

    central = timezone(timedelta(hours=-6))
    assert format_date_key(datetime(2026, 3, 2, 20, 0, tzinfo=central)) == "2026-03-03"
    assert format_date_key(datetime(2026, 3, 2, 20, 0)) == "2026-03-02"


@pytest.mark.parametrize("key", ["2026-3-2", "2026/03/02", "2026-02-30", "", "tomorrow"])
def test_parse_date_key_rejects_malformed(key):
    from app.algorithms.availability_resolver import parse_date_key
    from app.core.errors import ValidationError

    with pytest.raises(ValidationError):
        parse_date_key(key)


def test_parse_date_key_valid():
    from app.algorithms.availability_resolver import format_date_key, parse_date_key

    assert parse_date_key("2026-03-02") == date(2026, 3, 2)
    assert format_date_key(parse_date_key("2024-02-29")) == "2024-02-29"


# ==================== Availability Resolver Tests ====================

def test_resolver_no_record_is_available():
    """A contractor with no record for the day is available for every block."""
    from app.constants.scheduling import AvailabilityStatus, TIME_BLOCKS

    resolver = make_resolver()
    for block in TIME_BLOCKS:
        assert resolver.resolve_status("c1", JOB_DATE, block) == AvailabilityStatus.AVAILABLE


def test_resolver_blocks_take_precedence_over_legacy_status():
    """Per-block statuses win over a whole-day status on the same record."""
    from app.constants.scheduling import AvailabilityStatus, TimeBlock

    record = make_record("c1", status="unavailable", blocks={"am": "busy"})
    resolver = make_resolver(record)

    assert resolver.resolve_status("c1", JOB_DATE, TimeBlock.AM) == AvailabilityStatus.BUSY
    assert resolver.resolve_status("c1", JOB_DATE, TimeBlock.PM) == AvailabilityStatus.AVAILABLE


def test_resolver_legacy_status_applies_to_every_block():
    from app.constants.scheduling import AvailabilityStatus, TIME_BLOCKS

    resolver = make_resolver(make_record("c1", status="on_leave"))
    for block in TIME_BLOCKS:
        assert resolver.resolve_status("c1", JOB_DATE, block) == AvailabilityStatus.ON_LEAVE


def test_resolver_other_days_do_not_leak():
    """A record on another day does not affect the requested day."""
    from app.constants.scheduling import AvailabilityStatus

    resolver = make_resolver(make_record("c1", status="unavailable", day="2026-03-03"))
    assert resolver.resolve_status("c1", JOB_DATE, "pm") == AvailabilityStatus.AVAILABLE


def test_resolver_failed_fetch_raises_lookup_error():
    """Contractors marked failed do not fall back to the available default."""
    from app.algorithms.availability_resolver import AvailabilityResolver, AvailabilitySnapshot
    from app.core.errors import AvailabilityLookupError

    snapshot = AvailabilitySnapshot()
    snapshot.mark_failed("c1")

    with pytest.raises(AvailabilityLookupError):
        AvailabilityResolver(snapshot).resolve_status("c1", JOB_DATE, "am")


def test_resolver_wraps_provider_errors():
    """Any provider exception surfaces as AvailabilityLookupError."""
    from app.algorithms.availability_resolver import AvailabilityResolver
    from app.core.errors import AvailabilityLookupError

    class BrokenProvider:
        def get_availability_for_date(self, contractor_id, date_key):
            raise ConnectionError("store down")

    with pytest.raises(AvailabilityLookupError) as exc_info:
        AvailabilityResolver(BrokenProvider()).resolve_status("c1", JOB_DATE, "am")

    assert isinstance(exc_info.value.__cause__, ConnectionError)


def test_snapshot_rejects_record_without_owner():
    from app.algorithms.availability_resolver import AvailabilitySnapshot
    from app.core.errors import ValidationError
    from app.schemas.scheduling import AvailabilityRecord

    with pytest.raises(ValidationError):
        AvailabilitySnapshot().add(AvailabilityRecord(date="2026-03-02"))


def test_normalize_availability_and_day_status():
    """Legacy records migrate to blocks; mixed blocks read as busy for the day."""
    from app.algorithms.availability_resolver import day_status_from_blocks, normalize_availability
    from app.constants.scheduling import AvailabilityStatus
    from app.schemas.scheduling import BlockStatus

    legacy = normalize_availability(make_record("c1", status="unavailable"))
    assert legacy.blocks == BlockStatus(am="unavailable", pm="unavailable", evening="unavailable")

    empty = normalize_availability(make_record("c1"))
    assert empty.blocks == BlockStatus()

    assert day_status_from_blocks(BlockStatus()) == AvailabilityStatus.AVAILABLE
    assert day_status_from_blocks(BlockStatus(pm="busy")) == AvailabilityStatus.BUSY


def test_time_block_helpers():
    from app.algorithms.availability_resolver import overlapping_blocks, time_block_for_hour
    from app.constants.scheduling import TimeBlock

    assert time_block_for_hour(6) == TimeBlock.AM
    assert time_block_for_hour(12) == TimeBlock.PM
    assert time_block_for_hour(21) == TimeBlock.EVENING
    assert time_block_for_hour(23) is None
    assert overlapping_blocks(10, 13) == [TimeBlock.AM, TimeBlock.PM]


# ==================== Scoring Tests ====================

def test_sub_scores():
    """Availability, distance and rating sub-scores on the 0-100 scale."""
    from app.algorithms.contractor_scoring import availability_score, distance_score, rating_score
    from app.constants.scheduling import AvailabilityStatus

    assert availability_score(AvailabilityStatus.AVAILABLE) == 100
    assert availability_score(AvailabilityStatus.BUSY) == 40
    assert availability_score(AvailabilityStatus.UNAVAILABLE) == 0
    assert availability_score(AvailabilityStatus.ON_LEAVE) == 0

    assert distance_score(0, 30) == 100
    assert distance_score(15, 30) == pytest.approx(50)
    assert distance_score(30, 30) == 0
    assert distance_score(45, 30) == 0

    assert rating_score(5.0) == 100
    assert rating_score(4.8) == pytest.approx(96)
    assert rating_score(0) == 0


def test_score_nearby_available_contractor():
    """5 mi away, radius 30, rating 4.8, available -> 93."""
    from app.algorithms.contractor_scoring import score_contractor
    from app.constants.scheduling import AvailabilityStatus

    rec = score_contractor(make_contractor("A", miles=5, overall=4.8), make_request(), make_resolver())

    assert rec.score == 93
    assert rec.distance == pytest.approx(5.0)
    assert rec.availability_status == AvailabilityStatus.AVAILABLE
    assert rec.is_within_service_radius is True
    assert rec.breakdown.availability_score == 40.0
    assert rec.breakdown.distance_score == pytest.approx(29.17, abs=0.01)
    assert rec.breakdown.rating_score == 24.0


def test_score_busy_distant_contractor():
    """25 mi away, radius 30, rating 4.8, busy -> 46."""
    from app.algorithms.contractor_scoring import score_contractor
    from app.constants.scheduling import AvailabilityStatus

    resolver = make_resolver(make_record("B", status="busy"))
    rec = score_contractor(make_contractor("B", miles=25, overall=4.8), make_request(), resolver)

    assert rec.score == 46
    assert rec.availability_status == AvailabilityStatus.BUSY
    assert rec.breakdown.availability_score == 16.0


def test_score_contractor_without_coordinates():
    """No geocoded address -> distance unknown, distance score 0, composite 65."""
    from app.algorithms.contractor_scoring import score_contractor

    rec = score_contractor(make_contractor("C", miles=None, overall=5.0), make_request(), make_resolver())

    assert rec.score == 65
    assert rec.distance is None
    assert rec.distance_unknown is True
    assert rec.is_within_service_radius is False
    assert rec.breakdown.distance_score == 0.0


def test_score_exactly_on_radius_boundary():
    """A contractor exactly at the service radius is outside it and gets no distance credit."""
    from app.algorithms.contractor_scoring import is_within_service_radius, score_contractor

    assert is_within_service_radius(30.0, 30.0) is False
    assert is_within_service_radius(29.99, 30.0) is True

    rec = score_contractor(make_contractor("D", miles=40, overall=5.0), make_request(), make_resolver())
    assert rec.is_within_service_radius is False
    assert rec.breakdown.distance_score == 0.0
    assert rec.score == 65


def test_score_unset_radius_uses_default():
    """Unset or non-positive service radius falls back to 30 miles."""
    from app.algorithms.contractor_scoring import score_contractor

    unset = score_contractor(make_contractor("E", miles=15, service_radius=None), make_request(), make_resolver())
    zero = score_contractor(make_contractor("F", miles=15, service_radius=0), make_request(), make_resolver())

    assert unset.breakdown.distance_score == pytest.approx(17.5)
    assert zero.breakdown.distance_score == pytest.approx(17.5)


def test_score_failed_availability_degrades_to_unavailable():
    """A failed availability lookup scores as unavailable and is flagged."""
    from app.algorithms.availability_resolver import AvailabilityResolver, AvailabilitySnapshot
    from app.algorithms.contractor_scoring import score_contractor
    from app.constants.scheduling import AvailabilityStatus

    snapshot = AvailabilitySnapshot()
    snapshot.mark_failed("G")
    rec = score_contractor(make_contractor("G", miles=0, overall=5.0), make_request(), AvailabilityResolver(snapshot))

    assert rec.availability_status == AvailabilityStatus.UNAVAILABLE
    assert rec.availability_unknown is True
    assert rec.score == 60


def test_score_rounds_half_up():
    """A composite of exactly x.5 rounds up."""
    from app.algorithms.contractor_scoring import ScoringWeights, score_contractor

    # busy: 40 * 0.5 + (0.25 / 5 * 100) * 0.5 = 22.5
    weights = ScoringWeights(availability=0.5, distance=0.0, rating=0.5)
    resolver = make_resolver(make_record("H", status="busy"))
    rec = score_contractor(make_contractor("H", miles=1, overall=0.25), make_request(), resolver, weights)

    assert rec.score == 23


def test_score_recommendation_is_independent_of_input():
    """Mutating the input contractor later does not change the recommendation."""
    from app.algorithms.contractor_scoring import score_contractor

    contractor = make_contractor("I", miles=5, overall=4.0)
    rec = score_contractor(contractor, make_request(), make_resolver())
    contractor.business_name = "Renamed"

    assert rec.contractor.business_name == "I LLC"


def test_scoring_weights_validation():
    from app.algorithms.contractor_scoring import DEFAULT_WEIGHTS, ScoringWeights
    from app.core.errors import ValidationError

    assert DEFAULT_WEIGHTS.as_dict() == {"availability": 0.40, "distance": 0.35, "rating": 0.25}

    with pytest.raises(ValidationError):
        ScoringWeights(availability=0.5, distance=0.5, rating=0.5)
    with pytest.raises(ValidationError):
        ScoringWeights(availability=1.2, distance=-0.2, rating=0.0)
    with pytest.raises(ValidationError):
        ScoringWeights(default_service_radius=0)


def test_scoring_weights_from_settings(monkeypatch):
    """Weights are read from the environment."""
    from app.algorithms.contractor_scoring import ScoringWeights
    from app.core.config import Settings

    monkeypatch.setenv("RECOMMENDATION_WEIGHT_AVAILABILITY", "0.5")
    monkeypatch.setenv("RECOMMENDATION_WEIGHT_DISTANCE", "0.3")
    monkeypatch.setenv("RECOMMENDATION_WEIGHT_RATING", "0.2")

    weights = ScoringWeights.from_settings(Settings())
    assert weights.as_dict() == {"availability": 0.5, "distance": 0.3, "rating": 0.2}


@pytest.mark.parametrize("field", ["availability", "distance", "rating", "default_service_radius"])
@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_scoring_weights_reject_non_finite(field, value):
    """NaN and infinite values fail validation instead of poisoning every score."""
    from app.algorithms.contractor_scoring import ScoringWeights
    from app.core.errors import ValidationError

    with pytest.raises(ValidationError):
        ScoringWeights(**{field: value})


def test_scoring_weights_from_settings_rejects_nan(monkeypatch):
    """A `nan` weight in the environment fails when weights are built."""
    from app.algorithms.contractor_scoring import ScoringWeights
    from app.core.config import Settings
    from app.core.errors import ValidationError

    monkeypatch.setenv("RECOMMENDATION_WEIGHT_AVAILABILITY", "nan")

    with pytest.raises(ValidationError):
        ScoringWeights.from_settings(Settings())


# ==================== Ranker Tests ====================

def test_rank_orders_by_score():
    """Nearby available contractor ranks above distant busy one."""
    from app.algorithms.recommendation_ranker import rank_contractors

    a = make_contractor("A", miles=5, overall=4.8)
    b = make_contractor("B", miles=25, overall=4.8)
    resolver = make_resolver(make_record("B", status="busy"))

    ranked = rank_contractors([b, a], make_request(), resolver)

    assert [r.contractor_id for r in ranked] == ["A", "B"]
    assert [r.score for r in ranked] == [93, 46]


def test_rank_max_distance_excludes_unknown_distance():
    """With max_distance set, contractors with unknown distance are dropped."""
    from app.algorithms.recommendation_ranker import rank_contractors
    from app.schemas.scheduling import RecommendationFilters

    a = make_contractor("A", miles=5, overall=4.8)
    c = make_contractor("C", miles=None, overall=5.0)

    unfiltered = rank_contractors([a, c], make_request(), make_resolver())
    assert {r.contractor_id for r in unfiltered} == {"A", "C"}

    filtered = rank_contractors([a, c], make_request(), make_resolver(), RecommendationFilters(max_distance=10))
    assert [r.contractor_id for r in filtered] == ["A"]


def test_rank_only_active_contractors():
    from app.algorithms.recommendation_ranker import rank_contractors

    contractors = [
        make_contractor("active", miles=5),
        make_contractor("pending", miles=5, status="pending"),
        make_contractor("suspended", miles=5, status="suspended"),
    ]
    ranked = rank_contractors(contractors, make_request(), make_resolver())

    assert [r.contractor_id for r in ranked] == ["active"]


def test_rank_trade_filter_overrides_required_trades():
    """A non-empty trade_filter replaces required_trades."""
    from app.algorithms.recommendation_ranker import rank_contractors
    from app.schemas.scheduling import RecommendationFilters

    installer = make_contractor("inst", miles=5, trades=["installer"])
    tech = make_contractor("tech", miles=5, trades=["service_tech", "pm"])
    request = make_request(required_trades=["installer"])

    by_request = rank_contractors([installer, tech], request, make_resolver())
    assert [r.contractor_id for r in by_request] == ["inst"]

    by_filter = rank_contractors(
        [installer, tech], request, make_resolver(), RecommendationFilters(trade_filter=["service_tech"])
    )
    assert [r.contractor_id for r in by_filter] == ["tech"]

    empty_filter = rank_contractors(
        [installer, tech], request, make_resolver(), RecommendationFilters(trade_filter=[])
    )
    assert [r.contractor_id for r in empty_filter] == ["inst"]


def test_rank_min_rating_filter():
    from app.algorithms.recommendation_ranker import rank_contractors
    from app.schemas.scheduling import RecommendationFilters

    contractors = [make_contractor("low", miles=5, overall=3.4), make_contractor("ok", miles=5, overall=3.5)]
    ranked = rank_contractors(contractors, make_request(), make_resolver(), RecommendationFilters(min_rating=3.5))

    assert [r.contractor_id for r in ranked] == ["ok"]


def test_rank_tie_breaks():
    """Equal scores break on distance, then rating, then id."""
    from app.algorithms.recommendation_ranker import rank_contractors

    # All three get no distance credit and score 40 + 0 + 20 = 60
    far = make_contractor("a-far", miles=None, overall=4.0)
    z = make_contractor("z", miles=40, overall=4.0)
    y = make_contractor("y", miles=40, overall=4.0)

    ranked = rank_contractors([far, z, y], make_request(), make_resolver())

    assert all(r.score == ranked[0].score for r in ranked)
    # Known distance beats unknown; equal distances fall back to id
    assert [r.contractor_id for r in ranked] == ["y", "z", "a-far"]


def test_rank_is_deterministic():
    """Input order does not change the output."""
    from app.algorithms.recommendation_ranker import rank_contractors

    contractors = [make_contractor(f"c{i}", miles=i * 3, overall=3.0 + (i % 3) * 0.5) for i in range(8)]
    resolver = make_resolver(make_record("c2", status="busy"), make_record("c5", blocks={"am": "on_leave"}))

    first = [r.contractor_id for r in rank_contractors(contractors, make_request(), resolver)]
    second = [r.contractor_id for r in rank_contractors(list(reversed(contractors)), make_request(), resolver)]

    assert first == second


def test_rank_empty_inputs():
    from app.algorithms.recommendation_ranker import rank_contractors, top_recommendations

    assert rank_contractors([], make_request(), make_resolver()) == []
    assert top_recommendations([make_contractor("A", miles=1)], make_request(), make_resolver(), limit=0) == []


def test_rank_rejects_missing_request():
    from app.algorithms.recommendation_ranker import rank_contractors
    from app.core.errors import ValidationError
    from app.schemas.scheduling import SchedulingRequest

    with pytest.raises(ValidationError):
        rank_contractors([make_contractor("A", miles=1)], None, make_resolver())

    no_location = SchedulingRequest.model_construct(job_date=JOB_DATE, time_block="am", job_location=None)
    with pytest.raises(ValidationError):
        rank_contractors([make_contractor("A", miles=1)], no_location, make_resolver())


def test_top_recommendations_limit():
    from app.algorithms.recommendation_ranker import rank_contractors, top_recommendations
    from app.core.errors import ValidationError

    contractors = [make_contractor(f"c{i}", miles=i + 1) for i in range(7)]
    ranked = rank_contractors(contractors, make_request(), make_resolver())
    top = top_recommendations(contractors, make_request(), make_resolver())

    assert len(top) == 5
    assert [r.contractor_id for r in top] == [r.contractor_id for r in ranked[:5]]

    with pytest.raises(ValidationError):
        top_recommendations(contractors, make_request(), make_resolver(), limit=-1)


def test_available_contractors_only_available_and_idempotent():
    """Only available contractors come back, and re-ranking them changes nothing."""
    from app.algorithms.recommendation_ranker import available_contractors

    contractors = [
        make_contractor("free", miles=5),
        make_contractor("busy", miles=2),
        make_contractor("pm-off", miles=3),
    ]
    resolver = make_resolver(
        make_record("busy", status="busy"),
        make_record("pm-off", blocks={"pm": "unavailable"}),
    )

    first = available_contractors(contractors, make_request("am"), resolver)
    assert [c.id for c in first] == ["pm-off", "free"]

    second = available_contractors(first, make_request("am"), resolver)
    assert [c.id for c in second] == [c.id for c in first]


def test_rank_only_available_filter_is_idempotent():
    """Re-applying only_available to ranked output keeps the same contractors."""
    from app.algorithms.recommendation_ranker import passes_post_filters, rank_contractors
    from app.constants.scheduling import AvailabilityStatus
    from app.schemas.scheduling import RecommendationFilters

    contractors = [
        make_contractor("free", miles=5),
        make_contractor("busy", miles=2),
        make_contractor("pm-off", miles=3),
        make_contractor("leave", miles=1),
    ]
    resolver = make_resolver(
        make_record("busy", status="busy"),
        make_record("pm-off", blocks={"pm": "unavailable"}),
        make_record("leave", status="on_leave"),
    )
    filters = RecommendationFilters(only_available=True)

    ranked = rank_contractors(contractors, make_request("am"), resolver, filters=filters)
    assert [r.contractor_id for r in ranked] == ["pm-off", "free"]
    assert all(r.availability_status == AvailabilityStatus.AVAILABLE for r in ranked)

    refiltered = [r for r in ranked if passes_post_filters(r, filters)]
    assert [r.contractor_id for r in refiltered] == [r.contractor_id for r in ranked]


# ==================== Ratings Tests ====================

def test_overall_rating_weighted_mean():
    from app.algorithms.ratings import calculate_overall_rating, create_rating

    assert calculate_overall_rating({"customer": 5, "speed": 4, "warranty": 4, "internal": 3}) == 4.2
    assert create_rating().overall == 3.0
    assert create_rating(customer=5.0).overall == 3.8


def test_overall_rating_rounds_half_up():
    """A weighted mean ending in exactly .x5 rounds up, not to even."""
    from app.algorithms.ratings import calculate_overall_rating

    assert calculate_overall_rating({"customer": 0, "speed": 1.25, "warranty": 0, "internal": 0}) == 0.3
    assert calculate_overall_rating({"customer": 0, "speed": 3.75, "warranty": 0, "internal": 0}) == 0.8



def test_update_rating_recalculates_overall():
    from app.algorithms.ratings import create_rating, update_rating

    rating = update_rating(create_rating(), speed=5.0, internal=5.0)
    assert rating.speed == 5.0
    assert rating.customer == 3.0
    assert rating.overall == 3.8

    with pytest.raises(ValueError):
        update_rating(create_rating(), overall=5.0)


def test_rating_tiers_and_commission():
    from app.algorithms.ratings import (
        commission_rate,
        performance_tier,
        rating_level,
        rating_tier,
        validate_rating_value,
    )

    assert rating_tier(4.8) == "elite"
    assert rating_tier(3.9) == "pro"
    assert rating_tier(2.0) == "standard"

    assert performance_tier(2.6) == "standard"
    assert performance_tier(1.6) == "needs_improvement"
    assert performance_tier(1.0) == "probation"

    assert commission_rate("elite") == 0.10
    assert commission_rate("pro") == 0.09
    assert commission_rate("standard") == 0.08

    assert rating_level(4.5) == "Excellent"
    assert rating_level(1.0) == "Poor"
    assert validate_rating_value(1.0) and not validate_rating_value(0.5)


def test_score_bounds_and_breakdown_sum():
    """Scores stay in 0-100 and the breakdown sums to the score within rounding."""
    from app.algorithms.recommendation_ranker import rank_contractors

    contractors = [
        make_contractor(f"c{i}", miles=(None if i % 5 == 0 else i * 2.5), overall=(i % 6) * 1.0)
        for i in range(20)
    ]
    resolver = make_resolver(
        make_record("c3", status="busy"),
        make_record("c4", status="on_leave"),
        make_record("c7", blocks={"am": "unavailable"}),
    )

    for rec in rank_contractors(contractors, make_request(), resolver):
        assert 0 <= rec.score <= 100
        assert abs(rec.breakdown.total() - rec.score) <= 0.5 + 0.015
