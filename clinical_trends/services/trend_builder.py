"""Trend series builder.

Turns the observation history for one test into a chart-ready TrendSeries:
chronological numeric points, summary statistics, a resolved reference
range (report-supplied or catalog-estimated), and y-axis bounds that always
include the reference band.

Also provides the overview helpers used for per-test cards (latest value,
sparkline values).

Every function here is pure. Results can be cached by the caller per test
name, but recomputing is always safe.
"""

import logging
import math
from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta, timezone

from clinical_trends.config import settings
from clinical_trends.schemas.observation import Observation, ParsedRange
from clinical_trends.schemas.trend import (
    ReferenceSource,
    ResultOverview,
    TimeRange,
    TrendPoint,
    TrendSeries,
    TrendStats,
    YBounds,
)
from clinical_trends.services.reference_ranges import is_vital, lookup_reference_range
from clinical_trends.services.status_classifier import classify_observation
from clinical_trends.utils.dates import as_utc
from clinical_trends.utils.parsing import normalize_name, parse_numeric, parse_range

logger = logging.getLogger(__name__)

# None means unbounded
_TIME_RANGE_WINDOWS: dict[TimeRange, timedelta | None] = {
    TimeRange.DAY: timedelta(days=1),
    TimeRange.WEEK: timedelta(weeks=1),
    TimeRange.MONTH: timedelta(days=30),
    TimeRange.YEAR: timedelta(days=365),
    TimeRange.ALL: None,
}


def _parse_time_range(time_range: TimeRange | str | None) -> TimeRange:
    """Coerce a time range value, treating unknown strings as unbounded."""
    if time_range is None:
        return TimeRange.ALL
    if isinstance(time_range, TimeRange):
        return time_range
    try:
        return TimeRange(time_range.strip().lower())
    except ValueError:
        logger.warning("Unknown time range %r; showing all observations", time_range)
        return TimeRange.ALL


def matching_observations(
    observations: Iterable[Observation],
    test_name: str,
) -> list[Observation]:
    """Return observations for one test in chronological order.

    Names are compared by normalized identity. The sort is stable, so
    observations sharing a timestamp keep their input order.
    """
    identity = normalize_name(test_name)
    matches = [obs for obs in observations if normalize_name(obs.test_name) == identity]
    return sorted(matches, key=lambda obs: obs.recorded_at)


def filter_by_time_range(
    points: Sequence[TrendPoint],
    time_range: TimeRange | str | None,
    now: datetime,
) -> list[TrendPoint]:
    """Keep points recorded at or after now minus the window."""
    window = _TIME_RANGE_WINDOWS[_parse_time_range(time_range)]
    if window is None:
        return list(points)
    cutoff = as_utc(now) - window
    return [p for p in points if p.timestamp >= cutoff]


def resolve_reference_range(
    observations: Sequence[Observation],
    test_name: str,
) -> tuple[ParsedRange | None, ReferenceSource]:
    """Pick the reference range for a series and record where it came from.

    The newest observation carrying a parseable range wins. Without one,
    the estimated catalog range for the test name is used.

    Args:
        observations: Matching observations, oldest first.
        test_name: Test name used for the catalog fallback.

    Returns:
        Tuple of (parsed_range, source). (None, NONE) if nothing resolves.
    """
    for obs in reversed(observations):
        parsed = parse_range(obs.reference_range_raw)
        if parsed is not None:
            return parsed, ReferenceSource.REPORT

    parsed = parse_range(lookup_reference_range(test_name))
    if parsed is not None:
        logger.debug("Using estimated catalog range for %r", test_name)
        return parsed, ReferenceSource.CATALOG
    return None, ReferenceSource.NONE


def compute_stats(values: Sequence[float]) -> TrendStats:
    """Compute min, max and average (rounded to one decimal)."""
    if not values:
        return TrendStats()
    return TrendStats(
        min=min(values),
        max=max(values),
        avg=round(sum(values) / len(values), 1),
    )


def compute_y_bounds(
    stats: TrendStats,
    reference_range: ParsedRange | None,
    *,
    min_span_floor: float | None = None,
    min_span_ratio: float | None = None,
    padding_ratio: float | None = None,
) -> YBounds:
    """Compute y-axis bounds covering the data and the reference band.

    Steps:
      1. Union of the data [min, max] and any reference bounds.
      2. If the span is below max(min_span_floor, min_span_ratio * midpoint),
         widen it symmetrically around the midpoint, so a flat series does
         not render as a meaningless flat line.
      3. Pad both ends by padding_ratio of the span, rounding outward to
         one decimal.
      4. If the data are all non-negative, clamp the lower bound at zero.

    Args:
        stats: Statistics of a non-empty series.
        reference_range: Resolved reference range, if any.
        min_span_floor: Defaults to settings.min_span_floor.
        min_span_ratio: Defaults to settings.min_span_ratio.
        padding_ratio: Defaults to settings.y_padding_ratio.

    Returns:
        YBounds with min <= every data value and bound, max >= all of them.
    """
    if min_span_floor is None:
        min_span_floor = settings.min_span_floor
    if min_span_ratio is None:
        min_span_ratio = settings.min_span_ratio
    if padding_ratio is None:
        padding_ratio = settings.y_padding_ratio

    y_min, y_max = stats.min, stats.max
    if reference_range is not None:
        for bound in (reference_range.low, reference_range.high):
            if bound is not None:
                y_min = min(y_min, bound)
                y_max = max(y_max, bound)

    center = (y_min + y_max) / 2
    min_span = max(min_span_ratio * abs(center), min_span_floor)
    if y_max - y_min < min_span:
        y_min = center - min_span / 2
        y_max = center + min_span / 2

    pad = (y_max - y_min) * padding_ratio
    # round off float noise before flooring/ceiling to one decimal
    y_min = math.floor(round((y_min - pad) * 10, 6)) / 10
    y_max = math.ceil(round((y_max + pad) * 10, 6)) / 10

    if stats.min >= 0:
        y_min = max(0.0, y_min)
    return YBounds(min=y_min, max=y_max)


def build_trend_series(
    observations: Iterable[Observation],
    test_name: str,
    time_range: TimeRange | str | None = TimeRange.ALL,
    now: datetime | None = None,
    *,
    tolerance: float | None = None,
    min_span_floor: float | None = None,
    min_span_ratio: float | None = None,
    padding_ratio: float | None = None,
) -> TrendSeries:
    """Build the chart series for one test.

    Args:
        observations: Observation history, any tests, any order.
        test_name: Test to chart; matched case- and whitespace-insensitively.
        time_range: Window counted back from now (1d, 1w, 1m, 1y, all).
        now: Reference instant for the window. Defaults to the current time
            (UTC). Naive values are read as UTC.
        tolerance: Borderline tolerance override for point statuses.
        min_span_floor: Y-bounds override, see compute_y_bounds.
        min_span_ratio: Y-bounds override, see compute_y_bounds.
        padding_ratio: Y-bounds override, see compute_y_bounds.

    Returns:
        TrendSeries. With no points in the window, stats are all zero and
        y_bounds is None; callers must not chart it.
    """
    matches = matching_observations(observations, test_name)
    reference_range, reference_source = resolve_reference_range(matches, test_name)

    points = [
        TrendPoint(
            value=parse_numeric(obs.value),
            timestamp=obs.recorded_at,
            status=classify_observation(obs, reference_range, tolerance=tolerance),
            raw_observation=obs,
        )
        for obs in matches
    ]

    now = datetime.now(timezone.utc) if now is None else as_utc(now)
    points = filter_by_time_range(points, time_range, now)

    if not points:
        return TrendSeries(
            test_name=test_name,
            reference_range=reference_range,
            reference_source=reference_source,
        )

    stats = compute_stats([p.value for p in points])
    y_bounds = compute_y_bounds(
        stats,
        reference_range,
        min_span_floor=min_span_floor,
        min_span_ratio=min_span_ratio,
        padding_ratio=padding_ratio,
    )

    logger.debug(
        "Built %r trend: %d points, reference source %s",
        test_name,
        len(points),
        reference_source.value,
    )
    return TrendSeries(
        test_name=test_name,
        points=tuple(points),
        stats=stats,
        y_bounds=y_bounds,
        reference_range=reference_range,
        reference_source=reference_source,
    )


# =============================================================================
# Overview helpers
# =============================================================================


def latest_observation(
    observations: Iterable[Observation],
    test_name: str,
) -> Observation | None:
    """Return the most recent observation for a test, or None."""
    matches = matching_observations(observations, test_name)
    return matches[-1] if matches else None


def sparkline_values(
    observations: Iterable[Observation],
    test_name: str,
    limit: int | None = None,
) -> list[float]:
    """Return the last `limit` values for a test, oldest first.

    Returns an empty list when there are fewer than two observations,
    since a single point draws no line.
    """
    if limit is None:
        limit = settings.sparkline_points
    matches = matching_observations(observations, test_name)
    if len(matches) < 2 or limit <= 0:
        return []
    return [parse_numeric(obs.value) for obs in matches[-limit:]]


def build_test_overview(
    observations: Iterable[Observation],
    *,
    limit: int | None = None,
) -> list[ResultOverview]:
    """Summarize every distinct test in an observation history.

    Tests are listed in first-seen order under their first-seen spelling.
    """
    observations = list(observations)
    display_names: dict[str, str] = {}
    for obs in observations:
        display_names.setdefault(normalize_name(obs.test_name), obs.test_name)

    overview: list[ResultOverview] = []
    for display_name in display_names.values():
        overview.append(
            ResultOverview(
                test_name=display_name,
                latest=matching_observations(observations, display_name)[-1],
                sparkline=tuple(sparkline_values(observations, display_name, limit)),
                is_vital=is_vital(display_name),
            )
        )
    return overview
