"""Normal / borderline / abnormal classification against a reference range.

A value inside [low, high] is normal. A value outside the range but within
a tolerance band around its edges is borderline; anything further out is
abnormal. The band is a fraction of the range width (default 10%, see
Settings.borderline_tolerance) and can be overridden per call, since a
sensible tolerance varies by test.

For one-sided ranges ("< 200", "> 60") there is no width, so the band is
the same fraction of the single bound's magnitude.
"""

from clinical_trends.config import settings
from clinical_trends.schemas.observation import Observation, ObservationStatus, ParsedRange
from clinical_trends.utils.parsing import parse_numeric


def _band_width(reference_range: ParsedRange) -> float:
    low, high = reference_range.low, reference_range.high
    if low is not None and high is not None and high > low:
        return high - low
    bound = low if low is not None else high
    return abs(bound) if bound is not None else 0.0


def classify(
    value: float,
    reference_range: ParsedRange | None,
    *,
    fallback: ObservationStatus | None = None,
    tolerance: float | None = None,
) -> ObservationStatus | None:
    """Classify a numeric value against a reference range.

    Boundary semantics are inclusive: a value equal to a bound is normal.

    Args:
        value: Numeric observation value.
        reference_range: Parsed bounds, or None when no range is known.
        fallback: Status supplied upstream, returned unchanged when there is
            no usable range. The classifier never invents a status.
        tolerance: Borderline band as a fraction of range width. Defaults to
            settings.borderline_tolerance.

    Returns:
        ObservationStatus, or the fallback (possibly None) without a range.
    """
    if reference_range is None or not reference_range.is_usable:
        return fallback

    if tolerance is None:
        tolerance = settings.borderline_tolerance
    margin = tolerance * _band_width(reference_range)

    low, high = reference_range.low, reference_range.high
    if low is not None and value < low:
        return ObservationStatus.BORDERLINE if value >= low - margin else ObservationStatus.ABNORMAL
    if high is not None and value > high:
        return ObservationStatus.BORDERLINE if value <= high + margin else ObservationStatus.ABNORMAL
    return ObservationStatus.NORMAL


def classify_observation(
    observation: Observation,
    reference_range: ParsedRange | None,
    *,
    tolerance: float | None = None,
) -> ObservationStatus | None:
    """Classify an Observation, falling back to its upstream status."""
    return classify(
        parse_numeric(observation.value),
        reference_range,
        fallback=observation.status,
        tolerance=tolerance,
    )
