"""Parsing helpers for free-text clinical values.

All functions are pure and degrade gracefully on malformed input: an
unparseable value becomes 0 and an unparseable range becomes None.
"""

import logging
import re

from clinical_trends.schemas.observation import ParsedRange

logger = logging.getLogger(__name__)

_NUMBER = r"\d*\.?\d+"

_NUMERIC_RE = re.compile(_NUMBER)

# Precedence matters: "70-100" must be read as two-sided, never as "> 70".
_TWO_SIDED_RE = re.compile(rf"({_NUMBER})\s*[-–—]\s*({_NUMBER})")
_UPPER_ONLY_RE = re.compile(rf"<\s*({_NUMBER})")
_LOWER_ONLY_RE = re.compile(rf">\s*({_NUMBER})")


def normalize_name(name: str | None) -> str:
    """Return the comparison identity for a test or medication name.

    Args:
        name: Name as written on a report.

    Returns:
        Trimmed, lowercased name ("" for None).
    """
    if not name:
        return ""
    return name.strip().lower()


def parse_numeric(raw: str | None) -> float:
    """Extract the first number from a value string.

    Only the first numeric token is read, so "120/80 mmHg" gives 120 and
    the diastolic half is ignored. Signs are not part of the token.

    Args:
        raw: Value text, e.g. "98%", "4.2", "120/80 mmHg".

    Returns:
        The number, or 0.0 when the text holds none. A 0.0 result may mean
        "unparseable" rather than a true zero reading.
    """
    if not raw:
        return 0.0
    match = _NUMERIC_RE.search(raw)
    if match is None:
        logger.debug("No numeric token in value %r; treating as 0", raw)
        return 0.0
    return float(match.group(0))


def parse_range(raw: str | None) -> ParsedRange | None:
    """Extract bounds from a reference-range string.

    Supported forms, first match wins:
      "70-100", "70 – 100 mg/dL"  -> low=70, high=100
      "< 200", "<200 mg/dL"       -> low=None, high=200
      "> 60"                      -> low=60, high=None

    Args:
        raw: Reference range text, or None.

    Returns:
        ParsedRange, or None if the text is empty or matches no form.
    """
    if not raw or not raw.strip():
        return None

    two_sided = _TWO_SIDED_RE.search(raw)
    if two_sided:
        return ParsedRange(low=float(two_sided.group(1)), high=float(two_sided.group(2)))

    upper = _UPPER_ONLY_RE.search(raw)
    if upper:
        return ParsedRange(high=float(upper.group(1)))

    lower = _LOWER_ONLY_RE.search(raw)
    if lower:
        return ParsedRange(low=float(lower.group(1)))

    logger.debug("Unrecognised reference range %r", raw)
    return None
