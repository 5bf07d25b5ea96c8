"""Estimated reference ranges for common lab tests and vitals.

Used only when a report does not print its own range. Keys are normalized
(lowercase) test names; values are raw range strings in the same formats
the range parser accepts for report-supplied ranges.

These values are approximate population ranges, not a medical source of
truth. Anything derived from them must be labelled as an estimate.
"""

import logging
from types import MappingProxyType

from clinical_trends.utils.parsing import normalize_name

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Catalog
#
# Declaration order is significant: substring lookups return the first hit.
# ---------------------------------------------------------------------------

ESTIMATED_REFERENCE_RANGES: MappingProxyType[str, str] = MappingProxyType({
    # CBC
    "wbc": "4.5-11.0 x10^9/L",
    "rbc": "4.7-6.1 x10^12/L",
    "hemoglobin": "12.0-17.5 g/dL",
    "hematocrit": "36-54%",
    "platelets": "150-400 x10^9/L",
    # BMP
    "sodium": "136-145 mmol/L",
    "potassium": "3.5-5.0 mmol/L",
    "chloride": "98-106 mmol/L",
    "bicarbonate": "23-29 mmol/L",
    "bun": "7-20 mg/dL",
    "creatinine": "0.7-1.3 mg/dL",
    "glucose": "70-100 mg/dL",
    "blood sugar": "70-100 mg/dL",
    "fasting glucose": "70-100 mg/dL",
    # Lipid panel
    "total cholesterol": "< 200 mg/dL",
    "cholesterol": "< 200 mg/dL",
    "triglycerides": "< 150 mg/dL",
    "hdl": "> 40 mg/dL",
    "hdl cholesterol": "> 40 mg/dL",
    "ldl": "< 100 mg/dL",
    "ldl cholesterol": "< 100 mg/dL",
    # HbA1c
    "hba1c": "4.0-5.6%",
    "hemoglobin a1c": "4.0-5.6%",
    "a1c": "4.0-5.6%",
    # Cardiac
    "troponin": "< 0.04 ng/mL",
    "troponin i": "< 0.04 ng/mL",
    "troponin t": "< 0.01 ng/mL",
    "bnp": "< 100 pg/mL",
    "crp": "< 3.0 mg/L",
    "hs-crp": "< 2.0 mg/L",
    # Thyroid
    "tsh": "0.4-4.0 mIU/L",
    "t3": "80-200 ng/dL",
    "t4": "5.0-12.0 mcg/dL",
    "free t4": "0.8-1.8 ng/dL",
    # Liver
    "alt": "7-56 U/L",
    "ast": "10-40 U/L",
    "alp": "44-147 U/L",
    "bilirubin": "0.1-1.2 mg/dL",
    "albumin": "3.5-5.5 g/dL",
    # Kidney
    "gfr": "> 60 mL/min",
    "egfr": "> 60 mL/min",
    # Iron
    "iron": "60-170 mcg/dL",
    "ferritin": "12-300 ng/mL",
    # Vitamins
    "vitamin d": "30-100 ng/mL",
    "vitamin b12": "200-900 pg/mL",
    # Vitals
    "blood pressure": "< 120/80 mmHg",
    "systolic": "< 120 mmHg",
    "diastolic": "< 80 mmHg",
})

# Name fragments that mark a test as a vital sign rather than a lab result
VITAL_KEYWORDS: tuple[str, ...] = (
    "blood pressure",
    "bp",
    "systolic",
    "diastolic",
    "heart rate",
    "pulse",
    "oxygen",
    "spo2",
    "temperature",
    "temp",
    "respiratory",
    "glucose",
    "blood sugar",
)


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------


def lookup_reference_range(test_name: str | None) -> str | None:
    """Return the estimated range string for a test name.

    Tries an exact match on the normalized name, then a substring match in
    either direction (catalog key inside the name, or name inside the key),
    returning the first hit in declaration order.

    Args:
        test_name: Test name as written on the report (e.g. "Fasting Glucose").

    Returns:
        Raw range string (e.g. "70-100 mg/dL"), or None if nothing matches.
    """
    name = normalize_name(test_name)
    if not name:
        return None

    exact = ESTIMATED_REFERENCE_RANGES.get(name)
    if exact is not None:
        return exact

    for key, raw_range in ESTIMATED_REFERENCE_RANGES.items():
        if key in name or name in key:
            logger.debug("Catalog range for %r matched by substring on %r", test_name, key)
            return raw_range
    return None


def is_vital(test_name: str | None) -> bool:
    """Return True if the test name looks like a vital sign."""
    name = normalize_name(test_name)
    return any(keyword in name for keyword in VITAL_KEYWORDS)
