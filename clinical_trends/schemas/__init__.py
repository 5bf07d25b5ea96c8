"""Pydantic schemas."""

from clinical_trends.schemas.medication import (
    ContinuedMedication,
    DosagePoint,
    DosageTrend,
    MedicationDiff,
    MedicationRecord,
    ReportSnapshot,
)
from clinical_trends.schemas.observation import (
    Observation,
    ObservationStatus,
    ParsedRange,
)
from clinical_trends.schemas.trend import (
    ReferenceSource,
    ResultOverview,
    TimeRange,
    TrendPoint,
    TrendSeries,
    TrendStats,
    YBounds,
)

__all__ = [
    "ContinuedMedication",
    "DosagePoint",
    "DosageTrend",
    "MedicationDiff",
    "MedicationRecord",
    "Observation",
    "ObservationStatus",
    "ParsedRange",
    "ReferenceSource",
    "ReportSnapshot",
    "ResultOverview",
    "TimeRange",
    "TrendPoint",
    "TrendSeries",
    "TrendStats",
    "YBounds",
]
