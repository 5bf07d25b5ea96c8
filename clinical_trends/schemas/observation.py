"""Pydantic schemas for recorded lab and vital observations.

Observations arrive from report ingestion with free-text values and
reference ranges. They are frozen: the engine derives views from them but
never changes them.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from clinical_trends.utils.dates import as_utc


class ObservationStatus(str, Enum):
    """Clinical classification of a single observation."""

    NORMAL = "normal"
    BORDERLINE = "borderline"
    ABNORMAL = "abnormal"


class ParsedRange(BaseModel):
    """Numeric bounds extracted from a reference-range string.

    A None bound is unbounded on that side. Parsing never produces a range
    with both bounds None; callers treat such a value as "no usable range".
    """

    model_config = ConfigDict(frozen=True)

    low: float | None = None
    high: float | None = None

    @property
    def is_usable(self) -> bool:
        """True when at least one bound is set."""
        return self.low is not None or self.high is not None


class Observation(BaseModel):
    """One recorded test or vital result tied to a point in time."""

    model_config = ConfigDict(frozen=True)

    test_name: str = Field(..., description="Test or vital name as written on the report")
    value: str = Field(..., description="Raw value text, e.g. '120/80 mmHg' or '98%'")
    unit: str | None = None
    reference_range_raw: str | None = Field(
        default=None,
        description="Reference range text as printed on the report",
    )
    status: ObservationStatus | None = Field(
        default=None,
        description="Status assigned upstream by report ingestion, if any",
    )
    recorded_at: datetime
    source_document: str | None = Field(
        default=None,
        description="Filename of the report this observation was extracted from",
    )

    @field_validator("recorded_at")
    @classmethod
    def _recorded_at_utc(cls, value: datetime) -> datetime:
        return as_utc(value)
