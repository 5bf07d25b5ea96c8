"""Pydantic schemas for per-test trend series."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from clinical_trends.schemas.observation import Observation, ObservationStatus, ParsedRange


class TimeRange(str, Enum):
    """Chart window, counted back from "now"."""

    DAY = "1d"
    WEEK = "1w"
    MONTH = "1m"
    YEAR = "1y"
    ALL = "all"


class ReferenceSource(str, Enum):
    """Where a series' reference range came from.

    CATALOG ranges are estimates and must be labelled as such wherever shown.
    """

    REPORT = "report"
    CATALOG = "catalog"
    NONE = "none"


class TrendPoint(BaseModel):
    """A single charted value."""

    model_config = ConfigDict(frozen=True)

    value: float
    timestamp: datetime
    status: ObservationStatus | None = None
    raw_observation: Observation


class TrendStats(BaseModel):
    """Summary statistics over the charted values. All zero when empty."""

    model_config = ConfigDict(frozen=True)

    min: float = 0.0
    max: float = 0.0
    avg: float = 0.0


class YBounds(BaseModel):
    """Y-axis extent, always covering both the data and the reference band."""

    model_config = ConfigDict(frozen=True)

    min: float
    max: float


class TrendSeries(BaseModel):
    """Chronological series for one test, ready for charting."""

    model_config = ConfigDict(frozen=True)

    test_name: str
    points: tuple[TrendPoint, ...] = ()
    stats: TrendStats = Field(default_factory=TrendStats)
    y_bounds: YBounds | None = Field(
        default=None,
        description="None for an empty series; callers must not chart it",
    )
    reference_range: ParsedRange | None = None
    reference_source: ReferenceSource = ReferenceSource.NONE

    @property
    def is_empty(self) -> bool:
        """True when no points fall inside the window."""
        return not self.points

    @property
    def is_estimated_range(self) -> bool:
        """True when the range is a catalog estimate rather than report-supplied."""
        return self.reference_source is ReferenceSource.CATALOG


class ResultOverview(BaseModel):
    """Card-level summary of one test: latest reading plus a sparkline."""

    model_config = ConfigDict(frozen=True)

    test_name: str
    latest: Observation
    sparkline: tuple[float, ...] = ()
    is_vital: bool = False
