"""Pydantic schemas for visit medication snapshots and their diffs."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from clinical_trends.utils.dates import as_utc


class MedicationRecord(BaseModel):
    """One medication as listed on a visit report."""

    model_config = ConfigDict(frozen=True)

    id: str | int
    name: str
    dosage: str | None = None
    frequency: str | None = None
    purpose: str | None = None


class ReportSnapshot(BaseModel):
    """The full medication list as of one visit report."""

    model_config = ConfigDict(frozen=True)

    report_id: str | int
    visit_timestamp: datetime
    medications: tuple[MedicationRecord, ...] = ()

    @field_validator("visit_timestamp")
    @classmethod
    def _visit_timestamp_utc(cls, value: datetime) -> datetime:
        return as_utc(value)


class ContinuedMedication(BaseModel):
    """A medication present in both of the two latest snapshots."""

    model_config = ConfigDict(frozen=True)

    current: MedicationRecord
    previous_dosage: str | None = None
    dosage_changed: bool = False


class MedicationDiff(BaseModel):
    """Changes between the two most recent snapshots.

    With fewer than two snapshots, insufficient_history is set and every
    medication is reported as continued; that is not the same as "no changes".
    """

    model_config = ConfigDict(frozen=True)

    added: tuple[MedicationRecord, ...] = ()
    dropped: tuple[MedicationRecord, ...] = ()
    continued: tuple[ContinuedMedication, ...] = ()
    insufficient_history: bool = False

    @property
    def has_changes(self) -> bool:
        """True if anything was added, dropped, or had its dosage changed."""
        return bool(
            self.added
            or self.dropped
            or any(c.dosage_changed for c in self.continued)
        )


class DosagePoint(BaseModel):
    """Dosage of one medication at one visit."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    dosage_raw: str
    dosage_numeric: float = Field(..., description="0 when the dosage text has no number")


class DosageTrend(BaseModel):
    """Dosage over time for one medication across all snapshots."""

    model_config = ConfigDict(frozen=True)

    medication_name: str
    points: tuple[DosagePoint, ...] = ()
