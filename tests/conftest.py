"""Pytest configuration and shared builders.

Provides small factories for observations and medication snapshots so
tests can describe histories in one line per reading.
"""

from datetime import datetime, timezone

import pytest

from clinical_trends.schemas import MedicationRecord, Observation, ReportSnapshot

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_observation(
    value: str,
    recorded_at: str | datetime,
    *,
    test_name: str = "Glucose",
    reference_range: str | None = None,
    status: str | None = None,
    unit: str | None = "mg/dL",
) -> Observation:
    """Create an Observation; ISO date strings are read as UTC midnight."""
    if isinstance(recorded_at, str):
        recorded_at = datetime.fromisoformat(recorded_at).replace(tzinfo=timezone.utc)
    return Observation(
        test_name=test_name,
        value=value,
        unit=unit,
        reference_range_raw=reference_range,
        status=status,
        recorded_at=recorded_at,
        source_document=f"report-{recorded_at:%Y%m%d}.pdf",
    )


def make_snapshot(
    report_id: int,
    visit_date: str,
    medications: list[tuple[str, str | None]],
) -> ReportSnapshot:
    """Create a ReportSnapshot from (name, dosage) pairs."""
    return ReportSnapshot(
        report_id=report_id,
        visit_timestamp=datetime.fromisoformat(visit_date).replace(tzinfo=timezone.utc),
        medications=[
            MedicationRecord(id=f"{report_id}-{i}", name=name, dosage=dosage)
            for i, (name, dosage) in enumerate(medications)
        ],
    )


@pytest.fixture
def now() -> datetime:
    """Fixed reference instant for time-window tests."""
    return NOW


@pytest.fixture
def glucose_history() -> list[Observation]:
    """Glucose readings over a year, mixed with an unrelated test."""
    return [
        make_observation("92 mg/dL", "2024-07-01", reference_range="70-100 mg/dL"),
        make_observation("104", "2025-01-15", status="borderline"),
        make_observation("4.1", "2025-02-01", test_name="Potassium", unit="mmol/L"),
        make_observation("98 mg/dL", "2025-05-20"),
        make_observation("130 mg/dL", "2025-05-31", status="abnormal"),
    ]
