"""Medication timeline differ.

Compares medication lists across sequential visit reports. Medications are
identified by normalized name, so "Lisinopril" and " lisinopril " are the
same drug across visits.

Dosage changes are detected by raw string inequality. "10mg" vs "10 mg"
therefore counts as a change; dosage text is not normalized because the
source format is inconsistent and normalizing it could hide a real
therapeutic change.
"""

import logging
from collections.abc import Iterable

from clinical_trends.schemas.medication import (
    ContinuedMedication,
    DosagePoint,
    DosageTrend,
    MedicationDiff,
    MedicationRecord,
    ReportSnapshot,
)
from clinical_trends.utils.parsing import normalize_name, parse_numeric

logger = logging.getLogger(__name__)


def sort_snapshots(snapshots: Iterable[ReportSnapshot]) -> list[ReportSnapshot]:
    """Return snapshots oldest first, keeping input order for equal timestamps."""
    return sorted(snapshots, key=lambda s: s.visit_timestamp)


def _index_by_name(medications: Iterable[MedicationRecord]) -> dict[str, MedicationRecord]:
    """Map normalized name to the first record with that name."""
    index: dict[str, MedicationRecord] = {}
    for med in medications:
        index.setdefault(normalize_name(med.name), med)
    return index


def diff_latest(snapshots: Iterable[ReportSnapshot]) -> MedicationDiff:
    """Compare the two most recent snapshots.

    Args:
        snapshots: Visit snapshots in any order.

    Returns:
        MedicationDiff of the latest snapshot against the one before it.
        With a single snapshot, every medication is continued with no
        previous dosage and insufficient_history is set. With none, the
        diff is empty and insufficient_history is set.
    """
    ordered = sort_snapshots(snapshots)
    if not ordered:
        return MedicationDiff(insufficient_history=True)

    latest = ordered[-1]
    if len(ordered) == 1:
        return MedicationDiff(
            continued=tuple(ContinuedMedication(current=med) for med in latest.medications),
            insufficient_history=True,
        )

    previous = ordered[-2]
    previous_by_name = _index_by_name(previous.medications)
    latest_names = {normalize_name(med.name) for med in latest.medications}

    added: list[MedicationRecord] = []
    continued: list[ContinuedMedication] = []
    for med in latest.medications:
        prior = previous_by_name.get(normalize_name(med.name))
        if prior is None:
            added.append(med)
            continue
        continued.append(
            ContinuedMedication(
                current=med,
                previous_dosage=prior.dosage,
                dosage_changed=med.dosage != prior.dosage,
            )
        )

    dropped = [
        med for med in previous.medications if normalize_name(med.name) not in latest_names
    ]

    logger.debug(
        "Medication diff %s -> %s: %d added, %d dropped, %d continued",
        previous.report_id,
        latest.report_id,
        len(added),
        len(dropped),
        len(continued),
    )
    return MedicationDiff(
        added=tuple(added),
        dropped=tuple(dropped),
        continued=tuple(continued),
    )


def build_dosage_trend(
    snapshots: Iterable[ReportSnapshot],
    medication_name: str,
) -> DosageTrend:
    """Build the dosage-over-time series for one medication.

    Every snapshot is scanned, not just the latest two. Snapshots that do
    not list the medication, or list it without a dosage, contribute no
    point; they are not represented as zero.
    """
    identity = normalize_name(medication_name)
    points: list[DosagePoint] = []
    for snapshot in sort_snapshots(snapshots):
        match = next(
            (med for med in snapshot.medications if normalize_name(med.name) == identity),
            None,
        )
        if match is None or not match.dosage:
            continue
        points.append(
            DosagePoint(
                timestamp=snapshot.visit_timestamp,
                dosage_raw=match.dosage,
                dosage_numeric=parse_numeric(match.dosage),
            )
        )
    return DosageTrend(medication_name=medication_name, points=tuple(points))


def build_dosage_trends(snapshots: Iterable[ReportSnapshot]) -> list[DosageTrend]:
    """Build dosage trends for every medication in the latest snapshot.

    Medications with no dosage on record in any snapshot are omitted.
    """
    ordered = sort_snapshots(snapshots)
    if not ordered:
        return []

    trends: list[DosageTrend] = []
    for med in _index_by_name(ordered[-1].medications).values():
        trend = build_dosage_trend(ordered, med.name)
        if trend.points:
            trends.append(trend)
    return trends
