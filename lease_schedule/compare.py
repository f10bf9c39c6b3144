"""Field-by-field comparison of two sets of structured schedule entries."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from .models import DiffReport, Mismatch, ScheduleEntry
from .normalize import normalize_text

__all__ = ["COMPARED_FIELDS", "index_by_entry", "find_duplicates", "compare_schedules"]

COMPARED_FIELDS = (
    ("RegistrationDateAndPlanRef", "registration_date_and_plan_ref"),
    ("PropertyDescription", "property_description"),
    ("DateOfLeaseAndTerm", "date_of_lease_and_term"),
    ("LesseesTitle", "lessees_title"),
)


def index_by_entry(entries: Iterable[ScheduleEntry]) -> Dict[int, ScheduleEntry]:
    """Map entry number to entry; the first occurrence of a number wins."""
    index: Dict[int, ScheduleEntry] = {}
    for entry in entries:
        index.setdefault(entry.entry_number, entry)
    return index


def find_duplicates(entries: Optional[Iterable[ScheduleEntry]]) -> List[int]:
    seen: set[int] = set()
    duplicates: set[int] = set()
    for entry in entries or []:
        if entry.entry_number in seen:
            duplicates.add(entry.entry_number)
        seen.add(entry.entry_number)
    return sorted(duplicates)


def compare_schedules(
    candidate: Optional[Iterable[ScheduleEntry]],
    reference: Optional[Iterable[ScheduleEntry]],
) -> DiffReport:
    """
    Compare ``candidate`` entries against ``reference`` entries.

    Entries are matched by number. Text is compared exactly after whitespace
    normalization; a missing notes list equals an empty one.
    """
    ours = index_by_entry(candidate or [])
    expected = index_by_entry(reference or [])

    report = DiffReport(
        missing=sorted(expected.keys() - ours.keys()),
        extra=sorted(ours.keys() - expected.keys()),
    )
    for entry_number in sorted(ours.keys() & expected.keys()):
        report.mismatches.extend(_compare_entry(ours[entry_number], expected[entry_number]))
    return report


def _compare_entry(ours: ScheduleEntry, expected: ScheduleEntry) -> List[Mismatch]:
    mismatches: List[Mismatch] = []
    for label, attribute in COMPARED_FIELDS:
        a = normalize_text(getattr(ours, attribute))
        b = normalize_text(getattr(expected, attribute))
        if a != b:
            mismatches.append(Mismatch(ours.entry_number, label, a, b))
    mismatches.extend(_compare_notes(ours.entry_number, ours.notes or [], expected.notes or []))
    return mismatches


def _compare_notes(
    entry_number: int, ours: Sequence[str], expected: Sequence[str]
) -> List[Mismatch]:
    if len(ours) != len(expected):
        return [Mismatch(entry_number, "Notes", str(len(ours)), str(len(expected)))]

    mismatches: List[Mismatch] = []
    for index, (left, right) in enumerate(zip(ours, expected)):
        a = normalize_text(left)
        b = normalize_text(right)
        if a != b:
            mismatches.append(Mismatch(entry_number, f"Note[{index}]", a, b))
    return mismatches
