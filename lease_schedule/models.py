"""Domain models for raw and structured Schedule of Notices of Leases entries."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, List, Mapping, Optional


def _lookup(payload: Mapping[str, Any], key: str) -> Any:
    """Case-insensitive key lookup, matching the upstream JSON casing rules."""
    if key in payload:
        return payload[key]
    wanted = key.lower()
    for name, value in payload.items():
        if isinstance(name, str) and name.lower() == wanted:
            return value
    return None


def _optional_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    return str(value)


@dataclass(slots=True, frozen=True)
class RawSchedule:
    """One entry as delivered by the upstream register extract."""

    entry_number: Optional[str]
    entry_date: Optional[str] = None
    entry_type: Optional[str] = None
    entry_text: List[str] = field(default_factory=list)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "RawSchedule":
        lines = _lookup(payload, "entryText") or []
        return cls(
            entry_number=_optional_text(_lookup(payload, "entryNumber")),
            entry_date=_optional_text(_lookup(payload, "entryDate")),
            entry_type=_optional_text(_lookup(payload, "entryType")),
            entry_text=["" if line is None else str(line) for line in lines],
        )


@dataclass(slots=True, frozen=True)
class ScheduleEntry:
    """Structured entry with the three recovered prose columns and the lessee's title."""

    entry_number: int
    entry_date: Optional[datetime] = None
    registration_date_and_plan_ref: str = ""
    property_description: str = ""
    date_of_lease_and_term: str = ""
    lessees_title: Optional[str] = None
    notes: Optional[List[str]] = None

    def to_payload(self) -> dict[str, Any]:
        return {
            "entryNumber": self.entry_number,
            "entryDate": self.entry_date.isoformat() if self.entry_date else None,
            "registrationDateAndPlanRef": self.registration_date_and_plan_ref,
            "propertyDescription": self.property_description,
            "dateOfLeaseAndTerm": self.date_of_lease_and_term,
            "lesseesTitle": self.lessees_title,
            "notes": list(self.notes) if self.notes is not None else None,
        }

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ScheduleEntry":
        entry_date = _lookup(payload, "entryDate")
        notes = _lookup(payload, "notes")
        return cls(
            entry_number=int(_lookup(payload, "entryNumber")),
            entry_date=datetime.fromisoformat(entry_date) if entry_date else None,
            registration_date_and_plan_ref=_lookup(payload, "registrationDateAndPlanRef") or "",
            property_description=_lookup(payload, "propertyDescription") or "",
            date_of_lease_and_term=_lookup(payload, "dateOfLeaseAndTerm") or "",
            lessees_title=_lookup(payload, "lesseesTitle"),
            notes=list(notes) if notes is not None else None,
        )


@dataclass(slots=True, frozen=True)
class ColumnTemplate:
    """Column start offsets measured on the first body line of one entry."""

    col1_start: int
    col2_start: int
    col3_start: int
    col4_start: int
    width: int
    lessees_title: str

    def slice(self, row: str, column: int) -> str:
        """Return the stripped text of ``row`` inside the extent of ``column`` (1-3)."""
        bounds = (self.col1_start, self.col2_start, self.col3_start, self.col4_start)
        start, end = bounds[column - 1], bounds[column]
        if not row.strip() or start >= len(row):
            return ""
        return row[start:end].strip()

    def closest_column(self, offset: int) -> int:
        """Column (1-3) whose start is nearest to ``offset``; ties go to the lower column."""
        best = 1
        best_distance = abs(offset - self.col1_start)
        for column, start in ((2, self.col2_start), (3, self.col3_start)):
            distance = abs(offset - start)
            if distance < best_distance:
                best, best_distance = column, distance
        return best


@dataclass(slots=True, frozen=True)
class RoutingState:
    """Carry-over state threaded from one body line to the next."""

    continue_lease: bool = False


@dataclass(slots=True, frozen=True)
class ParseResult:
    """Outcome of parsing one raw entry."""

    entry_number: Optional[str]
    entry: Optional[ScheduleEntry] = None
    warning: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.entry is not None


@dataclass(slots=True, frozen=True)
class Mismatch:
    """A single differing field or note between candidate and reference entries."""

    entry_number: int
    field: str
    candidate: str
    reference: str

    def describe(self) -> str:
        if self.field == "Notes":
            return (
                f"Entry {self.entry_number} - Notes count differs "
                f"(ours={self.candidate}, expected={self.reference})"
            )
        return (
            f"Entry {self.entry_number} - {self.field} differs:\n"
            f"  OURS:     '{self.candidate}'\n"
            f"  EXPECTED: '{self.reference}'"
        )


@dataclass(slots=True)
class DiffReport:
    """Differences between a candidate and a reference set of entries."""

    missing: List[int] = field(default_factory=list)
    extra: List[int] = field(default_factory=list)
    mismatches: List[Mismatch] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.missing or self.extra or self.mismatches)

    def differing_entries(self) -> List[int]:
        return sorted({mismatch.entry_number for mismatch in self.mismatches})

    def lines(self) -> List[str]:
        rendered = [f"Missing EntryNumber {number}" for number in self.missing]
        rendered.extend(f"Extra EntryNumber {number}" for number in self.extra)
        rendered.extend(mismatch.describe() for mismatch in self.mismatches)
        return rendered

    def to_payload(self) -> dict[str, Any]:
        return {
            "missing": list(self.missing),
            "extra": list(self.extra),
            "mismatches": [
                {
                    "entryNumber": mismatch.entry_number,
                    "field": mismatch.field,
                    "candidate": mismatch.candidate,
                    "reference": mismatch.reference,
                }
                for mismatch in self.mismatches
            ],
        }
