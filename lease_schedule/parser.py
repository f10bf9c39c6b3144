"""Assemble structured schedule entries from raw register text."""

from __future__ import annotations

import re
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import Iterable, List, Optional

import dateparser

from .exceptions import ColumnTemplateError, InvalidEntryError
from .logging import get_logger
from .models import ParseResult, RawSchedule, ScheduleEntry
from .normalize import normalize_parts
from .router import route_lines
from .template import infer_template, is_note_line

logger = get_logger(__name__)

__all__ = ["parse_entry", "parse_results", "parse_schedules"]

# ASCII digits only; int() alone would also take "1_000" and non-Latin digits.
ENTRY_NUMBER = re.compile(r"[+-]?[0-9]+")


def parse_entry(raw: Optional[RawSchedule]) -> ParseResult:
    """
    Parse one raw entry into a ParseResult.

    An entry whose number or date cannot be read is skipped (``error`` set).
    An entry whose template line does not yield four columns is still
    returned with its number, date and notes, but with empty prose fields
    and ``warning`` set.
    """
    if raw is None:
        return ParseResult(entry_number=None, error="entry is missing")

    try:
        entry_number = _parse_entry_number(raw.entry_number)
        entry_date = _parse_entry_date(raw.entry_date)
    except InvalidEntryError as exc:
        return ParseResult(entry_number=raw.entry_number, error=str(exc))

    lines = raw.entry_text or []
    notes = [line.strip() for line in lines if is_note_line(line)] or None
    body = [line for line in lines if not is_note_line(line)]

    if not body:
        entry = ScheduleEntry(entry_number=entry_number, entry_date=entry_date, notes=notes)
        return ParseResult(entry_number=raw.entry_number, entry=entry)

    try:
        template = infer_template(body[0])
    except ColumnTemplateError as exc:
        entry = ScheduleEntry(entry_number=entry_number, entry_date=entry_date, notes=notes)
        return ParseResult(
            entry_number=raw.entry_number,
            entry=entry,
            warning=f"{exc}: '{exc.line}'",
        )

    registration, prop, lease = route_lines(body, template)
    entry = ScheduleEntry(
        entry_number=entry_number,
        entry_date=entry_date,
        registration_date_and_plan_ref=normalize_parts(registration),
        property_description=normalize_parts(prop),
        date_of_lease_and_term=normalize_parts(lease),
        lessees_title=template.lessees_title,
        notes=notes,
    )
    return ParseResult(entry_number=raw.entry_number, entry=entry)


def parse_results(
    raws: Optional[Iterable[Optional[RawSchedule]]], max_workers: int = 1
) -> List[ParseResult]:
    """Parse every raw entry, keeping input order. Entries never share state."""
    if raws is None:
        return []
    items = list(raws)
    if max_workers <= 1 or len(items) <= 1:
        return [parse_entry(raw) for raw in items]
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        return list(pool.map(parse_entry, items))


def parse_schedules(
    raws: Optional[Iterable[Optional[RawSchedule]]], max_workers: int = 1
) -> List[ScheduleEntry]:
    """Parse a batch, logging skipped and degraded entries, and return the parsed ones."""
    entries: List[ScheduleEntry] = []
    for result in parse_results(raws, max_workers=max_workers):
        if result.error:
            logger.warning(
                "schedule_skipped",
                entry_number=result.entry_number,
                reason=result.error,
            )
            continue
        if result.warning:
            logger.warning(
                "schedule_degraded",
                entry_number=result.entry_number,
                reason=result.warning,
            )
        entries.append(result.entry)
    return entries


def _parse_entry_number(value: Optional[str]) -> int:
    if value is None:
        raise InvalidEntryError("entry number is missing")
    text = value.strip()
    if not ENTRY_NUMBER.fullmatch(text):
        raise InvalidEntryError(f"entry number '{value}' is not an integer")
    return int(text)


def _parse_entry_date(value: Optional[str]) -> Optional[datetime]:
    if value is None or not value.strip():
        return None
    clean = " ".join(value.split())
    try:
        return datetime.fromisoformat(clean)
    except ValueError:
        # Register dates such as 09.07.2009 are day-first.
        parsed = dateparser.parse(
            clean,
            languages=["en"],
            settings={
                "DATE_ORDER": "DMY",
                "STRICT_PARSING": True,
                "PARSERS": ["custom-formats", "absolute-time"],
            },
        )
    if parsed is None:
        raise InvalidEntryError(f"entry date '{value}' could not be parsed")
    return parsed
