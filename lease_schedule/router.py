"""Route each body line of an entry to the registration, property or lease column."""

from __future__ import annotations

from typing import Iterable, List, Tuple

from .models import ColumnTemplate, RoutingState
from .template import split_columns

__all__ = [
    "REGISTRATION",
    "PROPERTY",
    "LEASE",
    "Placement",
    "route_line",
    "route_lines",
]

REGISTRATION = 1
PROPERTY = 2
LEASE = 3

# Trailing blanks needed before a trimmed line counts as padded lease text.
RIGHT_PADDING = 2

Placement = Tuple[int, str]


def _placements(*pairs: Placement) -> List[Placement]:
    return [(column, text.strip()) for column, text in pairs if text and text.strip()]


def route_line(
    line: str, template: ColumnTemplate, state: RoutingState
) -> Tuple[List[Placement], RoutingState]:
    """
    Decide which column(s) receive the text of ``line``.

    Rules, first match wins:

    1. The line still carries its fixed-width padding and slicing by the
       template yields text: trust the slices.
    2. Two or more chunks separated by wide gaps: the first continues the
       property description, the rest continue the lease.
    3. A single chunk on a line the extractor trimmed: right padding means
       lease text and allows exactly one following unpadded trimmed line to
       continue the lease; otherwise it continues the registration column.
    4. A single chunk on an indented or full-width line goes to the column
       whose start is closest to its indentation.
    5. Blank lines are skipped.

    Returns the placements and the state for the next line.
    """
    indent = len(line) - len(line.lstrip(" "))
    looks_trimmed = len(line) < template.width and indent == 0

    row = line.ljust(template.width)
    slices = [template.slice(row, column) for column in (REGISTRATION, PROPERTY, LEASE)]
    if any(slices) and not looks_trimmed:
        return _placements(*zip((REGISTRATION, PROPERTY, LEASE), slices)), RoutingState()

    chunks = [chunk for chunk in split_columns(line.rstrip()) if chunk.strip()]
    if len(chunks) >= 2:
        placed = _placements((PROPERTY, chunks[0]), (LEASE, " ".join(chunks[1:])))
        return placed, RoutingState()

    text = line.strip()
    if not text:
        return [], RoutingState()

    if looks_trimmed:
        right_padded = len(line) - len(line.rstrip()) >= RIGHT_PADDING
        if right_padded:
            return [(LEASE, text)], RoutingState(continue_lease=True)
        if state.continue_lease:
            return [(LEASE, text)], RoutingState()
        return [(REGISTRATION, text)], RoutingState()

    return [(template.closest_column(indent), text)], RoutingState()


def route_lines(
    lines: Iterable[str], template: ColumnTemplate
) -> Tuple[List[str], List[str], List[str]]:
    """Route every body line of one entry and collect the fragments per column."""
    columns: dict[int, List[str]] = {REGISTRATION: [], PROPERTY: [], LEASE: []}
    state = RoutingState()
    for line in lines:
        placements, state = route_line(line, template, state)
        for column, text in placements:
            columns[column].append(text)
    return columns[REGISTRATION], columns[PROPERTY], columns[LEASE]
