"""Column template inference from the first body line of an entry."""

from __future__ import annotations

import re
from typing import List

from .exceptions import ColumnTemplateError
from .models import ColumnTemplate

__all__ = ["COLUMN_GAP", "NOTE_MARKER", "is_note_line", "split_columns", "infer_template"]

# Columns in the register extract are separated by at least two blanks.
COLUMN_GAP = re.compile(r"\s{2,}")
NOTE_MARKER = "NOTE"


def is_note_line(line: str) -> bool:
    return line.lstrip()[: len(NOTE_MARKER)].upper() == NOTE_MARKER


def split_columns(text: str) -> List[str]:
    return COLUMN_GAP.split(text)


def infer_template(line: str) -> ColumnTemplate:
    """
    Measure the four column start offsets on an undamaged template line.

    Each piece is searched for starting just past the previous match, so a
    later piece repeating earlier text is never matched too soon. The fourth
    piece is the lessee's title and is kept verbatim.
    """
    pieces = split_columns(line.rstrip())
    if len(pieces) < 4:
        raise ColumnTemplateError(
            f"template line has {len(pieces)} column(s), expected 4", line
        )

    starts: List[int] = []
    search_from = 0
    for piece in pieces[:4]:
        start = line.find(piece, search_from)
        if start < 0:
            raise ColumnTemplateError(f"unable to locate column text '{piece}'", line)
        starts.append(start)
        search_from = start + len(piece)

    return ColumnTemplate(
        col1_start=starts[0],
        col2_start=starts[1],
        col3_start=starts[2],
        col4_start=starts[3],
        width=len(line),
        lessees_title=pieces[3].strip(),
    )
