"""Whitespace normalization shared by the parser and the comparator."""

from __future__ import annotations

from typing import Iterable, Optional

__all__ = ["normalize_text", "normalize_parts"]


def normalize_text(value: Optional[str]) -> str:
    """Collapse whitespace runs to single spaces and trim; ``None`` becomes ``""``."""
    if not value:
        return ""
    return " ".join(value.split())


def normalize_parts(parts: Iterable[Optional[str]]) -> str:
    """Join non-blank fragments with single spaces and normalize the result."""
    kept = [part for part in parts if part and part.strip()]
    return normalize_text(" ".join(kept))
