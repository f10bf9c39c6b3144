"""Exceptions raised while parsing, comparing and fetching schedules."""


class ScheduleError(Exception):
    """Base error for lease schedule operations."""


class InvalidEntryError(ScheduleError):
    """Raised when a raw entry cannot produce a structured record at all."""


class ColumnTemplateError(ScheduleError):
    """Raised when the template line does not yield four located columns."""

    def __init__(self, message: str, line: str):
        super().__init__(message)
        self.line = line


class UpstreamError(ScheduleError):
    """Raised when the upstream schedule API cannot be reached or decoded."""
