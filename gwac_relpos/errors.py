"""
Error types for relative pointing computation.

All of these are raised at the input boundary, before any matching or
geometry work starts. None of them is recoverable mid-run.
"""

from typing import Optional


class RelposError(Exception):
    """Base class for all errors raised by gwac_relpos."""


class EmptySeries(RelposError):
    """A field of view has no samples (data unavailable)."""

    def __init__(self, field_of_view: str, detail: Optional[str] = None):
        self.field_of_view = field_of_view
        message = f"{field_of_view} data is unavailable"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class MultiDayInput(RelposError):
    """A time series spans more than one calendar date."""

    def __init__(self, field_of_view: str, dates=()):
        self.field_of_view = field_of_view
        self.dates = tuple(dates)
        super().__init__(
            f"{field_of_view} data spans more than one night: {sorted(set(self.dates))}"
        )


class NoOverlap(RelposError):
    """JFoV and FFoV series were taken on different calendar dates."""

    def __init__(self, jfov_date: int, ffov_date: int):
        self.jfov_date = jfov_date
        self.ffov_date = ffov_date
        super().__init__(
            f"time range do not match: JFoV date {jfov_date:06d}, FFoV date {ffov_date:06d}"
        )


class UnorderedSeries(RelposError, ValueError):
    """Samples in a series go backwards in time."""


class RecordFormatError(RelposError, ValueError):
    """A record or image filename could not be decoded."""
