"""
Timestamped pointing samples for one field of view.

A TimeSeries holds the samples decoded from one camera's record file, in
acquisition order. The core only ever reads it.
"""

import numpy as np
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Sequence, Tuple
import logging

from .errors import EmptySeries, MultiDayInput, NoOverlap, UnorderedSeries

logger = logging.getLogger(__name__)

SECONDS_PER_DAY = 86400.0


class FieldOfView(str, Enum):
    """Camera class of a record stream."""
    JFOV = "JFoV"
    FFOV = "FFoV"


@dataclass(frozen=True)
class AngularSample:
    """
    A single pointing sample.

    Attributes:
        right_ascension: Field centre R.A. in degrees
        declination: Field centre Dec. in degrees
        time_of_day: Seconds since UTC midnight (0.01 s resolution)
        source_id: Image filename the pointing was solved from
        calendar_date: UTC date as YYMMDD
    """
    right_ascension: float
    declination: float
    time_of_day: float
    source_id: str
    calendar_date: int

    def __post_init__(self):
        if not 0.0 <= self.time_of_day < SECONDS_PER_DAY:
            raise ValueError(
                f"time of day {self.time_of_day} outside [0, {SECONDS_PER_DAY:.0f}) "
                f"for {self.source_id}"
            )

    @property
    def ra_rad(self) -> float:
        return float(np.deg2rad(self.right_ascension))

    @property
    def dec_rad(self) -> float:
        return float(np.deg2rad(self.declination))

    @property
    def hhmm(self) -> str:
        """Hour and minute of the sample as 'hhmm'."""
        minutes = int(self.time_of_day // 60)
        return f"{minutes // 60:02d}{minutes % 60:02d}"


@dataclass(frozen=True)
class TimeSeries:
    """
    Ordered samples from one camera.

    Samples must be non-decreasing in time of day. They are expected to
    share one calendar date; see validate_single_day().
    """
    samples: Tuple[AngularSample, ...] = ()
    times: np.ndarray = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        samples = tuple(self.samples)
        object.__setattr__(self, 'samples', samples)

        times = np.array([s.time_of_day for s in samples], dtype=np.float64)
        backwards = np.flatnonzero(np.diff(times) < 0)
        if backwards.size:
            i = int(backwards[0]) + 1
            raise UnorderedSeries(
                f"sample {samples[i].source_id} at {times[i]:.2f}s precedes "
                f"{samples[i - 1].source_id} at {times[i - 1]:.2f}s"
            )
        times.setflags(write=False)
        object.__setattr__(self, 'times', times)

    @classmethod
    def from_samples(cls, samples: Sequence[AngularSample]) -> "TimeSeries":
        return cls(tuple(samples))

    def __len__(self) -> int:
        return len(self.samples)

    def __iter__(self) -> Iterator[AngularSample]:
        return iter(self.samples)

    def __getitem__(self, index: int) -> AngularSample:
        return self.samples[index]

    @property
    def calendar_date(self) -> int:
        """Date of the first sample (YYMMDD)."""
        if not self.samples:
            raise IndexError("empty time series has no calendar date")
        return self.samples[0].calendar_date

    @property
    def first(self) -> AngularSample:
        return self.samples[0]

    @property
    def last(self) -> AngularSample:
        return self.samples[-1]


def validate_single_day(series: TimeSeries) -> bool:
    """
    Check that every sample shares the first sample's calendar date.

    An empty series passes; emptiness is reported separately.
    """
    if not len(series):
        return True
    date = series.calendar_date
    return all(s.calendar_date == date for s in series)


def overlaps(series_a: TimeSeries, series_b: TimeSeries) -> bool:
    """
    Check whether two series can overlap in time.

    Only the calendar dates are compared. Two series on the same date that
    never meet in time pass here and produce no matches later.
    """
    return series_a.calendar_date == series_b.calendar_date


def check_streams(jfov: TimeSeries, ffov: TimeSeries) -> None:
    """
    Gate both series before matching.

    Raises:
        EmptySeries: Either series has no samples
        MultiDayInput: Either series crosses a date boundary
        NoOverlap: The series were taken on different dates
    """
    for fov, series in ((FieldOfView.JFOV, jfov), (FieldOfView.FFOV, ffov)):
        if not len(series):
            raise EmptySeries(fov.value)

    for fov, series in ((FieldOfView.JFOV, jfov), (FieldOfView.FFOV, ffov)):
        if not validate_single_day(series):
            raise MultiDayInput(fov.value, (s.calendar_date for s in series))

    if not overlaps(jfov, ffov):
        raise NoOverlap(jfov.calendar_date, ffov.calendar_date)

    logger.debug(
        f"Series checked: JFoV {len(jfov)} samples, FFoV {len(ffov)} samples, "
        f"date {jfov.calendar_date:06d}"
    )
