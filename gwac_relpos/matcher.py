"""
Temporal matching of JFoV samples to FFoV samples.

The two cameras expose on independent cadences, so for each JFoV image we
look for the FFoV image taken closest in time. Both series are sorted, so a
single forward cursor into the FFoV series is enough: it never moves back,
and the total cost is O(n_jfov + n_ffov).
"""

from dataclasses import dataclass
from typing import List, Tuple
import logging

from .errors import EmptySeries
from .series import AngularSample, FieldOfView, TimeSeries

logger = logging.getLogger(__name__)

DEFAULT_MAX_GAP_SECONDS = 10.0


@dataclass(frozen=True)
class MatchedPair:
    """A JFoV sample and the FFoV sample nearest to it in time."""
    jfov: AngularSample
    ffov: AngularSample
    time_delta: float  # |t_jfov - t_ffov| in seconds
    ffov_index: int  # Position of ffov within its series


class Matcher:
    """
    Forward-only nearest-neighbour matcher between two sorted series.

    For every JFoV sample the scan starts at the FFoV cursor and walks
    forward while the time gap does not grow. The cursor then moves to the
    nearest sample whether or not the match is accepted: JFoV times never
    decrease, so no FFoV sample before it can become nearer for a later JFoV
    sample. A match further apart than max_gap_seconds is dropped.
    """

    def __init__(self, max_gap_seconds: float = DEFAULT_MAX_GAP_SECONDS):
        """
        Initialize the matcher.

        Args:
            max_gap_seconds: Largest accepted |t_jfov - t_ffov| in seconds
        """
        if max_gap_seconds < 0:
            raise ValueError(f"max_gap_seconds must be non-negative, got {max_gap_seconds}")
        self.max_gap_seconds = max_gap_seconds

    @staticmethod
    def _scan_nearest(time: float, ffov_times, start: int) -> Tuple[int, float]:
        """
        Walk forward from start to the FFoV sample nearest to time.

        Stops at the first step where the gap increases. Equal gaps keep
        advancing so runs of identical timestamps are crossed.

        Returns:
            (index, gap) of the nearest sample found
        """
        best = start
        best_gap = abs(time - ffov_times[start])
        for i in range(start + 1, len(ffov_times)):
            gap = abs(time - ffov_times[i])
            if gap > best_gap:
                break
            best, best_gap = i, gap
        return best, float(best_gap)

    def find_matches(self, jfov: TimeSeries, ffov: TimeSeries) -> List[MatchedPair]:
        """
        Match each JFoV sample to its nearest FFoV sample.

        Args:
            jfov: JFoV series, sorted by time
            ffov: FFoV series, sorted by time

        Returns:
            Matched pairs in JFoV order (may be empty)

        Raises:
            EmptySeries: ffov is empty while jfov is not
        """
        if not len(jfov):
            return []
        if not len(ffov):
            raise EmptySeries(FieldOfView.FFOV.value, "no FFoV samples to match against")

        logger.info("Scanning for matched data")

        ffov_times = ffov.times
        pairs = []
        cursor = 0
        dropped = 0

        for sample in jfov:
            index, gap = self._scan_nearest(sample.time_of_day, ffov_times, cursor)
            cursor = index
            if gap > self.max_gap_seconds:
                dropped += 1
                logger.debug(
                    f"No FFoV sample within {self.max_gap_seconds:.1f}s of "
                    f"{sample.source_id} (nearest {gap:.2f}s)"
                )
                continue

            pairs.append(MatchedPair(
                jfov=sample,
                ffov=ffov[index],
                time_delta=gap,
                ffov_index=index,
            ))

        logger.info(f"Found {len(pairs)} matched points ({dropped} JFoV samples dropped)")
        return pairs


def find_matches(
    jfov: TimeSeries,
    ffov: TimeSeries,
    max_gap_seconds: float = DEFAULT_MAX_GAP_SECONDS,
) -> List[MatchedPair]:
    """
    Convenience function to match two series.

    Args:
        jfov: JFoV series
        ffov: FFoV series
        max_gap_seconds: Largest accepted time gap in seconds

    Returns:
        List of matched pairs
    """
    return Matcher(max_gap_seconds).find_matches(jfov, ffov)
