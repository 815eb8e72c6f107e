"""
Report generation for relative pointing results.

Produces the fixed-width result table, the summary statistics and the
output filename. Rotation is an angle on a circle, so it is unwrapped
along the result sequence before averaging; otherwise values straddling
0/360 would average to something near 180.
"""

import numpy as np
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence
import logging

from .relative import RelativeResult
from .series import TimeSeries

logger = logging.getLogger(__name__)

HEADER_FORMAT = "%8s %8s %33s %8s %8s %33s %5s %4s %6s %5s"
ROW_FORMAT = "%8.4f %8.4f %33s %8.4f %8.4f %33s %5.1f %4.1f %6.1f %5.1f"
HEADER_COLUMNS = (
    "R.A.  ", "DEC.  ", "FileName            ",
    "R.A.0 ", "DEC.0 ", "FileName.0          ",
    "Rot ", "Tilt", "rRot ", "rTilt",
)
STATS_BANNER = "*" * 30 + " Statistical results " + "*" * 30


@dataclass
class RelativeStatistics:
    """
    Summary statistics over all results, in degrees.

    Rotation min, max and mean are wrapped into [0, 360); the rotation
    stdev is taken on the unwrapped sequence.
    """
    count: int
    rotation_min: float
    rotation_max: float
    rotation_mean: float
    rotation_stdev: float
    tilt_min: float
    tilt_max: float
    tilt_mean: float
    tilt_stdev: float


def unwrap_rotations(rotations: Sequence[float]) -> np.ndarray:
    """
    Unwrap a sequence of rotation angles.

    The first value seeds the sequence. Each following value is replaced by
    whichever of r, r - 360, r + 360 lies within 180 degrees of the previous
    unwrapped value.

    Args:
        rotations: Rotation angles in degrees, in result order

    Returns:
        Unwrapped angles
    """
    unwrapped = np.empty(len(rotations), dtype=np.float64)
    if not len(rotations):
        return unwrapped

    previous = rotations[0]
    for i, rot in enumerate(rotations):
        delta = rot - previous
        if delta > 180.0:
            previous = rot - 360.0
        elif delta < -180.0:
            previous = rot + 360.0
        else:
            previous = rot
        unwrapped[i] = previous
    return unwrapped


def compute_statistics(results: Sequence[RelativeResult]) -> Optional[RelativeStatistics]:
    """
    Compute min/max/mean/population stdev of rotation and tilt.

    Args:
        results: Relative results in match order

    Returns:
        RelativeStatistics, or None when there are no results
    """
    if not results:
        return None

    rotations = unwrap_rotations([r.rotation for r in results])
    tilts = np.array([r.tilt for r in results], dtype=np.float64)

    return RelativeStatistics(
        count=len(results),
        rotation_min=float(np.min(rotations)) % 360.0,
        rotation_max=float(np.max(rotations)) % 360.0,
        rotation_mean=float(np.mean(rotations)) % 360.0,
        rotation_stdev=float(np.std(rotations)),
        tilt_min=float(np.min(tilts)),
        tilt_max=float(np.max(tilts)),
        tilt_mean=float(np.mean(tilts)),
        tilt_stdev=float(np.std(tilts)),
    )


def format_table(results: Sequence[RelativeResult]) -> str:
    """Format results as the fixed-width text table, one row per result."""
    lines = [HEADER_FORMAT % HEADER_COLUMNS]
    for r in results:
        lines.append(ROW_FORMAT % (
            r.ra, r.dec, r.source_id,
            r.ra0, r.dec0, r.source_id0,
            r.rotation, r.tilt, r.rotation_residual, r.tilt_residual,
        ))
    return "\n".join(lines) + "\n"


def format_statistics(stats: RelativeStatistics) -> str:
    """Format the statistics block printed after the console table."""
    return "\n".join([
        STATS_BANNER,
        f"Rotation Minimum = {stats.rotation_min:6.1f} \t Rotation Maximum = {stats.rotation_max:6.1f}",
        f"Rotation Mean    = {stats.rotation_mean:6.2f} \t Rotation Stdev   = {stats.rotation_stdev:6.2f}",
        f"Tilt Minimum     = {stats.tilt_min:6.1f} \t Tilt Maximum     = {stats.tilt_max:6.1f}",
        f"Tilt Mean        = {stats.tilt_mean:6.2f} \t Tilt Stdev       = {stats.tilt_stdev:6.2f}",
        STATS_BANNER,
    ]) + "\n"


def output_filename(camera_id: str, series: TimeSeries) -> str:
    """
    Name of the result file: G<camera_id>_<hhmm>-<hhmm>.txt.

    The times are the first and last samples of the JFoV series.
    """
    return f"G{camera_id}_{series.first.hhmm}-{series.last.hhmm}.txt"


@dataclass
class RelativePositionReport:
    """Everything produced by one run."""
    camera_id: str
    output_name: str
    results: List[RelativeResult]
    statistics: Optional[RelativeStatistics] = None

    @property
    def has_matches(self) -> bool:
        return bool(self.results)


class ReportAggregator:
    """
    Collects relative results and renders them.

    The console gets the table followed by the statistics block; the result
    file gets the table only.
    """

    def build(
        self,
        results: Sequence[RelativeResult],
        camera_id: str,
        jfov: TimeSeries,
    ) -> RelativePositionReport:
        """
        Build a report for one run.

        Args:
            results: Relative results in match order
            camera_id: JFoV camera identifier
            jfov: JFoV series, used to name the output file

        Returns:
            RelativePositionReport
        """
        return RelativePositionReport(
            camera_id=camera_id,
            output_name=output_filename(camera_id, jfov),
            results=list(results),
            statistics=compute_statistics(results),
        )

    def print_report(self, report: RelativePositionReport) -> None:
        """Print the table and statistics to stdout."""
        if not report.has_matches:
            return
        print()
        print(format_table(report.results), end="")
        print(format_statistics(report.statistics), end="")

    def save_report(self, report: RelativePositionReport, output_dir: str = ".") -> Optional[Path]:
        """
        Write the result table to output_dir/report.output_name.

        Args:
            report: Report to save
            output_dir: Directory for the result file

        Returns:
            Path of the written file, or None when there was nothing to write
        """
        if not report.has_matches:
            return None

        directory = Path(output_dir)
        directory.mkdir(parents=True, exist_ok=True)
        output_path = directory / report.output_name

        with open(output_path, 'w') as f:
            f.write(format_table(report.results))

        logger.info(f"Results are saved as file <{output_path}>")
        return output_path
