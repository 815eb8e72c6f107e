"""
Relative pointing workflow.

This is the main module that orchestrates one run:
    1. Parse both record files and tag them as JFoV / FFoV
    2. Check the series (non-empty, single night, same date)
    3. Match each JFoV sample to the nearest FFoV sample in time
    4. Compute rotation, tilt and residuals for each matched pair
    5. Aggregate the results into a report

All checks happen before any matching, so a failed run writes nothing.
"""

from typing import Optional
import logging

from .config import Config
from .matcher import Matcher
from .parser import CameraStream, RecordFileParser, assign_streams
from .relative import RelativePositionCalculator
from .report import RelativePositionReport, ReportAggregator
from .series import check_streams

logger = logging.getLogger(__name__)


class RelativePositionRunner:
    """
    Runs the relative pointing computation for one pair of record files.

    Example usage:
        config = Config.from_yaml("relpos.yaml")
        runner = RelativePositionRunner(config)
        report = runner.run_files("G041.txt", "G045.txt")
        runner.aggregator.print_report(report)
    """

    def __init__(self, config: Optional[Config] = None):
        """
        Initialize the runner.

        Args:
            config: Configuration object (defaults when omitted)
        """
        self.config = config or Config()

        self.parser = RecordFileParser(ffov_modulus=self.config.cameras.ffov_modulus)
        self.matcher = Matcher(max_gap_seconds=self.config.matching.max_gap_seconds)
        self.calculator = RelativePositionCalculator(
            reference_rotation=self.config.reference.rotation,
            reference_tilt=self.config.reference.tilt,
        )
        self.aggregator = ReportAggregator()

    def run(self, jfov: CameraStream, ffov: CameraStream) -> RelativePositionReport:
        """
        Compute relative positions for two tagged streams.

        Args:
            jfov: JFoV stream
            ffov: FFoV stream

        Returns:
            RelativePositionReport; its result list is empty when no
            JFoV sample had an FFoV sample within the time gap

        Raises:
            EmptySeries, MultiDayInput, NoOverlap: Boundary checks failed
        """
        check_streams(jfov.series, ffov.series)

        pairs = self.matcher.find_matches(jfov.series, ffov.series)
        results = self.calculator.compute_all(pairs)

        report = self.aggregator.build(results, jfov.camera_id, jfov.series)
        if not report.has_matches:
            logger.warning("No data matches the time gap condition")
        return report

    def run_files(self, path1: str, path2: str) -> RelativePositionReport:
        """
        Parse two record files, in either order, and run the computation.

        Args:
            path1: First record file
            path2: Second record file

        Returns:
            RelativePositionReport
        """
        first = self.parser.parse_file(path1)
        second = self.parser.parse_file(path2)
        jfov, ffov = assign_streams(first, second)
        return self.run(jfov, ffov)

    def write(self, report: RelativePositionReport) -> None:
        """Print the report and, if configured, save the result file."""
        self.aggregator.print_report(report)
        if self.config.output.write_file:
            self.aggregator.save_report(report, self.config.output.directory)


def run_relative_position(
    path1: str,
    path2: str,
    config: Optional[Config] = None,
) -> RelativePositionReport:
    """
    Convenience function to run the whole workflow and write its outputs.

    Args:
        path1: First record file
        path2: Second record file
        config: Configuration object (defaults when omitted)

    Returns:
        RelativePositionReport with results
    """
    runner = RelativePositionRunner(config)
    report = runner.run_files(path1, path2)
    runner.write(report)
    return report
