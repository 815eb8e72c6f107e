"""
Tests for result aggregation and report output.
"""

import pytest
import numpy as np
from numpy.testing import assert_allclose

from gwac_relpos.relative import RelativeResult
from gwac_relpos.report import (
    ReportAggregator,
    RelativePositionReport,
    STATS_BANNER,
    compute_statistics,
    format_statistics,
    format_table,
    output_filename,
    unwrap_rotations,
)
from gwac_relpos.series import AngularSample, TimeSeries


def make_result(rotation, tilt, index=0):
    return RelativeResult(
        ra=244.1236, dec=31.5512, source_id=f"G041_mon_objt_171028T2015{index:02d}00.fit",
        ra0=243.0, dec0=30.0, source_id0=f"G045_mon_objt_171028T2015{index:02d}00.fit",
        rotation=rotation, tilt=tilt,
        rotation_residual=-rotation, tilt_residual=-tilt,
    )


class TestUnwrapRotations:
    """Tests for rotation unwrapping."""

    def test_no_wrap(self):
        assert_allclose(unwrap_rotations([10.0, 20.0, 15.0]), [10.0, 20.0, 15.0])

    def test_crossing_upward(self):
        assert_allclose(unwrap_rotations([350.0, 10.0, 20.0]), [350.0, 370.0, 380.0])

    def test_crossing_downward(self):
        assert_allclose(unwrap_rotations([10.0, 350.0, 340.0]), [10.0, -10.0, -20.0])

    def test_follows_previous_value(self):
        """Each step is compared with the previous unwrapped value, not the seed."""
        assert_allclose(
            unwrap_rotations([359.0, 10.0, 100.0, 190.0]),
            [359.0, 370.0, 460.0, 550.0],
        )

    def test_empty(self):
        assert unwrap_rotations([]).shape == (0,)


class TestComputeStatistics:
    """Tests for summary statistics."""

    def test_empty(self):
        assert compute_statistics([]) is None

    def test_wraparound_mean(self):
        """350 and 10 average to 0, not 180."""
        stats = compute_statistics([make_result(350.0, 1.0), make_result(10.0, 3.0)])

        assert stats.count == 2
        assert stats.rotation_mean == pytest.approx(0.0)
        assert stats.rotation_stdev == pytest.approx(10.0)
        assert stats.rotation_min == pytest.approx(350.0)
        assert stats.rotation_max == pytest.approx(10.0)

    def test_tilt_population_stdev(self):
        stats = compute_statistics([make_result(90.0, t) for t in (1.0, 2.0, 3.0)])

        assert stats.tilt_min == pytest.approx(1.0)
        assert stats.tilt_max == pytest.approx(3.0)
        assert stats.tilt_mean == pytest.approx(2.0)
        assert stats.tilt_stdev == pytest.approx(np.sqrt(2.0 / 3.0))
        assert stats.rotation_mean == pytest.approx(90.0)
        assert stats.rotation_stdev == pytest.approx(0.0)

    def test_rewrapped_into_range(self):
        stats = compute_statistics([make_result(r, 1.0) for r in (10.0, 350.0, 340.0)])
        for value in (stats.rotation_min, stats.rotation_max, stats.rotation_mean):
            assert 0.0 <= value < 360.0


class TestFormatting:
    """Tests for the text table and statistics block."""

    def test_table_layout(self):
        results = [make_result(90.0, 10.0, 0), make_result(91.5, 10.25, 1)]
        lines = format_table(results).splitlines()

        assert len(lines) == 3
        assert lines[0].split() == [
            "R.A.", "DEC.", "FileName", "R.A.0", "DEC.0", "FileName.0",
            "Rot", "Tilt", "rRot", "rTilt",
        ]
        fields = lines[1].split()
        assert fields[0] == "244.1236"
        assert fields[1] == "31.5512"
        assert fields[2] == "G041_mon_objt_171028T20150000.fit"
        assert fields[6] == "90.0"
        assert fields[8] == "-90.0"

    def test_header_widths(self):
        header = format_table([]).splitlines()[0]
        assert len(header) == 8 + 1 + 8 + 1 + 33 + 1 + 8 + 1 + 8 + 1 + 33 + 1 + 5 + 1 + 4 + 1 + 6 + 1 + 5

    def test_statistics_block(self):
        stats = compute_statistics([make_result(350.0, 1.0), make_result(10.0, 3.0)])
        text = format_statistics(stats)

        assert text.count(STATS_BANNER) == 2
        assert "Rotation Mean    =   0.00" in text
        assert "Tilt Mean        =   2.00" in text


class TestOutputFilename:
    """Tests for result file naming."""

    def test_name_from_first_and_last(self):
        series = TimeSeries.from_samples([
            AngularSample(0.0, 0.0, 3661.0, "a.fit", 171028),
            AngularSample(0.0, 0.0, 7322.5, "b.fit", 171028),
        ])
        assert output_filename("041", series) == "G041_0101-0202.txt"


class TestReportAggregator:
    """Tests for building, printing and saving reports."""

    @pytest.fixture
    def jfov(self):
        return TimeSeries.from_samples([
            AngularSample(0.0, 0.0, 72900.0, "a.fit", 171028),
            AngularSample(0.0, 0.0, 76500.0, "b.fit", 171028),
        ])

    def test_build(self, jfov):
        report = ReportAggregator().build([make_result(90.0, 10.0)], "041", jfov)

        assert isinstance(report, RelativePositionReport)
        assert report.has_matches
        assert report.output_name == "G041_2015-2115.txt"
        assert report.statistics.count == 1

    def test_build_empty(self, jfov):
        report = ReportAggregator().build([], "041", jfov)
        assert not report.has_matches
        assert report.statistics is None

    def test_save_writes_table_only(self, jfov, tmp_path):
        aggregator = ReportAggregator()
        report = aggregator.build([make_result(90.0, 10.0)], "041", jfov)

        path = aggregator.save_report(report, str(tmp_path / "out"))

        assert path == tmp_path / "out" / "G041_2015-2115.txt"
        content = path.read_text()
        assert content == format_table(report.results)
        assert STATS_BANNER not in content

    def test_save_empty_writes_nothing(self, jfov, tmp_path):
        aggregator = ReportAggregator()
        report = aggregator.build([], "041", jfov)

        assert aggregator.save_report(report, str(tmp_path)) is None
        assert list(tmp_path.iterdir()) == []

    def test_print_report(self, jfov, capsys):
        aggregator = ReportAggregator()
        aggregator.print_report(aggregator.build([make_result(90.0, 10.0)], "041", jfov))

        out = capsys.readouterr().out
        assert "FileName.0" in out
        assert STATS_BANNER in out


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
