"""
Tests for temporal matching of JFoV and FFoV samples.
"""

import pytest
import numpy as np

from gwac_relpos.errors import EmptySeries
from gwac_relpos.matcher import Matcher, MatchedPair, find_matches
from gwac_relpos.series import AngularSample, TimeSeries


def make_series(times, prefix="img"):
    return TimeSeries.from_samples([
        AngularSample(10.0, 20.0, t, f"{prefix}_{i}.fit", 171028) for i, t in enumerate(times)
    ])


class TestMatcherScenarios:
    """Tests for basic matching cases."""

    def test_nearest_within_gap(self):
        """JFoV at 01:01:01 pairs with the FFoV sample 4 s away."""
        pairs = find_matches(make_series([3661.0]), make_series([3650.0, 3665.0]))

        assert len(pairs) == 1
        assert isinstance(pairs[0], MatchedPair)
        assert pairs[0].ffov.time_of_day == pytest.approx(3665.0)
        assert pairs[0].time_delta == pytest.approx(4.0)
        assert pairs[0].ffov_index == 1

    def test_nearest_outside_gap_dropped(self):
        """Nearest FFoV sample 20 s away is beyond the default 10 s gap."""
        pairs = find_matches(make_series([3600.0]), make_series([3580.0, 3700.0]))
        assert pairs == []

    def test_gap_boundary_inclusive(self):
        pairs = find_matches(make_series([100.0]), make_series([90.0]))
        assert len(pairs) == 1

    def test_custom_gap(self):
        pairs = Matcher(max_gap_seconds=30.0).find_matches(
            make_series([3600.0]), make_series([3580.0, 3700.0])
        )
        assert len(pairs) == 1
        assert pairs[0].ffov_index == 0

    def test_negative_gap_rejected(self):
        with pytest.raises(ValueError):
            Matcher(max_gap_seconds=-1.0)


class TestMatcherEdgeCases:
    """Tests for empty inputs and ties."""

    def test_empty_jfov(self):
        assert find_matches(TimeSeries(), make_series([1.0])) == []

    def test_empty_jfov_and_ffov(self):
        assert find_matches(TimeSeries(), TimeSeries()) == []

    def test_empty_ffov(self):
        with pytest.raises(EmptySeries):
            find_matches(make_series([1.0]), TimeSeries())

    def test_repeated_ffov_timestamps(self):
        """Runs of equal FFoV times do not hide a later, closer sample."""
        pairs = find_matches(make_series([50.0]), make_series([0.0, 0.0, 50.0]))
        assert len(pairs) == 1
        assert pairs[0].ffov_index == 2
        assert pairs[0].time_delta == 0.0

    def test_equidistant_takes_later(self):
        pairs = find_matches(make_series([3655.0]), make_series([3650.0, 3660.0]))
        assert pairs[0].ffov_index == 1

    def test_dropped_sample_advances_cursor(self):
        """A dropped JFoV sample moves the cursor without changing later matches."""
        jfov = make_series([1.0, 150.0, 199.0])
        ffov = make_series([0.0, 100.0, 200.0])

        pairs = find_matches(jfov, ffov)

        assert [p.jfov.time_of_day for p in pairs] == [1.0, 199.0]
        assert [p.ffov_index for p in pairs] == [0, 2]

    def test_sparse_ffov_reused(self):
        """Several JFoV samples may share one FFoV sample."""
        pairs = find_matches(make_series([10.0, 12.0, 14.0]), make_series([11.0, 40.0]))
        assert [p.ffov_index for p in pairs] == [0, 0, 0]

    def test_scan_resumes_after_drop(self, monkeypatch):
        """Runs of dropped samples do not rescan the FFoV series."""
        starts = []
        scan = Matcher._scan_nearest

        def recording_scan(time, ffov_times, start):
            starts.append(start)
            return scan(time, ffov_times, start)

        monkeypatch.setattr(Matcher, "_scan_nearest", staticmethod(recording_scan))
        n = 200
        jfov = make_series(40000.0 + np.arange(n))
        ffov = make_series(np.arange(n, dtype=float))

        assert find_matches(jfov, ffov) == []
        assert starts[0] == 0
        assert starts[1:] == [n - 1] * (n - 1)


class TestMatcherProperties:
    """Randomised checks of ordering and gap bound."""

    @pytest.fixture(params=[0, 1, 2, 3])
    def random_streams(self, request):
        rng = np.random.default_rng(request.param)
        jfov_times = np.sort(rng.uniform(0, 2000, 120)).round(2)
        ffov_times = np.sort(rng.uniform(0, 2000, 200)).round(2)
        return make_series(jfov_times, "j"), make_series(ffov_times, "f")

    def test_ffov_indices_non_decreasing(self, random_streams):
        jfov, ffov = random_streams
        indices = [p.ffov_index for p in find_matches(jfov, ffov)]
        assert indices == sorted(indices)

    def test_gap_bound(self, random_streams):
        """Emitted pairs are within the gap; dropped samples have nothing within it."""
        jfov, ffov = random_streams
        max_gap = 10.0
        pairs = find_matches(jfov, ffov, max_gap)
        matched = {p.jfov.source_id: p for p in pairs}

        for sample in jfov:
            nearest = np.min(np.abs(ffov.times - sample.time_of_day))
            if sample.source_id in matched:
                pair = matched[sample.source_id]
                assert pair.time_delta <= max_gap
                assert pair.time_delta == pytest.approx(nearest)
            else:
                assert nearest > max_gap


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
