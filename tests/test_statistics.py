# tests/test_statistics.py

"""
Statistics Helper Tests
"""

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from macroscore.analysis.statistics import (
    MeanStd,
    clamp,
    describe_series,
    mean_std,
    sign,
    tanh,
    z_score,
)


class TestMeanStd:
    """Population mean and standard deviation."""

    def test_empty_series_has_no_stats(self):
        assert mean_std([]) is None
        assert mean_std(()) is None

    def test_single_value(self):
        assert mean_std([5]) == MeanStd(5.0, 0.0)

    def test_divides_by_n(self):
        stats = mean_std([1, 2, 3, 4])
        assert stats.mean == pytest.approx(2.5)
        assert stats.std == pytest.approx(math.sqrt(1.25))

    def test_alternating_series(self):
        stats = mean_std([180, 220] * 6)
        assert stats.mean == pytest.approx(200.0)
        assert stats.std == pytest.approx(20.0)

    @given(st.lists(st.floats(min_value=-1e6, max_value=1e6), min_size=1, max_size=50))
    def test_std_never_negative(self, values):
        assert mean_std(values).std >= 0


class TestScalarHelpers:

    def test_sign(self):
        assert sign(3.2) == 1.0
        assert sign(-0.01) == -1.0
        assert sign(0) == 0.0
        assert sign(-0.0) == 0.0

    def test_clamp(self):
        assert clamp(5, -2, 2) == 2
        assert clamp(-5, -2, 2) == -2
        assert clamp(0.3, -2, 2) == 0.3

    def test_tanh_saturates_without_overflow(self):
        assert tanh(1e6) == 1.0
        assert tanh(-1e6) == -1.0
        assert tanh(0) == 0.0

    def test_z_score_uses_std_floor(self):
        assert z_score(1.0, MeanStd(0.0, 0.0), std_floor=0.1) == pytest.approx(10.0)
        assert z_score(1.0, MeanStd(0.0, 2.0), std_floor=0.1) == pytest.approx(0.5)


class TestDescribeSeries:

    def test_empty_history(self):
        assert describe_series(50, []) is None

    def test_reading_at_mean_is_median(self):
        summary = describe_series(50, [47, 53])
        assert summary.count == 2
        assert summary.z_score == pytest.approx(0.0)
        assert summary.percentile == pytest.approx(50.0)

    def test_to_dict_is_rounded(self):
        summary = describe_series(56, [47, 53] * 18)
        data = summary.to_dict()
        assert data['mean'] == 50.0
        assert data['std'] == 3.0
        assert data['z_score'] == 2.0
        assert 97 < data['percentile'] < 98
