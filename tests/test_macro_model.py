# tests/test_macro_model.py

"""
Single-Currency Model Tests - factor functions, weights and end-to-end score
"""

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from macroscore.models.indicators import MacroIndicators
from macroscore.models.macro_model import (
    WEIGHTS,
    calculate_macro_score,
    central_bank_score,
    current_account_score,
    geopolitical_score,
    inflation_score,
    labor_score,
    pmi_score,
    risk_score,
    vix_bucket_score,
)
from macroscore.models.results import ScoringModel

PMI_HISTORY = [47, 53] * 18   # mean 50, std 3


class TestWeights:

    def test_weights_sum_to_one(self):
        assert sum(WEIGHTS.values()) == pytest.approx(1.0)

    def test_central_bank_is_heaviest(self):
        assert max(WEIGHTS, key=WEIGHTS.get) == 'cb'


class TestCentralBank:

    def test_midpoint_is_neutral(self):
        assert central_bank_score(0.5) == 0.0

    def test_extremes(self):
        assert central_bank_score(1.0) == pytest.approx(1.0)
        assert central_bank_score(0.0) == pytest.approx(-1.0)

    @given(st.floats(min_value=0.0, max_value=1.0))
    def test_bounded_on_unit_interval(self, hawkish):
        assert -1.0 <= central_bank_score(hawkish) <= 1.0


class TestInflation:
    """Away from target is negative, back toward target is positive."""

    @pytest.mark.parametrize("cpi, change, expected", [
        (3.5, 0.1, -1.0),    # above target, rising
        (3.5, -0.1, 1.0),    # above target, falling
        (1.0, -0.1, -1.0),   # below target, falling
        (1.0, 0.1, 1.0),     # below target, rising
    ])
    def test_quadrants(self, cpi, change, expected):
        assert inflation_score(cpi, 2.0, change) == pytest.approx(expected)

    def test_magnitude_capped(self):
        assert inflation_score(5.0, 2.0, 0.9) == -2.0
        assert inflation_score(5.0, 2.0, -0.9) == 2.0

    def test_on_target_or_flat_is_zero(self):
        assert inflation_score(2.0, 2.0, 0.5) == 0.0
        assert inflation_score(3.0, 2.0, 0.0) == 0.0


class TestLabor:

    def test_empty_history_is_zero(self):
        assert labor_score(250, []) == 0.0

    def test_strong_print(self):
        assert labor_score(250, [180, 220] * 6) == pytest.approx(2 * math.tanh(2.5))

    def test_flat_history_uses_std_floor(self):
        # std 0 floored at 0.1 -> z = 10, saturated
        assert labor_score(201, [200] * 12) == pytest.approx(2 * math.tanh(10))

    @given(st.floats(min_value=-1000, max_value=1000))
    def test_bounded_and_monotonic(self, nfp):
        history = [180, 220] * 6
        score = labor_score(nfp, history)
        # tanh rounds to exactly 1.0 in float64 once |z| passes about 19
        assert -2.0 <= score <= 2.0
        assert labor_score(nfp + 10, history) >= score

    @given(st.floats(min_value=-100, max_value=500))
    def test_strictly_inside_bounds_below_saturation(self, nfp):
        # mean 200, std 20 -> |z| <= 15
        assert abs(labor_score(nfp, [180, 220] * 6)) < 2.0

    def test_saturates_at_bound(self):
        assert labor_score(1000, [180, 220] * 6) == 2.0
        assert labor_score(-1000, [180, 220] * 6) == -2.0


class TestRisk:

    @pytest.mark.parametrize("vix, expected", [
        (40, -2.0),
        (35, -2.0),
        (30, -1.0),
        (25, -1.0),
        (18, 0.0),
        (15, 0.0),
        (12, 1.0),
        (10, 1.0),
        (9.9, 1.5),
    ])
    def test_vix_buckets(self, vix, expected):
        assert vix_bucket_score(vix) == expected

    def test_credit_tightening_is_risk_on(self):
        assert risk_score(-0.05, 18) == pytest.approx(0.175)
        assert risk_score(0.05, 18) == pytest.approx(-0.175)

    def test_credit_component_capped(self):
        assert risk_score(-1.0, 18) == pytest.approx(0.7)

    def test_blend(self):
        assert risk_score(0.0, 40) == pytest.approx(-0.6)


class TestPMI:

    @pytest.mark.parametrize("pmi, expected", [
        (56.0, 1.5),
        (54.6, 1.5),
        (54.5, 0.75),    # +1.5 std is exclusive
        (51.6, 0.75),
        (51.5, 0.0),     # +0.5 std is exclusive
        (50.0, 0.0),
        (48.5, 0.0),     # -0.5 std is inclusive
        (48.4, -1.0),
        (45.5, -1.0),    # -1.5 std is inclusive
        (45.4, -2.0),
    ])
    def test_band_edges(self, pmi, expected):
        assert pmi_score(pmi, PMI_HISTORY) == expected

    def test_empty_history_is_zero(self):
        assert pmi_score(60, []) == 0.0


class TestCurrentAccountAndGeopolitics:

    def test_current_account_surplus_is_positive(self):
        assert current_account_score(1.0, [-1, 1] * 10) == pytest.approx(2 * math.tanh(0.5))

    def test_geopolitical_risk_is_negative(self):
        assert geopolitical_score(80, [60, 80] * 18) == pytest.approx(-2 * math.tanh(0.5))

    def test_empty_histories(self):
        assert current_account_score(-3.5, []) == 0.0
        assert geopolitical_score(100, []) == 0.0


class TestCalculateMacroScore:

    def test_full_scenario(self, usd_record_data):
        result = calculate_macro_score(MacroIndicators.from_dict(usd_record_data))

        assert result.model is ScoringModel.MACRO
        assert result.scores['cb_score'] == 0.6
        assert result.scores['inflation_score'] == -1.0
        assert result.scores['labor_score'] == 1.97
        assert result.scores['risk_score'] == pytest.approx(0.175, abs=0.01)
        assert result.scores['pmi_score'] == 1.5
        assert result.scores['ca_score'] == 0.92
        assert result.scores['geo_score'] == -0.92
        assert result.raw_total == pytest.approx(0.5067, abs=1e-3)
        assert result.total_score == 0.51
        assert result.bias_label == 'Mild Bullish'
        assert result.bias_color == '#22c55e'

    def test_defaults_without_history(self):
        result = calculate_macro_score(MacroIndicators())

        for name in ('cb_score', 'labor_score', 'pmi_score', 'ca_score', 'geo_score'):
            assert result.scores[name] == 0.0
        assert result.raw_total == pytest.approx(-0.19 - 0.14 * 0.175)
        assert result.bias_label == 'Neutral'
        assert result.context == {}

    def test_cb_clamped_outside_unit_interval(self):
        result = calculate_macro_score(MacroIndicators(cb_hawkish_index=3.0))
        assert result.scores['cb_score'] == 1.0

    def test_context_for_series(self, usd_record_data):
        result = calculate_macro_score(MacroIndicators.from_dict(usd_record_data))
        assert set(result.context) == {'labor', 'pmi', 'ca', 'geo'}
        assert result.context['pmi']['mean'] == 50.0

    def test_custom_weights(self, usd_record_data):
        record = MacroIndicators.from_dict(usd_record_data)
        only_pmi = {name: 0.0 for name in WEIGHTS}
        only_pmi['pmi'] = 1.0

        result = calculate_macro_score(record, only_pmi)
        assert result.total_score == 1.5
        assert result.bias_label == 'Strong Bullish'

    def test_deterministic(self, usd_record_data):
        record = MacroIndicators.from_dict(usd_record_data)
        first = calculate_macro_score(record)
        second = calculate_macro_score(record)
        assert first == second
        assert first is not second

    def test_no_negative_zero(self):
        result = calculate_macro_score(MacroIndicators(cpi_3m_change=0.0, credit_spread_1m_change=0.0, vix=18))
        assert result.total_score == 0.0
        assert math.copysign(1.0, result.total_score) == 1.0
