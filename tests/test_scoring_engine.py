# tests/test_scoring_engine.py

"""
Scoring Engine Tests - input coercion, model selection and result shape
"""

import math

import pytest

from macroscore.models.bias import MACRO_BIAS_TABLE, Band, ThresholdTable, classify_bias
from macroscore.models.indicators import (
    CurrencyIndicators,
    MacroIndicators,
    to_float,
    to_pair,
    to_series,
)
from macroscore.models.results import ScoringModel, round2
from macroscore.models.scoring_engine import (
    build_record,
    calculate_score,
    detect_model,
    parse_model,
)


class TestCoercion:

    @pytest.mark.parametrize("value, expected", [
        ("3.5", 3.5),
        ("abc", 0.0),
        (None, 0.0),
        (float('nan'), 0.0),
        (float('inf'), 0.0),
        (True, 1.0),
        (7, 7.0),
    ])
    def test_to_float(self, value, expected):
        assert to_float(value) == expected

    def test_to_series_from_text(self):
        assert to_series("180, 220, x, 210") == (180.0, 220.0, 210.0)

    def test_to_series_drops_bad_entries(self):
        assert to_series([1, "2", None, "nan", 3]) == (1.0, 2.0, 3.0)
        assert to_series(None) == ()
        assert to_series(42) == ()

    def test_macro_from_dict_defaults(self):
        record = MacroIndicators.from_dict({'vix': 'oops', 'pmi': '52'})
        assert record.vix == 0.0
        assert record.pmi == 52.0
        assert record.cpi_target == 2.0
        assert record.nfp_12m_values == ()

    def test_currency_from_dict(self):
        record = CurrencyIndicators.from_dict({
            'selectedPair': 'gbp/jpy',
            'base_currency_guidance_shift': 'HAWKISH',
            'quote_currency_2y_yield': '0.3',
            'uup_flow': 600,
            'relevant_etf_flows': {'fxb': 120},
            'is_cb_week': 'false',
            'sp500_new_highs': 'true',
        })
        assert record.base_currency == 'GBP'
        assert record.quote_currency == 'JPY'
        assert record.base.guidance_shift == 'hawkish'
        assert record.quote.yield_2y == 0.3
        assert record.etf_flow_map == {'FXB': 120.0, 'UUP': 600.0}
        assert record.is_cb_week is False
        assert record.sp500_new_highs is True

    @pytest.mark.parametrize("raw, expected", [
        ('AUDJPY', 'AUD/JPY'),
        ('audjpy', 'AUD/JPY'),
        ('AUD-JPY', 'AUD/JPY'),
        (' gbp / chf ', 'GBP/CHF'),
        ('USD_CAD', 'USD/CAD'),
    ])
    def test_pair_spellings(self, raw, expected):
        record = CurrencyIndicators.from_dict({'selectedPair': raw})
        assert record.selected_pair == expected
        assert record.base_currency == expected[:3]
        assert record.quote_currency == expected[4:]

    @pytest.mark.parametrize("raw", ['EURUSD1', 'garbage', 'EUR/', '', None, 42])
    def test_invalid_pair_falls_back(self, raw):
        assert CurrencyIndicators.from_dict({'selectedPair': raw}).selected_pair == 'EUR/USD'

    def test_unslashed_pair_scores_like_slashed(self, eurusd_record_data):
        slashed = dict(eurusd_record_data, selectedPair='AUD/JPY')
        bare = dict(eurusd_record_data, selectedPair='AUDJPY')
        assert calculate_score(bare).to_dict() == calculate_score(slashed).to_dict()
        assert to_pair('AUDJPY') == 'AUD/JPY'

    def test_currency_to_dict_wire_keys(self):
        data = CurrencyIndicators().to_dict()
        assert data['selectedPair'] == 'EUR/USD'
        assert 'base_currency_2y_yield' in data
        assert 'quote_currency_rate_cut_probability' in data

    def test_unknown_side(self):
        with pytest.raises(ValueError):
            CurrencyIndicators().fundamentals('middle')


class TestModelSelection:

    def test_detect_model(self):
        assert detect_model({}) is ScoringModel.MACRO
        assert detect_model({'cpi': 3}) is ScoringModel.MACRO
        assert detect_model({'selectedPair': 'EUR/USD'}) is ScoringModel.CURRENCY
        assert detect_model({'base_currency_pmi': 51}) is ScoringModel.CURRENCY
        assert detect_model(CurrencyIndicators()) is ScoringModel.CURRENCY

    def test_parse_model(self):
        assert parse_model(None) is None
        assert parse_model(' Currency ') is ScoringModel.CURRENCY
        assert parse_model(ScoringModel.MACRO) is ScoringModel.MACRO

    def test_parse_model_unknown(self):
        with pytest.raises(ValueError, match="Unknown scoring model"):
            parse_model('regime')

    def test_record_model_mismatch(self):
        with pytest.raises(TypeError):
            build_record(MacroIndicators(), 'currency')
        with pytest.raises(TypeError):
            build_record(CurrencyIndicators(), ScoringModel.MACRO)

    def test_explicit_model_overrides_detection(self):
        record = build_record({'selectedPair': 'EUR/USD', 'vix': 30}, 'macro')
        assert isinstance(record, MacroIndicators)
        assert record.vix == 30.0


class TestCalculateScore:

    def test_macro_mapping(self, usd_record_data):
        result = calculate_score(usd_record_data)
        assert result.model is ScoringModel.MACRO
        assert result.bias_label == 'Mild Bullish'

    def test_currency_mapping(self, eurusd_record_data):
        result = calculate_score(eurusd_record_data)
        assert result.model is ScoringModel.CURRENCY
        assert result.regime == 'Neutral'

    def test_fresh_result_per_call(self, usd_record_data):
        first = calculate_score(usd_record_data)
        second = calculate_score(usd_record_data)
        assert first.to_dict() == second.to_dict()
        assert first.scores is not second.scores

    def test_macro_to_dict_omits_pair_fields(self, usd_record_data):
        data = calculate_score(usd_record_data).to_dict()
        assert data['model'] == 'macro'
        assert data['bias'] == 'Mild Bullish'
        assert 'regime' not in data
        assert 'baseCurrencyScore' not in data
        assert 'context' in data


class TestThresholds:

    def test_round2_folds_negative_zero(self):
        assert round2(-0.001) == 0.0
        assert math.copysign(1.0, round2(-0.001)) == 1.0
        assert round2(1.23456) == 1.23

    @pytest.mark.parametrize("total, label", [
        (1.0, 'Strong Bullish'),
        (0.3, 'Mild Bullish'),
        (0.29, 'Neutral'),
        (-0.3, 'Neutral'),
        (-0.31, 'Mild Bearish'),
        (-1.0, 'Mild Bearish'),
        (-1.01, 'Strong Bearish'),
    ])
    def test_macro_bias_bands(self, total, label):
        assert classify_bias(total).label == label

    def test_table_sorts_bands(self):
        table = ThresholdTable([Band(1.0, 'low'), Band(5.0, 'high'), Band(5.0, 'exact', inclusive=False)], floor='none')
        assert table(6.0) == 'exact'
        assert table(5.0) == 'high'
        assert table(0.0) == 'none'
        assert len(table) == 4

    def test_macro_table_size(self):
        assert len(MACRO_BIAS_TABLE) == 5
