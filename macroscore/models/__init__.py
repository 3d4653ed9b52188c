"""Indicator records and scoring models."""
from .bias import CURRENCY_BIAS_TABLE, MACRO_BIAS_TABLE, TradingBias, classify_bias
from .currency_model import REGIME_WEIGHTS, MarketRegime, calculate_currency_score, detect_regime
from .indicators import CurrencyFundamentals, CurrencyIndicators, MacroIndicators
from .macro_model import calculate_macro_score
from .results import ScoreResult, ScoringModel
from .scoring_engine import build_record, calculate_score, detect_model

__all__ = [
    'CURRENCY_BIAS_TABLE',
    'MACRO_BIAS_TABLE',
    'TradingBias',
    'classify_bias',
    'REGIME_WEIGHTS',
    'MarketRegime',
    'calculate_currency_score',
    'detect_regime',
    'CurrencyFundamentals',
    'CurrencyIndicators',
    'MacroIndicators',
    'calculate_macro_score',
    'ScoreResult',
    'ScoringModel',
    'build_record',
    'calculate_score',
    'detect_model',
]
