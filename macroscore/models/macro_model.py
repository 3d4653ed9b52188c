"""
Single-Currency Macro Model

Seven factors (central bank, inflation, labor, global risk, PMI, current
account, geopolitics) normalized to bounded sub-scores and combined with a
fixed weight table.
"""

from typing import Dict, Optional, Sequence

from ..analysis.statistics import clamp, describe_series, mean_std, sign, tanh, z_score
from .bias import MACRO_BIAS_TABLE, Band, ThresholdTable
from .indicators import MacroIndicators
from .results import ScoreResult, ScoringModel, round2

WEIGHTS: Dict[str, float] = {
    'cb': 0.24,
    'inflation': 0.19,
    'labor': 0.17,
    'risk': 0.14,
    'pmi': 0.11,
    'ca': 0.09,
    'geo': 0.06,
}

# Std floors keep flat histories from blowing up the z-score
LABOR_STD_FLOOR = 0.1
CA_STD_FLOOR = 0.1
GEO_STD_FLOOR = 1e-5

INFLATION_CAP = 2.0
INFLATION_SCALE = 10.0

CREDIT_SPREAD_FULL_SCALE = 0.2
CREDIT_WEIGHT = 0.7
VIX_WEIGHT = 0.3

VIX_BUCKETS: ThresholdTable[float] = ThresholdTable(
    [
        Band(35.0, -2.0),
        Band(25.0, -1.0),
        Band(15.0, 0.0),
        Band(10.0, 1.0),
    ],
    floor=1.5
)


def central_bank_score(hawkish_index: float) -> float:
    """Map a hawkish index in [0, 1] onto [-1, 1]."""
    return 2 * (hawkish_index - 0.5)


def inflation_score(cpi: float, cpi_target: float, cpi_3m_change: float) -> float:
    """Score the inflation trend.

    Inflation moving away from target is negative, moving back toward it is
    positive. Magnitude is the 3m change scaled by 10, capped at 2.
    """
    if cpi == cpi_target or cpi_3m_change == 0:
        return 0.0

    magnitude = min(INFLATION_CAP, abs(cpi_3m_change) * INFLATION_SCALE)
    above_target = cpi > cpi_target
    rising = cpi_3m_change > 0

    if above_target == rising:
        return -magnitude
    return magnitude


def labor_score(current_nfp: float, nfp_history: Sequence[float]) -> float:
    series_stats = mean_std(nfp_history)
    if series_stats is None:
        return 0.0
    return 2 * tanh(z_score(current_nfp, series_stats, LABOR_STD_FLOOR))


def vix_bucket_score(vix: float) -> float:
    return VIX_BUCKETS.lookup(vix)


def risk_score(credit_spread_1m_change: float, vix: float) -> float:
    """Blend credit spread momentum (tightening is risk-on) with the VIX bucket."""
    credit = sign(-credit_spread_1m_change) * min(1.0, abs(credit_spread_1m_change) / CREDIT_SPREAD_FULL_SCALE)
    return CREDIT_WEIGHT * credit + VIX_WEIGHT * vix_bucket_score(vix)


def pmi_bands(mean: float, std: float) -> ThresholdTable[float]:
    """PMI step table around the historical mean (0.5 and 1.5 std bands)."""
    return ThresholdTable(
        [
            Band(mean + 1.5 * std, 1.5, inclusive=False),
            Band(mean + 0.5 * std, 0.75, inclusive=False),
            Band(mean - 0.5 * std, 0.0),
            Band(mean - 1.5 * std, -1.0),
        ],
        floor=-2.0
    )


def pmi_score(pmi: float, pmi_history: Sequence[float]) -> float:
    series_stats = mean_std(pmi_history)
    if series_stats is None:
        return 0.0
    return pmi_bands(series_stats.mean, series_stats.std).lookup(pmi)


def current_account_score(ca_gdp: float, ca_history: Sequence[float]) -> float:
    series_stats = mean_std(ca_history)
    if series_stats is None:
        return 0.0
    return 2 * tanh(z_score(ca_gdp, series_stats, CA_STD_FLOOR) / 2)


def geopolitical_score(gpr: float, gpr_history: Sequence[float]) -> float:
    """Elevated geopolitical risk versus history is negative for the currency."""
    series_stats = mean_std(gpr_history)
    if series_stats is None:
        return 0.0
    return -2 * tanh(z_score(gpr, series_stats, GEO_STD_FLOOR) / 2)


def _series_context(record: MacroIndicators) -> Dict[str, Dict[str, float]]:
    context = {}
    for name, value, history, floor in (
        ('labor', record.current_nfp, record.nfp_12m_values, LABOR_STD_FLOOR),
        ('pmi', record.pmi, record.pmi_3y_values, 0.0),
        ('ca', record.ca_gdp, record.ca_5y_values, CA_STD_FLOOR),
        ('geo', record.gpr, record.gpr_3y_values, GEO_STD_FLOOR),
    ):
        summary = describe_series(value, history, std_floor=max(floor, 1e-9))
        if summary is not None:
            context[name] = summary.to_dict()
    return context


def calculate_macro_score(record: MacroIndicators, weights: Optional[Dict[str, float]] = None) -> ScoreResult:
    """Score a single currency.

    Args:
        record: Indicator record
        weights: Optional override of the factor weights (keys as ``WEIGHTS``)

    Returns:
        ScoreResult with the seven sub-scores, weighted total and bias
    """
    weights = dict(weights or WEIGHTS)

    raw = {
        'cb': clamp(central_bank_score(record.cb_hawkish_index), -1.0, 1.0),
        'inflation': inflation_score(record.cpi, record.cpi_target, record.cpi_3m_change),
        'labor': labor_score(record.current_nfp, record.nfp_12m_values),
        'risk': risk_score(record.credit_spread_1m_change, record.vix),
        'pmi': pmi_score(record.pmi, record.pmi_3y_values),
        'ca': current_account_score(record.ca_gdp, record.ca_5y_values),
        'geo': geopolitical_score(record.gpr, record.gpr_3y_values),
    }

    total = sum(raw[name] * weights.get(name, 0.0) for name in WEIGHTS)

    return ScoreResult(
        model=ScoringModel.MACRO,
        scores={f"{name}_score": round2(value) for name, value in raw.items()},
        weights=weights,
        total_score=round2(total),
        raw_total=total,
        bias=MACRO_BIAS_TABLE.lookup(total),
        context=_series_context(record)
    )
