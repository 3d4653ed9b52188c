"""
Dual-Currency Regime Model

Scores both legs of a currency pair on five factors (rate policy, growth
momentum, real interest edge, risk appetite, money flow), weights them by the
detected market regime, and takes the base minus quote differential.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from ..analysis.statistics import clamp
from .bias import CURRENCY_BIAS_TABLE, Band, ThresholdTable
from .indicators import CurrencyFundamentals, CurrencyIndicators
from .results import ScoreResult, ScoringModel, round2


class MarketRegime(Enum):
    """Market condition used to select factor weights."""
    CB_WEEK = "CB Week"
    RISK_OFF = "Risk-Off"
    RISK_ON = "Risk-On"
    NEUTRAL = "Neutral"


@dataclass(frozen=True)
class RegimeWeights:
    """Factor weights for one regime. Each set sums to 1.0."""
    rate: float
    momentum: float
    real_rate: float
    risk: float
    flow: float

    @property
    def total(self) -> float:
        return self.rate + self.momentum + self.real_rate + self.risk + self.flow

    def to_dict(self) -> Dict[str, float]:
        return {
            'rate': self.rate,
            'realRate': self.real_rate,
            'momentum': self.momentum,
            'risk': self.risk,
            'flow': self.flow
        }


REGIME_WEIGHTS: Dict[MarketRegime, RegimeWeights] = {
    # Rates and safety premium dominate when markets are scared
    MarketRegime.RISK_OFF: RegimeWeights(rate=0.35, momentum=0.13, real_rate=0.26, risk=0.22, flow=0.04),
    # Growth matters more when markets are greedy
    MarketRegime.RISK_ON: RegimeWeights(rate=0.25, momentum=0.35, real_rate=0.25, risk=0.10, flow=0.05),
    MarketRegime.CB_WEEK: RegimeWeights(rate=0.50, momentum=0.20, real_rate=0.20, risk=0.05, flow=0.05),
    MarketRegime.NEUTRAL: RegimeWeights(rate=0.30, momentum=0.25, real_rate=0.25, risk=0.15, flow=0.05),
}

RISK_OFF_VIX = 25.0
RISK_ON_VIX = 18.0

# Next-meeting probabilities (percent)
HIKE_SCORES: ThresholdTable[Optional[float]] = ThresholdTable(
    [Band(75.0, 2.0, inclusive=False), Band(50.0, 1.5), Band(25.0, 1.0)],
    floor=None
)
CUT_SCORES: ThresholdTable[Optional[float]] = ThresholdTable(
    [Band(75.0, -2.0, inclusive=False), Band(50.0, -1.5), Band(25.0, -1.0)],
    floor=None
)
GUIDANCE_SCORES = {'hawkish': 0.5, 'neutral': 0.0, 'dovish': -0.5}
MEETING_SHARE = 0.7
GUIDANCE_SHARE = 0.3
RATE_POLICY_BOUND = 2.5

# Canonical manufacturing PMI steps (53/50/47/45)
PMI_STEPS: ThresholdTable[float] = ThresholdTable(
    [Band(53.0, 1.0, inclusive=False), Band(50.0, 0.5), Band(47.0, 0.0), Band(45.0, -0.5)],
    floor=-1.0
)
GROWTH_BOUND = 2.0

REAL_RATE_MULTIPLIER = 2.0
REAL_RATE_BOUND = 3.0

# Fear index: <15 calm, <=20 normal, <=25 elevated, <=30 stressed, above that panic
VIX_STEPS: ThresholdTable[float] = ThresholdTable(
    [
        Band(30.0, -1.5, inclusive=False),
        Band(25.0, -1.0, inclusive=False),
        Band(20.0, 0.0, inclusive=False),
        Band(15.0, 0.5),
    ],
    floor=1.5
)
GOLD_WEEKLY_THRESHOLD = 2.0
GOLD_TREND_SCORES = {'rising': -0.5, 'neutral': 0.0, 'falling': 0.5}
VIX_SHARE = 0.7
GOLD_SHARE = 0.3
RISK_APPETITE_BOUND = 2.0

RISK_ON_CURRENCIES = ('AUD', 'NZD', 'CAD')
SAFE_HAVEN_CURRENCIES = ('USD', 'JPY', 'CHF')

# Minimum weekly flow ($M) for an ETF to register
ETF_FLOW_THRESHOLDS = {
    'UUP': 500,   # USD
    'FXE': 200,   # EUR
    'FXB': 100,   # GBP
    'FXA': 100,   # AUD
    'FXC': 50,    # CAD
    'FXF': 50,    # CHF
    'FXY': 50,    # JPY
}
DEFAULT_ETF_THRESHOLD = 100
ETF_VOTE = 0.5
ETF_FLOW_FALLBACK = {'major_inflows': 0.5, 'normal': 0.0, 'major_outflows': -0.5}
MONEY_FLOW_BOUND = 0.5

RECOMMENDATIONS = {
    'Very Strong Bullish': "Very strong {regime} environment supports aggressive long positioning. Enter on any pullback with 2.5% risk.",
    'Strong Bullish': "Strong {regime} conditions favor long positions. Wait for pullback to support before entering with 2.0% risk.",
    'Moderate Bullish': "Moderate {regime} signals suggest cautious bullish approach. Wait for clear breakout confirmation with 1.5% risk.",
    'Neutral': "Mixed {regime} signals suggest technical-only approach. Use 1.0% risk and quick profits only.",
    'Moderate Bearish': "Moderate {regime} headwinds support bearish bias. Wait for breakdown confirmation before entering with 1.5% risk.",
    'Strong Bearish': "Strong {regime} deterioration warrants bearish positioning. Enter on retest of resistance levels with 2.0% risk.",
    'Very Strong Bearish': "Very strong {regime} deterioration supports aggressive short positioning. Enter on any bounce with 2.5% risk.",
}
DEFAULT_RECOMMENDATION = "Monitor market conditions for trading opportunities."


def detect_regime(record: CurrencyIndicators) -> MarketRegime:
    """Pick the market regime.

    Priority: CB week, then risk-off (VIX > 25 or gold beating stocks this
    month), then risk-on (VIX < 18 with S&P 500 at new highs), else neutral.
    """
    if record.is_cb_week:
        return MarketRegime.CB_WEEK
    if record.vix > RISK_OFF_VIX or record.gold_vs_stocks_monthly > 0:
        return MarketRegime.RISK_OFF
    if record.vix < RISK_ON_VIX and record.sp500_new_highs:
        return MarketRegime.RISK_ON
    return MarketRegime.NEUTRAL


def regime_weights(regime: MarketRegime) -> RegimeWeights:
    return REGIME_WEIGHTS[regime]


def meeting_score(hike_probability: float, cut_probability: float) -> float:
    """Score the next policy meeting; hike pricing takes precedence over cut pricing."""
    hike = HIKE_SCORES.lookup(hike_probability)
    if hike is not None:
        return hike
    cut = CUT_SCORES.lookup(cut_probability)
    return cut if cut is not None else 0.0


def rate_policy_score(fundamentals: CurrencyFundamentals) -> float:
    meeting = meeting_score(fundamentals.rate_hike_probability, fundamentals.rate_cut_probability)
    guidance = GUIDANCE_SCORES.get(fundamentals.guidance_shift, 0.0)
    score = meeting * MEETING_SHARE + guidance * GUIDANCE_SHARE
    return clamp(score, -RATE_POLICY_BOUND, RATE_POLICY_BOUND)


def growth_momentum_score(fundamentals: CurrencyFundamentals) -> float:
    score = fundamentals.employment_health * 0.5 + PMI_STEPS.lookup(fundamentals.pmi) * 0.5
    return clamp(score, -GROWTH_BOUND, GROWTH_BOUND)


def real_interest_score(record: CurrencyIndicators) -> float:
    """Real 2y rate differential (base minus quote) times two, capped at +/-3."""
    differential = record.base.real_rate - record.quote.real_rate
    return clamp(differential * REAL_RATE_MULTIPLIER, -REAL_RATE_BOUND, REAL_RATE_BOUND)


def gold_stocks_score(weekly_performance: float, ratio_trend: str) -> float:
    """Gold outperforming stocks reads as risk aversion.

    A non-zero weekly performance figure wins over the qualitative trend.
    """
    if weekly_performance != 0:
        if weekly_performance > GOLD_WEEKLY_THRESHOLD:
            return -0.5
        if weekly_performance < -GOLD_WEEKLY_THRESHOLD:
            return 0.5
        return 0.0
    return GOLD_TREND_SCORES.get(ratio_trend, 0.0)


def risk_appetite_score(record: CurrencyIndicators) -> float:
    score = (
        VIX_STEPS.lookup(record.vix) * VIX_SHARE
        + gold_stocks_score(record.gold_sp500_weekly_performance, record.gold_sp500_ratio_trend) * GOLD_SHARE
    )
    return clamp(score, -RISK_APPETITE_BOUND, RISK_APPETITE_BOUND)


def currency_risk_multiplier(currency: str) -> float:
    """How a currency responds to risk appetite: commodity FX with it, havens against it."""
    if currency in RISK_ON_CURRENCIES:
        return 1.0
    if currency in SAFE_HAVEN_CURRENCIES:
        return -1.0
    return 0.5


def money_flow_score(record: CurrencyIndicators) -> float:
    """Average vote of ETF flows that clear their size threshold.

    Falls back to the qualitative ``etf_flows`` reading when no ETF registers.
    """
    votes = []
    for etf, flow in record.relevant_etf_flows:
        threshold = ETF_FLOW_THRESHOLDS.get(etf.upper(), DEFAULT_ETF_THRESHOLD)
        if abs(flow) >= threshold:
            votes.append(ETF_VOTE if flow > 0 else -ETF_VOTE)

    if votes:
        score = sum(votes) / len(votes)
    else:
        score = ETF_FLOW_FALLBACK.get(record.etf_flows, 0.0)

    return clamp(score, -MONEY_FLOW_BOUND, MONEY_FLOW_BOUND)


def currency_side_score(record: CurrencyIndicators, side: str, weights: RegimeWeights) -> float:
    """Weighted score of one leg of the pair.

    Pair-level factors are split between the legs: the real rate edge half
    each way, money flow fully to each side with opposite signs.
    """
    fundamentals = record.fundamentals(side)
    direction = 1.0 if side == 'base' else -1.0
    currency = record.base_currency if side == 'base' else record.quote_currency

    return (
        rate_policy_score(fundamentals) * weights.rate
        + growth_momentum_score(fundamentals) * weights.momentum
        + direction * real_interest_score(record) / 2 * weights.real_rate
        + risk_appetite_score(record) * currency_risk_multiplier(currency) * weights.risk
        + direction * money_flow_score(record) * weights.flow
    )


def trading_recommendation(bias_label: str, regime: MarketRegime) -> str:
    template = RECOMMENDATIONS.get(bias_label)
    if template is None:
        return DEFAULT_RECOMMENDATION
    return template.format(regime=regime.value)


def calculate_currency_score(record: CurrencyIndicators) -> ScoreResult:
    """Score a currency pair.

    Args:
        record: Pair indicator record

    Returns:
        ScoreResult with factor differentials, regime, leg scores and bias
    """
    regime = detect_regime(record)
    weights = regime_weights(regime)

    base_score = currency_side_score(record, 'base', weights)
    quote_score = currency_side_score(record, 'quote', weights)
    differential = base_score - quote_score

    bias = CURRENCY_BIAS_TABLE.lookup(differential)

    scores = {
        'rate_policy': round2(rate_policy_score(record.base) - rate_policy_score(record.quote)),
        'growth_momentum': round2(growth_momentum_score(record.base) - growth_momentum_score(record.quote)),
        'real_interest_edge': round2(real_interest_score(record)),
        'risk_appetite': round2(risk_appetite_score(record)),
        'money_flow': round2(money_flow_score(record)),
    }

    return ScoreResult(
        model=ScoringModel.CURRENCY,
        scores=scores,
        weights=weights.to_dict(),
        total_score=round2(differential),
        raw_total=differential,
        bias=bias,
        regime=regime.value,
        base_currency_score=round2(base_score),
        quote_currency_score=round2(quote_score),
        trading_recommendation=trading_recommendation(bias.label, regime)
    )
