"""
Indicator Records

Typed, immutable inputs for the two scoring models. ``from_dict`` is the
boundary between loosely typed form/API/file input and the engine: missing
fields take the form defaults and anything non-numeric becomes 0.
"""

import math
import re
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Iterable, Mapping, Tuple

GUIDANCE_SHIFTS = ('hawkish', 'neutral', 'dovish')
RATIO_TRENDS = ('rising', 'neutral', 'falling')
ETF_FLOW_STATES = ('major_inflows', 'normal', 'major_outflows')

PAIR_PATTERN = re.compile(r"^([A-Z]{3})\s*[-_/ ]?\s*([A-Z]{3})$")


def to_float(value: Any) -> float:
    """Coerce a form value to float; invalid or non-finite input becomes 0."""
    if isinstance(value, bool):
        return float(value)
    try:
        result = float(value)
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(result) or math.isinf(result):
        return 0.0
    return result


def to_series(values: Any) -> Tuple[float, ...]:
    """Coerce a list-ish value to a tuple of floats, dropping unparseable entries.

    Comma separated strings are accepted, as typed into the history inputs.
    """
    if values is None:
        return ()
    if isinstance(values, str):
        values = [v for v in values.replace(';', ',').split(',') if v.strip()]
    elif not isinstance(values, Iterable):
        return ()

    series = []
    for value in values:
        try:
            number = float(value)
        except (TypeError, ValueError):
            continue
        if math.isfinite(number):
            series.append(number)
    return tuple(series)


def to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'on')
    return bool(value)


def to_choice(value: Any, choices: Tuple[str, ...], default: str) -> str:
    if isinstance(value, str) and value.strip().lower() in choices:
        return value.strip().lower()
    return default


def to_pair(value: Any, default: str = 'EUR/USD') -> str:
    """Normalize a currency pair to ``BASE/QUOTE``.

    Accepts ``EUR/USD``, ``eurusd``, ``EUR-USD`` and similar. Anything that
    does not name two currencies returns ``default``.
    """
    if not isinstance(value, str):
        return default
    text = value.strip().upper()
    if '/' in text:
        parts = [p.strip() for p in text.split('/')]
        if len(parts) == 2 and all(parts):
            return f"{parts[0]}/{parts[1]}"
        return default
    match = PAIR_PATTERN.match(text)
    if match is None:
        return default
    return f"{match.group(1)}/{match.group(2)}"


@dataclass(frozen=True)
class MacroIndicators:
    """Single-currency indicator record."""
    cb_hawkish_index: float = 0.5
    cpi: float = 2.5
    cpi_target: float = 2.0
    cpi_3m_change: float = 0.1
    current_nfp: float = 200.0
    nfp_12m_values: Tuple[float, ...] = ()
    credit_spread_1m_change: float = 0.05
    vix: float = 20.0
    pmi: float = 50.0
    pmi_3y_values: Tuple[float, ...] = ()
    ca_gdp: float = -3.5
    ca_5y_values: Tuple[float, ...] = ()
    gpr: float = 100.0
    gpr_3y_values: Tuple[float, ...] = ()

    SERIES_FIELDS = ('nfp_12m_values', 'pmi_3y_values', 'ca_5y_values', 'gpr_3y_values')

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'MacroIndicators':
        """Build a record from a loose mapping, coercing every field."""
        kwargs = {}
        for f in fields(cls):
            if f.name not in data:
                continue
            if f.name in cls.SERIES_FIELDS:
                kwargs[f.name] = to_series(data[f.name])
            else:
                kwargs[f.name] = to_float(data[f.name])
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        result = {}
        for f in fields(self):
            value = getattr(self, f.name)
            result[f.name] = list(value) if isinstance(value, tuple) else value
        return result


@dataclass(frozen=True)
class CurrencyFundamentals:
    """Per-currency inputs of the dual-currency model."""
    rate_hike_probability: float = 0.0
    rate_cut_probability: float = 0.0
    guidance_shift: str = 'neutral'
    employment_health: float = 0.0
    pmi: float = 50.0
    yield_2y: float = 0.0
    inflation_expectation: float = 0.0

    # field name -> suffix used in the flat ``base_currency_*`` wire keys
    WIRE_SUFFIXES = {
        'rate_hike_probability': 'rate_hike_probability',
        'rate_cut_probability': 'rate_cut_probability',
        'guidance_shift': 'guidance_shift',
        'employment_health': 'employment_health',
        'pmi': 'pmi',
        'yield_2y': '2y_yield',
        'inflation_expectation': 'inflation_expectation',
    }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], prefix: str = '') -> 'CurrencyFundamentals':
        kwargs = {}
        for name, suffix in cls.WIRE_SUFFIXES.items():
            key = f"{prefix}{suffix}"
            if key not in data:
                continue
            if name == 'guidance_shift':
                kwargs[name] = to_choice(data[key], GUIDANCE_SHIFTS, 'neutral')
            else:
                kwargs[name] = to_float(data[key])
        return cls(**kwargs)

    def to_dict(self, prefix: str = '') -> Dict[str, Any]:
        return {f"{prefix}{suffix}": getattr(self, name) for name, suffix in self.WIRE_SUFFIXES.items()}

    @property
    def real_rate(self) -> float:
        return self.yield_2y - self.inflation_expectation


@dataclass(frozen=True)
class CurrencyIndicators:
    """Currency-pair indicator record used by the regime-aware model."""
    selected_pair: str = 'EUR/USD'
    base: CurrencyFundamentals = field(default_factory=CurrencyFundamentals)
    quote: CurrencyFundamentals = field(default_factory=CurrencyFundamentals)
    vix: float = 20.0
    gold_sp500_weekly_performance: float = 0.0
    gold_sp500_ratio_trend: str = 'neutral'
    relevant_etf_flows: Tuple[Tuple[str, float], ...] = ()
    etf_flows: str = 'normal'
    is_cb_week: bool = False
    gold_vs_stocks_monthly: float = 0.0
    sp500_new_highs: bool = False

    BASE_PREFIX = 'base_currency_'
    QUOTE_PREFIX = 'quote_currency_'
    KNOWN_ETFS = ('UUP', 'FXE', 'FXB', 'FXA', 'FXC', 'FXF', 'FXY')

    @property
    def base_currency(self) -> str:
        return self.selected_pair.split('/')[0].strip().upper()

    @property
    def quote_currency(self) -> str:
        parts = self.selected_pair.split('/')
        return parts[1].strip().upper() if len(parts) > 1 else ''

    @property
    def etf_flow_map(self) -> Dict[str, float]:
        return dict(self.relevant_etf_flows)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'CurrencyIndicators':
        """Build a record from the flat wire format.

        ETF flows may come either as a ``relevant_etf_flows`` mapping or as
        individual ``<ticker>_flow`` fields (``uup_flow``, ``fxe_flow``...).
        """
        pair = to_pair(data.get('selectedPair', data.get('selected_pair')))

        return cls(
            selected_pair=pair,
            base=CurrencyFundamentals.from_dict(data, cls.BASE_PREFIX),
            quote=CurrencyFundamentals.from_dict(data, cls.QUOTE_PREFIX),
            vix=to_float(data.get('vix', 20.0)),
            gold_sp500_weekly_performance=to_float(data.get('gold_sp500_weekly_performance', 0.0)),
            gold_sp500_ratio_trend=to_choice(data.get('gold_sp500_ratio_trend'), RATIO_TRENDS, 'neutral'),
            relevant_etf_flows=cls._collect_etf_flows(data),
            etf_flows=to_choice(data.get('etf_flows'), ETF_FLOW_STATES, 'normal'),
            is_cb_week=to_bool(data.get('is_cb_week', False)),
            gold_vs_stocks_monthly=to_float(data.get('gold_vs_stocks_monthly', 0.0)),
            sp500_new_highs=to_bool(data.get('sp500_new_highs', False)),
        )

    @classmethod
    def _collect_etf_flows(cls, data: Mapping[str, Any]) -> Tuple[Tuple[str, float], ...]:
        flows: Dict[str, float] = {}

        relevant = data.get('relevant_etf_flows')
        if isinstance(relevant, Mapping):
            for etf, flow in relevant.items():
                flows[str(etf).upper()] = to_float(flow)

        for etf in cls.KNOWN_ETFS:
            key = f"{etf.lower()}_flow"
            if key in data and etf not in flows:
                flows[etf] = to_float(data[key])

        return tuple(sorted(flows.items()))

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {'selectedPair': self.selected_pair}
        result.update(self.base.to_dict(self.BASE_PREFIX))
        result.update(self.quote.to_dict(self.QUOTE_PREFIX))
        result.update({
            'vix': self.vix,
            'gold_sp500_weekly_performance': self.gold_sp500_weekly_performance,
            'gold_sp500_ratio_trend': self.gold_sp500_ratio_trend,
            'relevant_etf_flows': self.etf_flow_map,
            'etf_flows': self.etf_flows,
            'is_cb_week': self.is_cb_week,
            'gold_vs_stocks_monthly': self.gold_vs_stocks_monthly,
            'sp500_new_highs': self.sp500_new_highs,
        })
        return result

    def fundamentals(self, side: str) -> CurrencyFundamentals:
        """Return the base or quote fundamentals."""
        if side == 'base':
            return self.base
        if side == 'quote':
            return self.quote
        raise ValueError(f"Unknown currency side: {side}")

