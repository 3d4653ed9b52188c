"""
Scoring Engine

Common entry point for both scoring strategies. Accepts either a typed
indicator record or a loose mapping (form, API body, file) and returns a
fresh ScoreResult. Pure: no I/O, no state, no randomness.
"""

from typing import Any, Mapping, Optional, Union

from .currency_model import calculate_currency_score
from .indicators import CurrencyIndicators, MacroIndicators
from .macro_model import calculate_macro_score
from .results import ScoreResult, ScoringModel

IndicatorRecord = Union[MacroIndicators, CurrencyIndicators]

# Any of these keys marks a raw mapping as a currency-pair record
CURRENCY_MARKERS = (
    'selectedPair',
    'selected_pair',
    'base_currency_rate_hike_probability',
    'base_currency_pmi',
    'quote_currency_pmi',
    'is_cb_week',
)


def detect_model(data: Union[Mapping[str, Any], IndicatorRecord]) -> ScoringModel:
    """Infer which model a record belongs to."""
    if isinstance(data, CurrencyIndicators):
        return ScoringModel.CURRENCY
    if isinstance(data, MacroIndicators):
        return ScoringModel.MACRO
    if any(key in data for key in CURRENCY_MARKERS):
        return ScoringModel.CURRENCY
    return ScoringModel.MACRO


def parse_model(value: Optional[Union[str, ScoringModel]]) -> Optional[ScoringModel]:
    """Parse a model tag ('macro' / 'currency'); ``None`` means auto-detect."""
    if value is None or isinstance(value, ScoringModel):
        return value
    try:
        return ScoringModel(str(value).strip().lower())
    except ValueError:
        raise ValueError(
            f"Unknown scoring model '{value}'. Expected one of: "
            f"{', '.join(m.value for m in ScoringModel)}"
        ) from None


def build_record(
    data: Union[Mapping[str, Any], IndicatorRecord],
    model: Optional[Union[str, ScoringModel]] = None
) -> IndicatorRecord:
    """Coerce raw input into the indicator record for ``model``."""
    model = parse_model(model) or detect_model(data)

    if model is ScoringModel.CURRENCY:
        if isinstance(data, CurrencyIndicators):
            return data
        if isinstance(data, MacroIndicators):
            raise TypeError("A macro record cannot be scored with the currency model")
        return CurrencyIndicators.from_dict(data)

    if isinstance(data, MacroIndicators):
        return data
    if isinstance(data, CurrencyIndicators):
        raise TypeError("A currency record cannot be scored with the macro model")
    return MacroIndicators.from_dict(data)


def calculate_score(
    data: Union[Mapping[str, Any], IndicatorRecord],
    model: Optional[Union[str, ScoringModel]] = None
) -> ScoreResult:
    """Score an indicator record.

    Args:
        data: Typed record or raw mapping of indicator fields
        model: 'macro', 'currency', a ScoringModel, or None to auto-detect

    Returns:
        ScoreResult for the selected model
    """
    record = build_record(data, model)

    if isinstance(record, CurrencyIndicators):
        return calculate_currency_score(record)
    return calculate_macro_score(record)
