"""Score results shared by both scoring models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from .bias import TradingBias


class ScoringModel(Enum):
    """Available scoring strategies."""
    MACRO = "macro"          # single currency, fixed 7-factor weights
    CURRENCY = "currency"    # currency pair, regime-weighted 5 factors


def round2(value: float) -> float:
    """Round for display, folding -0.0 into 0.0."""
    return round(value, 2) + 0.0


@dataclass(frozen=True)
class ScoreResult:
    """Output of one scoring run. Built fresh on every call and never mutated."""
    model: ScoringModel
    scores: Dict[str, float]
    weights: Dict[str, float]
    total_score: float
    raw_total: float
    bias: TradingBias
    regime: Optional[str] = None
    base_currency_score: Optional[float] = None
    quote_currency_score: Optional[float] = None
    trading_recommendation: Optional[str] = None
    context: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    @property
    def bias_label(self) -> str:
        return self.bias.label

    @property
    def bias_color(self) -> str:
        return self.bias.color

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the key names the web client expects."""
        result: Dict[str, Any] = {
            'model': self.model.value,
            'scores': dict(self.scores),
            'weights': dict(self.weights),
            'total_score': self.total_score,
        }
        result.update(self.bias.to_dict())

        if self.regime is not None:
            result['regime'] = self.regime
        if self.base_currency_score is not None:
            result['baseCurrencyScore'] = self.base_currency_score
        if self.quote_currency_score is not None:
            result['quoteCurrencyScore'] = self.quote_currency_score
        if self.trading_recommendation is not None:
            result['tradingRecommendation'] = self.trading_recommendation
        if self.context:
            result['context'] = {k: dict(v) for k, v in self.context.items()}

        return result
