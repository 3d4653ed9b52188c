"""
Threshold Tables and Bias Classification

Every step function in the scoring models (VIX buckets, PMI steps, meeting
probabilities, trading bias) is a table of bands sorted by descending
threshold. A value falls into the first band it clears; values clearing no
band take the table's floor.
"""

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, Sequence, Tuple, TypeVar

T = TypeVar('T')


@dataclass(frozen=True)
class Band(Generic[T]):
    """One step of a threshold table.

    ``inclusive`` selects ``value >= threshold`` over ``value > threshold``.
    """
    threshold: float
    value: T
    inclusive: bool = True

    def admits(self, x: float) -> bool:
        return x >= self.threshold if self.inclusive else x > self.threshold


class ThresholdTable(Generic[T]):
    """Descending threshold table mapping a number to a discrete value."""

    def __init__(self, bands: Sequence[Band[T]], floor: T):
        """Initialize the table.

        Args:
            bands: Bands in any order; sorted by descending threshold
            floor: Value for inputs below every band
        """
        self.bands: Tuple[Band[T], ...] = tuple(
            sorted(bands, key=lambda b: (b.threshold, not b.inclusive), reverse=True)
        )
        self.floor = floor

    def lookup(self, x: float) -> T:
        for band in self.bands:
            if band.admits(x):
                return band.value
        return self.floor

    def __call__(self, x: float) -> T:
        return self.lookup(x)

    def __len__(self) -> int:
        return len(self.bands) + 1


@dataclass(frozen=True)
class TradingBias:
    """A bias label with its display color and optional trade sizing advice."""
    label: str
    color: str
    position_size: Optional[str] = None
    risk_per_trade: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {'bias': self.label, 'biasColor': self.color}
        if self.position_size is not None:
            result['positionSize'] = self.position_size
        if self.risk_per_trade is not None:
            result['riskPerTrade'] = self.risk_per_trade
        return result


# Single-currency model: five bands
MACRO_BIAS_TABLE: ThresholdTable[TradingBias] = ThresholdTable(
    [
        Band(1.0, TradingBias('Strong Bullish', '#16a34a')),
        Band(0.3, TradingBias('Mild Bullish', '#22c55e')),
        Band(-0.3, TradingBias('Neutral', '#6b7280')),
        Band(-1.0, TradingBias('Mild Bearish', '#f97316')),
    ],
    floor=TradingBias('Strong Bearish', '#dc2626')
)

# Dual-currency model: seven bands with sizing advice
CURRENCY_BIAS_TABLE: ThresholdTable[TradingBias] = ThresholdTable(
    [
        Band(1.8, TradingBias('Very Strong Bullish', '#059669',
                              'Enter on any pullback', '2.5% risk per trade'), inclusive=False),
        Band(1.0, TradingBias('Strong Bullish', '#10b981',
                              'Enter on retest of support', '2.0% risk per trade')),
        Band(0.5, TradingBias('Moderate Bullish', '#34d399',
                              'Wait for breakout confirmation', '1.5% risk per trade')),
        Band(-0.5, TradingBias('Neutral', '#6b7280',
                               'Technical trades only', '1.0% risk per trade')),
        Band(-1.0, TradingBias('Moderate Bearish', '#f59e0b',
                               'Wait for breakdown confirmation', '1.5% risk per trade')),
        Band(-1.8, TradingBias('Strong Bearish', '#ef4444',
                               'Enter on retest of resistance', '2.0% risk per trade')),
    ],
    floor=TradingBias('Very Strong Bearish', '#dc2626',
                      'Enter on any bounce', '2.5% risk per trade')
)


def classify_bias(total_score: float, table: ThresholdTable[TradingBias] = MACRO_BIAS_TABLE) -> TradingBias:
    """Map a total score to its trading bias."""
    return table.lookup(total_score)
