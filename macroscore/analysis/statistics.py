"""
Statistics Helpers

Small numeric building blocks shared by the scoring models: population
mean/std of a historical series, bounded transforms and z-scores.
"""

import math
from dataclasses import dataclass
from typing import Any, Dict, NamedTuple, Optional, Sequence

import numpy as np
from scipy import stats


class MeanStd(NamedTuple):
    """Population mean and standard deviation of a series."""
    mean: float
    std: float


@dataclass(frozen=True)
class SeriesSummary:
    """Where a current reading sits relative to its history."""
    count: int
    mean: float
    std: float
    z_score: float
    percentile: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            'count': self.count,
            'mean': round(self.mean, 4),
            'std': round(self.std, 4),
            'z_score': round(self.z_score, 4),
            'percentile': round(self.percentile, 2)
        }


def mean_std(values: Sequence[float]) -> Optional[MeanStd]:
    """Population mean and standard deviation (divides by N, not N-1).

    Returns ``None`` for an empty series.
    """
    if len(values) == 0:
        return None

    arr = np.asarray(values, dtype=float)
    mean = float(arr.mean())
    std = float(np.sqrt(((arr - mean) ** 2).sum() / arr.size))
    return MeanStd(mean, std)


def tanh(x: float) -> float:
    return float(np.tanh(x))


def sign(x: float) -> float:
    if x > 0:
        return 1.0
    if x < 0:
        return -1.0
    return 0.0


def clamp(x: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, x))


def z_score(value: float, series_stats: MeanStd, std_floor: float = 0.1) -> float:
    """Standardize ``value`` against a series, flooring the std at ``std_floor``."""
    return (value - series_stats.mean) / max(series_stats.std, std_floor)


def describe_series(
    value: float,
    values: Sequence[float],
    std_floor: float = 0.1
) -> Optional[SeriesSummary]:
    """Summarize a current reading against its historical series.

    Args:
        value: Current reading
        values: Historical observations
        std_floor: Minimum std used for the z-score

    Returns:
        SeriesSummary, or None if the series is empty
    """
    series_stats = mean_std(values)
    if series_stats is None:
        return None

    z = z_score(value, series_stats, std_floor)
    percentile = float(stats.norm.cdf(z) * 100)
    if math.isnan(percentile):
        percentile = 50.0

    return SeriesSummary(
        count=len(values),
        mean=series_stats.mean,
        std=series_stats.std,
        z_score=z,
        percentile=percentile
    )
