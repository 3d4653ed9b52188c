"""Statistical helpers for indicator normalization."""
from .statistics import MeanStd, SeriesSummary, clamp, describe_series, mean_std, sign, tanh, z_score

__all__ = ['MeanStd', 'SeriesSummary', 'clamp', 'describe_series', 'mean_std', 'sign', 'tanh', 'z_score']
