"""Export scores to JSON and CSV files."""

import json
import re
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union

import pandas as pd
from loguru import logger

from ..models.results import ScoreResult
from .score_store import SavedScore

UNSAFE_FILENAME_CHARS = re.compile(r"[^\w\-.]+")


def score_filename(name: str, suffix: str = "_macro_score.json") -> str:
    """File name for an exported score, with unsafe characters replaced by ``_``."""
    return f"{UNSAFE_FILENAME_CHARS.sub('_', name)}{suffix}"


def score_export_payload(
    result: ScoreResult,
    data: Mapping[str, Any],
    name: str,
    date: Optional[datetime] = None
) -> Dict[str, Any]:
    payload = {
        'name': name,
        'date': (date or datetime.now()).isoformat(),
        'totalScore': result.total_score,
        'bias': result.bias_label,
        'biasColor': result.bias_color,
        'data': dict(data),
        'scores': dict(result.scores),
    }
    if result.regime is not None:
        payload['regime'] = result.regime
    return payload


def export_score_json(
    result: ScoreResult,
    data: Mapping[str, Any],
    name: str,
    output_dir: Union[str, Path] = "output",
    date: Optional[datetime] = None
) -> Path:
    """Write a single score with its inputs to ``<name>_macro_score.json``.

    Returns:
        Path to the written file
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / score_filename(name)

    with open(path, 'w', encoding='utf-8') as f:
        json.dump(score_export_payload(result, data, name, date), f, indent=2, ensure_ascii=False)

    logger.info(f"Score exported to {path}")
    return path


def scores_to_dataframe(result: ScoreResult) -> pd.DataFrame:
    """Factor breakdown: sub-score, weight and weighted contribution per factor."""
    weights = _factor_weights(result)
    rows = []
    for factor, score in result.scores.items():
        weight = weights.get(factor)
        rows.append({
            'factor': factor,
            'score': score,
            'weight': weight,
            'contribution': round(score * weight, 4) if weight is not None else None,
        })
    return pd.DataFrame(rows, columns=['factor', 'score', 'weight', 'contribution'])


def _factor_weights(result: ScoreResult) -> Dict[str, float]:
    """Align weight keys with the factor names used in ``result.scores``."""
    aliases = {
        # macro model
        'cb_score': 'cb', 'inflation_score': 'inflation', 'labor_score': 'labor',
        'risk_score': 'risk', 'pmi_score': 'pmi', 'ca_score': 'ca', 'geo_score': 'geo',
        # currency model
        'rate_policy': 'rate', 'growth_momentum': 'momentum', 'real_interest_edge': 'realRate',
        'risk_appetite': 'risk', 'money_flow': 'flow',
    }
    return {
        factor: result.weights[alias]
        for factor, alias in aliases.items()
        if factor in result.scores and alias in result.weights
    }


def export_score_csv(
    result: ScoreResult,
    data: Mapping[str, Any],
    name: str,
    output_dir: Union[str, Path] = "output"
) -> Path:
    """Write indicator inputs and the factor breakdown as CSV.

    Layout: an ``Indicator,Value,Score`` table of inputs and factor scores,
    followed by the total and bias rows.
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / score_filename(name, "_macro_score.csv")

    rows: List[Dict[str, Any]] = []
    for key, value in data.items():
        if isinstance(value, (list, tuple)):
            value = ' '.join(str(v) for v in value)
        elif isinstance(value, Mapping):
            value = ' '.join(f"{k}={v}" for k, v in value.items())
        rows.append({'Indicator': key, 'Value': value, 'Score': ''})

    breakdown = scores_to_dataframe(result)
    for _, row in breakdown.iterrows():
        rows.append({'Indicator': row['factor'], 'Value': row['weight'], 'Score': row['score']})

    rows.append({'Indicator': 'Total Score', 'Value': '', 'Score': result.total_score})
    rows.append({'Indicator': 'Trading Bias', 'Value': '', 'Score': result.bias_label})

    pd.DataFrame(rows, columns=['Indicator', 'Value', 'Score']).to_csv(path, index=False)
    logger.info(f"Score exported to {path}")
    return path


def saved_scores_to_dataframe(scores: List[SavedScore]) -> pd.DataFrame:
    """Tabulate saved scores for listing or comparison."""
    columns = ['id', 'name', 'timestamp', 'model', 'totalScore', 'bias']
    if not scores:
        return pd.DataFrame(columns=columns)

    df = pd.DataFrame([
        {
            'id': s.id,
            'name': s.name,
            'timestamp': s.timestamp,
            'model': s.model or '',
            'totalScore': s.total_score,
            'bias': s.bias,
        }
        for s in scores
    ], columns=columns)
    df['timestamp'] = pd.to_datetime(df['timestamp'], utc=True)
    return df
