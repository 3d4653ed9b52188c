"""
Score Charts

Plotly figures for score results: factor breakdown, A/B comparison of two
scenarios, weight mix, the saved-score timeline and historical series
context for the z-score based factors.
"""

from pathlib import Path
from typing import List, Optional, Sequence

import plotly.graph_objects as go
from plotly.subplots import make_subplots
from loguru import logger

from ..analysis.statistics import mean_std
from ..models.results import ScoreResult
from ..storage.export import scores_to_dataframe
from ..storage.score_store import SavedScore


class ScoreCharts:
    """Create visualizations for macro score results."""

    COLORS = {
        'up': '#00C851',        # Positive factor
        'down': '#ff4444',      # Negative factor
        'neutral': '#ffbb33',   # Zero
        'primary': '#2196F3',
        'secondary': '#9E9E9E',
        'scenario_a': '#2196F3',
        'scenario_b': '#FF9800',
        'band': 'rgba(33,150,243,0.15)',
    }

    TEMPLATE = 'plotly_dark'

    FACTOR_LABELS = {
        'cb_score': 'Central Bank',
        'inflation_score': 'Inflation',
        'labor_score': 'Labor',
        'risk_score': 'Global Risk',
        'pmi_score': 'PMI',
        'ca_score': 'Current Account',
        'geo_score': 'Geopolitics',
        'rate_policy': 'Rate Policy',
        'growth_momentum': 'Growth Momentum',
        'real_interest_edge': 'Real Rate Edge',
        'risk_appetite': 'Risk Appetite',
        'money_flow': 'Money Flow',
    }

    def __init__(self, output_dir: str = "output"):
        """Initialize chart generator.

        Args:
            output_dir: Directory for saving charts
        """
        self.output_dir = Path(output_dir)

    def _label(self, factor: str) -> str:
        return self.FACTOR_LABELS.get(factor, factor.replace('_', ' ').title())

    def _bar_color(self, value: float) -> str:
        if value > 0:
            return self.COLORS['up']
        if value < 0:
            return self.COLORS['down']
        return self.COLORS['neutral']

    def create_factor_breakdown_chart(self, result: ScoreResult, title: Optional[str] = None) -> go.Figure:
        """Sub-scores next to their weighted contribution to the total.

        Args:
            result: Score result to plot
            title: Optional chart title

        Returns:
            Plotly figure
        """
        df = scores_to_dataframe(result)
        labels = [self._label(f) for f in df['factor']]

        fig = make_subplots(
            rows=1, cols=2,
            subplot_titles=('Factor Scores', 'Weighted Contribution'),
            horizontal_spacing=0.12
        )

        fig.add_trace(
            go.Bar(
                x=labels,
                y=df['score'],
                marker_color=[self._bar_color(v) for v in df['score']],
                text=[f"{v:+.2f}" for v in df['score']],
                textposition='outside',
                name='Score'
            ),
            row=1, col=1
        )

        contributions = df['contribution'].fillna(0.0)
        fig.add_trace(
            go.Bar(
                x=labels,
                y=contributions,
                marker_color=[self._bar_color(v) for v in contributions],
                text=[f"{v:+.3f}" for v in contributions],
                textposition='outside',
                name='Contribution'
            ),
            row=1, col=2
        )

        heading = title or f"Total {result.total_score:+.2f}: {result.bias_label}"
        if result.regime:
            heading += f" ({result.regime})"

        fig.update_layout(
            template=self.TEMPLATE,
            title=dict(text=heading, font=dict(color=result.bias_color)),
            showlegend=False,
            height=450
        )
        return fig

    def create_comparison_chart(
        self,
        result_a: ScoreResult,
        result_b: ScoreResult,
        label_a: str = "Scenario A",
        label_b: str = "Scenario B"
    ) -> go.Figure:
        """Grouped factor scores of two scenarios side by side."""
        factors = list(result_a.scores.keys())
        for factor in result_b.scores:
            if factor not in factors:
                factors.append(factor)

        labels = [self._label(f) for f in factors]

        fig = go.Figure()
        fig.add_trace(go.Bar(
            x=labels,
            y=[result_a.scores.get(f, 0.0) for f in factors],
            name=f"{label_a} ({result_a.total_score:+.2f})",
            marker_color=self.COLORS['scenario_a']
        ))
        fig.add_trace(go.Bar(
            x=labels,
            y=[result_b.scores.get(f, 0.0) for f in factors],
            name=f"{label_b} ({result_b.total_score:+.2f})",
            marker_color=self.COLORS['scenario_b']
        ))

        fig.update_layout(
            template=self.TEMPLATE,
            barmode='group',
            title=f"{label_a}: {result_a.bias_label}  vs  {label_b}: {result_b.bias_label}",
            legend=dict(orientation="h", yanchor="bottom", y=-0.25, xanchor="center", x=0.5),
            height=450
        )
        return fig

    def create_weights_chart(self, result: ScoreResult) -> go.Figure:
        """Donut of the factor weights used for this result."""
        fig = go.Figure(go.Pie(
            labels=list(result.weights.keys()),
            values=list(result.weights.values()),
            hole=0.5,
            sort=False
        ))
        fig.update_layout(
            template=self.TEMPLATE,
            title=f"Weights ({result.regime})" if result.regime else "Weights",
            height=380
        )
        return fig

    def create_history_chart(self, scores: List[SavedScore]) -> go.Figure:
        """Total score of saved scores over time, colored by bias."""
        if not scores:
            return self._create_empty_chart("No saved scores")

        ordered = sorted(scores, key=lambda s: s.timestamp.timestamp())

        fig = go.Figure(go.Scatter(
            x=[s.timestamp for s in ordered],
            y=[s.total_score for s in ordered],
            mode='lines+markers',
            marker=dict(size=10, color=[s.bias_color or self.COLORS['secondary'] for s in ordered]),
            text=[f"{s.name}: {s.bias}" for s in ordered],
            hovertemplate='%{text}<br>%{y:+.2f}<extra></extra>',
            line=dict(color=self.COLORS['secondary'])
        ))
        fig.add_hline(y=0, line_dash='dot', line_color=self.COLORS['secondary'])
        fig.update_layout(template=self.TEMPLATE, title="Saved Scores", height=400)
        return fig

    def create_series_chart(self, values: Sequence[float], current: float, title: str) -> go.Figure:
        """Historical series with its mean, +/-0.5 and +/-1.5 std bands and the current reading."""
        stats = mean_std(values)
        if stats is None:
            return self._create_empty_chart(f"{title}: no history entered")

        x = list(range(1, len(values) + 1))
        fig = go.Figure()

        for width, opacity in ((1.5, 0.08), (0.5, 0.18)):
            fig.add_hrect(
                y0=stats.mean - width * stats.std,
                y1=stats.mean + width * stats.std,
                fillcolor=self.COLORS['primary'],
                opacity=opacity,
                line_width=0
            )

        fig.add_trace(go.Scatter(x=x, y=list(values), mode='lines+markers', name='History',
                                 line=dict(color=self.COLORS['primary'])))
        fig.add_hline(y=stats.mean, line_dash='dash', line_color=self.COLORS['secondary'],
                      annotation_text=f"mean {stats.mean:.2f}")
        fig.add_trace(go.Scatter(x=[len(values) + 1], y=[current], mode='markers', name='Current',
                                 marker=dict(size=14, color=self.COLORS['neutral'], symbol='diamond')))

        fig.update_layout(template=self.TEMPLATE, title=title, height=350)
        return fig

    def save_chart(self, fig: go.Figure, filename: str, format: str = 'html') -> Path:
        """Save chart to file.

        Args:
            fig: Plotly figure
            filename: Output filename (without extension)
            format: Output format ('html', 'png', 'svg')

        Returns:
            Path to saved file
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / f"{filename}.{format}"

        if format == 'html':
            fig.write_html(str(output_path), include_plotlyjs=True)
        else:
            fig.write_image(str(output_path))

        logger.info(f"Chart saved to {output_path}")
        return output_path

    def _create_empty_chart(self, message: str) -> go.Figure:
        """Create empty chart with message."""
        fig = go.Figure()
        fig.add_annotation(
            text=message,
            xref="paper",
            yref="paper",
            x=0.5,
            y=0.5,
            showarrow=False,
            font=dict(size=20, color="white")
        )
        fig.update_layout(
            template=self.TEMPLATE,
            height=400
        )
        return fig
