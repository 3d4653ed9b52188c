"""
Macro Score Dashboard

Dash front end for scoring an indicator record, saving it, and comparing
saved scores. The saved-score API is mounted on the same Flask server.
"""

import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import dash
from dash import dcc, html, ALL, Input, Output, State
from dash.exceptions import PreventUpdate
import dash_bootstrap_components as dbc
from loguru import logger

from ..api.server import register_api
from ..models.indicators import CurrencyIndicators, MacroIndicators
from ..models.results import ScoreResult
from ..models.scoring_engine import calculate_score, detect_model
from ..storage.score_store import JsonScoreStore, SavedScore
from ..utils.config_loader import ConfigLoader
from .charts import ScoreCharts

EXAMPLE_RECORDS = {
    'macro': MacroIndicators().to_dict(),
    'currency': CurrencyIndicators().to_dict(),
}


class MacroScoreDashboard:
    """Interactive dashboard for macro scores."""

    def __init__(
        self,
        host: str = "127.0.0.1",
        port: int = 8050,
        store: Optional[JsonScoreStore] = None,
        config: Optional[ConfigLoader] = None
    ):
        """Initialize the dashboard.

        Args:
            host: Host address
            port: Port number
            store: Score store; built from config when omitted
            config: Configuration
        """
        self.host = host
        self.port = port
        self.config = config or ConfigLoader()
        if store is None:
            store = JsonScoreStore(
                self.config.get('storage.path', 'data/macro-scores.json'),
                max_entries=int(self.config.get('storage.max_entries', 50))
            )
        self.store = store
        self.charts = ScoreCharts(output_dir=self.config.output_dir)

        self.app = dash.Dash(
            __name__,
            external_stylesheets=[dbc.themes.DARKLY],
            title="Macro Score"
        )
        register_api(self.app.server, self.store, self.config.get('server.api_prefix', '/api'))

        self._setup_layout()
        self._setup_callbacks()

    def _setup_layout(self) -> None:
        """Set up the dashboard layout."""
        self.app.layout = dbc.Container([
            dbc.Row([
                dbc.Col([
                    html.H1("Macro Score", className="text-center mb-2 mt-3"),
                    html.H5("Indicator-Weighted Currency Bias",
                            className="text-center text-muted mb-4"),
                ])
            ]),

            # Scoring input
            dbc.Row([
                dbc.Col([
                    dbc.Card([
                        dbc.CardHeader("Indicator Record (JSON)"),
                        dbc.CardBody([
                            dbc.RadioItems(
                                id='model-radio',
                                options=[
                                    {'label': 'Single currency (7 factors)', 'value': 'macro'},
                                    {'label': 'Currency pair (regime weighted)', 'value': 'currency'},
                                ],
                                value='macro',
                                inline=True,
                                className="mb-2"
                            ),
                            dcc.Textarea(
                                id='record-input',
                                value=json.dumps(EXAMPLE_RECORDS['macro'], indent=2),
                                style={'width': '100%', 'height': 320, 'fontFamily': 'monospace'}
                            ),
                            dbc.Row([
                                dbc.Col(dbc.Input(id='score-name', placeholder="Name for saving..."), width=6),
                                dbc.Col(dbc.Button("Calculate", id='calculate-button', color="primary"), width=3),
                                dbc.Col(dbc.Button("Save", id='save-button', color="success"), width=3),
                            ], className="mt-2"),
                            html.Div(id='save-status', className="mt-2 text-muted small"),
                        ])
                    ])
                ], width=5),
                dbc.Col([
                    dbc.Card([
                        dbc.CardHeader("Result"),
                        dbc.CardBody([
                            html.Div(id='result-summary'),
                            dcc.Graph(id='breakdown-chart'),
                        ])
                    ])
                ], width=7),
            ], className="mb-4"),

            # Saved scores
            dbc.Row([
                dbc.Col([
                    dbc.Card([
                        dbc.CardHeader("Saved Scores"),
                        dbc.CardBody([
                            html.Div(id='saved-table'),
                            dcc.Graph(id='history-chart'),
                        ])
                    ])
                ])
            ], className="mb-4"),

            # Compare
            dbc.Row([
                dbc.Col([
                    dbc.Label("Scenario A"),
                    dcc.Dropdown(id='compare-a', placeholder="Select a saved score..."),
                ], width=6),
                dbc.Col([
                    dbc.Label("Scenario B"),
                    dcc.Dropdown(id='compare-b', placeholder="Select a saved score..."),
                ], width=6),
            ], className="mb-3"),
            dbc.Row([
                dbc.Col([
                    dbc.Card([
                        dbc.CardHeader("Comparison"),
                        dbc.CardBody([dcc.Graph(id='compare-chart')])
                    ])
                ])
            ], className="mb-4"),

            dcc.Store(id='saved-version', data=0),

            dbc.Row([
                dbc.Col([
                    html.Hr(),
                    html.P("Scores derived from manually entered indicators. Not financial advice.",
                           className="text-center text-muted small")
                ])
            ])
        ], fluid=True)

    def _setup_callbacks(self) -> None:
        """Set up dashboard callbacks."""

        @self.app.callback(
            [Output('record-input', 'value'),
             Output('model-radio', 'value')],
            [Input('model-radio', 'value'),
             Input({'type': 'load-score', 'index': ALL}, 'n_clicks')]
        )
        def select_record(model, load_clicks):
            trigger = dash.ctx.triggered_id
            if isinstance(trigger, dict) and trigger.get('type') == 'load-score':
                # Buttons re-rendered by a table refresh fire with no clicks
                if not dash.ctx.triggered[0]['value']:
                    raise PreventUpdate
                loaded = self._load_saved(trigger['index'])
                if loaded is None:
                    raise PreventUpdate
                return loaded
            if trigger != 'model-radio':
                raise PreventUpdate

            return json.dumps(EXAMPLE_RECORDS.get(model, EXAMPLE_RECORDS['macro']), indent=2), dash.no_update

        @self.app.callback(
            Output('saved-version', 'data', allow_duplicate=True),
            Input({'type': 'delete-score', 'index': ALL}, 'n_clicks'),
            State('saved-version', 'data'),
            prevent_initial_call=True
        )
        def delete(delete_clicks, version):
            trigger = dash.ctx.triggered_id
            if not isinstance(trigger, dict) or not dash.ctx.triggered[0]['value']:
                raise PreventUpdate

            self._delete_saved(trigger['index'])
            return (version or 0) + 1

        @self.app.callback(
            [Output('result-summary', 'children'),
             Output('breakdown-chart', 'figure')],
            Input('calculate-button', 'n_clicks'),
            [State('record-input', 'value'),
             State('model-radio', 'value')]
        )
        def calculate(n_clicks, record_text, model):
            if not n_clicks:
                return "Enter indicators and press Calculate", self.charts._create_empty_chart("No result yet")

            record, error = self._parse_record(record_text)
            if error:
                return dbc.Alert(error, color="danger"), self.charts._create_empty_chart("Invalid input")

            result = calculate_score(record, model)
            logger.info(f"Calculated {model} score {result.total_score} ({result.bias_label})")

            return self._result_summary(result), self.charts.create_factor_breakdown_chart(result)

        @self.app.callback(
            [Output('save-status', 'children'),
             Output('saved-version', 'data')],
            Input('save-button', 'n_clicks'),
            [State('record-input', 'value'),
             State('model-radio', 'value'),
             State('score-name', 'value'),
             State('saved-version', 'data')]
        )
        def save(n_clicks, record_text, model, name, version):
            if not n_clicks:
                return "", version

            record, error = self._parse_record(record_text)
            if error:
                return error, version

            result = calculate_score(record, model)
            name = (name or '').strip() or f"{model} score {datetime.now():%Y-%m-%d %H:%M}"
            saved = self.store.append(SavedScore.from_result(result, record, name))
            return f"Saved '{saved.name}'", (version or 0) + 1

        @self.app.callback(
            [Output('saved-table', 'children'),
             Output('history-chart', 'figure'),
             Output('compare-a', 'options'),
             Output('compare-b', 'options')],
            Input('saved-version', 'data')
        )
        def refresh_saved(version):
            scores = self.store.list_scores()
            options = [
                {'label': f"{s.name} ({s.timestamp:%m/%d %H:%M}, {s.total_score:+.2f})", 'value': s.id}
                for s in scores
            ]
            return self._saved_table(scores), self.charts.create_history_chart(scores), options, options

        @self.app.callback(
            Output('compare-chart', 'figure'),
            [Input('compare-a', 'value'),
             Input('compare-b', 'value')]
        )
        def compare(score_a, score_b):
            if not score_a or not score_b:
                return self.charts._create_empty_chart("Select two saved scores")

            pair = self._rescore_pair(score_a, score_b)
            if pair is None:
                return self.charts._create_empty_chart("Saved score not found")

            (label_a, result_a), (label_b, result_b) = pair
            return self.charts.create_comparison_chart(result_a, result_b, label_a, label_b)

    def _parse_record(self, record_text: Optional[str]) -> Tuple[Dict[str, Any], Optional[str]]:
        try:
            record = json.loads(record_text or '{}')
        except json.JSONDecodeError as e:
            return {}, f"Invalid JSON: {e}"
        if not isinstance(record, dict):
            return {}, "Indicator record must be a JSON object"
        return record, None

    def _rescore_pair(self, score_a: str, score_b: str) -> Optional[List[Tuple[str, ScoreResult]]]:
        """Re-run the engine on two saved records."""
        pair = []
        for score_id in (score_a, score_b):
            saved = self.store.get(score_id)
            if saved is None:
                return None
            pair.append((saved.name, calculate_score(saved.data, saved.model)))
        return pair

    def _load_saved(self, score_id: str) -> Optional[Tuple[str, str]]:
        """Record text and model tag of a saved score, for the input form."""
        saved = self.store.get(score_id)
        if saved is None:
            logger.warning(f"Saved score {score_id} not found")
            return None

        model = saved.model or detect_model(saved.data).value
        logger.info(f"Loaded saved score '{saved.name}' into the form")
        return json.dumps(saved.data, indent=2), model

    def _delete_saved(self, score_id: str) -> bool:
        return self.store.delete(score_id)

    def _result_summary(self, result: ScoreResult) -> html.Div:
        items = [
            html.H2(f"{result.total_score:+.2f}", style={'color': result.bias_color}),
            html.H4(result.bias_label, style={'color': result.bias_color}),
        ]
        if result.regime:
            items.append(html.P([html.Strong("Regime: "), result.regime]))
        if result.base_currency_score is not None:
            items.append(html.P(
                f"Base {result.base_currency_score:+.2f} / Quote {result.quote_currency_score:+.2f}"
            ))
        if result.trading_recommendation:
            items.append(html.P(result.trading_recommendation, className="small text-muted"))
        return html.Div(items)

    def _saved_table(self, scores: List[SavedScore]):
        if not scores:
            return "No saved scores"

        rows = [
            html.Tr([
                html.Td(f"{s.timestamp:%Y-%m-%d %H:%M}"),
                html.Td(s.name),
                html.Td(s.model or ''),
                html.Td(f"{s.total_score:+.2f}"),
                html.Td(s.bias, style={'color': s.bias_color}),
                html.Td([
                    dbc.Button("Load", id={'type': 'load-score', 'index': s.id},
                               size="sm", color="primary", outline=True, className="me-1"),
                    dbc.Button("Delete", id={'type': 'delete-score', 'index': s.id},
                               size="sm", color="danger", outline=True),
                ]),
            ])
            for s in scores
        ]
        return dbc.Table([
            html.Thead(html.Tr([
                html.Th("Date"), html.Th("Name"), html.Th("Model"), html.Th("Score"), html.Th("Bias"), html.Th("")
            ])),
            html.Tbody(rows)
        ], bordered=True, hover=True, responsive=True, striped=True)

    def run(self, debug: bool = True) -> None:
        """Run the dashboard server.

        Args:
            debug: Enable debug mode
        """
        logger.info(f"Starting dashboard on http://{self.host}:{self.port}")
        self.app.run(host=self.host, port=self.port, debug=debug)
