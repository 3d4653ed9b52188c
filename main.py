#!/usr/bin/env python3
"""
Macro Score

Command line entry point: score indicator records, manage saved scores,
and launch the API server or dashboard.
"""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger

from macroscore.analysis.statistics import describe_series
from macroscore.models.results import ScoreResult
from macroscore.models.scoring_engine import build_record, calculate_score
from macroscore.models.indicators import MacroIndicators
from macroscore.storage.client import ScoreStorageClient
from macroscore.storage.export import (
    export_score_csv,
    export_score_json,
    saved_scores_to_dataframe,
)
from macroscore.storage.score_store import JsonScoreStore, SavedScore, ScoreStorageError
from macroscore.utils.config_loader import ConfigLoader
from macroscore.utils.logger import setup_logger
from macroscore.visualization.charts import ScoreCharts


def load_record(path: str) -> Dict[str, Any]:
    """Read an indicator record from a JSON or YAML file."""
    with open(path, 'r', encoding='utf-8') as f:
        record = yaml.safe_load(f)
    if not isinstance(record, dict):
        raise ValueError(f"{path} does not contain an indicator record object")
    return record


def open_store(config: ConfigLoader) -> JsonScoreStore:
    return JsonScoreStore(
        config.get('storage.path'),
        max_entries=int(config.get('storage.max_entries', 50))
    )


def open_client(config: ConfigLoader) -> ScoreStorageClient:
    fallback = JsonScoreStore(
        config.get('storage.fallback_path'),
        max_entries=int(config.get('storage.fallback_max_entries', 20))
    )
    return ScoreStorageClient(
        config.get('client.base_url'),
        fallback_store=fallback,
        timeout=float(config.get('client.timeout', 5))
    )


def print_result(result: ScoreResult, record: Optional[MacroIndicators] = None) -> None:
    """Print a score result to the console."""
    print("\n" + "=" * 60)
    print(f"MACRO SCORE ({result.model.value})")
    print("=" * 60)

    if result.regime:
        print(f"\n   Regime: {result.regime}")
        print(f"   Weights: {', '.join(f'{k} {v:.2f}' for k, v in result.weights.items())}")

    print("\n   Factor scores:")
    for factor, score in result.scores.items():
        print(f"   • {factor:20} {score:+.2f}")

    if isinstance(record, MacroIndicators):
        print("\n   Series context:")
        for label, value, history in (
            ('NFP', record.current_nfp, record.nfp_12m_values),
            ('PMI', record.pmi, record.pmi_3y_values),
            ('CA % GDP', record.ca_gdp, record.ca_5y_values),
            ('GPR', record.gpr, record.gpr_3y_values),
        ):
            summary = describe_series(value, history)
            if summary is None:
                print(f"   • {label:10} no history (neutral)")
            else:
                print(f"   • {label:10} mean {summary.mean:.2f}, std {summary.std:.2f}, "
                      f"z {summary.z_score:+.2f}, pct {summary.percentile:.0f}")

    if result.base_currency_score is not None:
        print(f"\n   Base {result.base_currency_score:+.2f} | Quote {result.quote_currency_score:+.2f}")

    print(f"\n   TOTAL: {result.total_score:+.2f}  →  {result.bias_label} ({result.bias_color})")
    if result.bias.position_size:
        print(f"   Sizing: {result.bias.position_size}, {result.bias.risk_per_trade}")
    if result.trading_recommendation:
        print(f"\n   {result.trading_recommendation}")

    print("\n" + "=" * 60)
    print("DISCLAIMER: Scores derived from manually entered indicators. Not financial advice.")
    print("=" * 60 + "\n")


def run_score(args: argparse.Namespace, config: ConfigLoader) -> int:
    data = load_record(args.file)
    record = build_record(data, args.model)
    result = calculate_score(record)
    print_result(result, record)

    name = args.save or Path(args.file).stem
    output_dir = config.output_dir

    if args.export in ('json', 'all'):
        print(f"📄 Exported to: {export_score_json(result, data, name, output_dir)}")
    if args.export in ('csv', 'all'):
        print(f"📄 Exported to: {export_score_csv(result, data, name, output_dir)}")

    if args.chart:
        charts = ScoreCharts(output_dir)
        path = charts.save_chart(charts.create_factor_breakdown_chart(result), f"{name}_breakdown")
        print(f"📊 Chart saved to: {path}")

    if args.save:
        saved = SavedScore.from_result(result, data, args.save)
        if args.remote:
            outcome = open_client(config).save(saved)
            where = "server" if outcome.remote else "local cache (server unavailable)"
            print(f"💾 Saved '{saved.name}' ({saved.id}) to {where}")
        else:
            open_store(config).append(saved)
            print(f"💾 Saved '{saved.name}' ({saved.id})")

    return 0


def run_list(args: argparse.Namespace, config: ConfigLoader) -> int:
    scores = open_client(config).list_scores() if args.remote else open_store(config).list_scores()
    if not scores:
        print("\nNo saved scores.")
        return 0

    df = saved_scores_to_dataframe(scores)
    print()
    print(df.to_string(index=False))
    print()
    return 0


def run_delete(args: argparse.Namespace, config: ConfigLoader) -> int:
    if args.remote:
        try:
            open_client(config).delete(args.id)
        except ScoreStorageError as e:
            print(f"Error: {e}")
            return 1
    else:
        open_store(config).delete(args.id)
    print(f"Deleted {args.id}")
    return 0


def run_export(args: argparse.Namespace, config: ConfigLoader) -> int:
    saved = open_store(config).get(args.id)
    if saved is None:
        print(f"No saved score with id {args.id}")
        return 1

    result = calculate_score(saved.data, saved.model)
    exporter = export_score_csv if args.csv else export_score_json
    path = exporter(result, saved.data, saved.name, config.output_dir)
    print(f"📄 Exported to: {path}")
    return 0


def run_server_command(args: argparse.Namespace, config: ConfigLoader) -> int:
    from macroscore.api.server import run_server

    run_server(host=args.host or config.get('server.host'),
               port=args.port or int(config.get('server.port')),
               config=config)
    return 0


def run_dashboard(args: argparse.Namespace, config: ConfigLoader) -> int:
    """Launch the interactive dashboard."""
    from macroscore.visualization.dashboard import MacroScoreDashboard

    logger.info("Launching Macro Score Dashboard...")
    dashboard = MacroScoreDashboard(host=args.host, port=args.port, config=config)
    dashboard.run(debug=not args.no_debug)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Macro Score",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python main.py score usd.yaml                    Score a single-currency record
  python main.py score eurusd.json --model currency
  python main.py score usd.yaml --save "USD May"   Score and save
  python main.py list                              List saved scores
  python main.py delete <id>                       Delete a saved score
  python main.py export <id> --csv                 Export a saved score
  python main.py serve                             Run the saved-score API
  python main.py dashboard                         Launch interactive dashboard
        """
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Verbose output')
    parser.add_argument('-c', '--config', help='Path to settings.yaml')

    subparsers = parser.add_subparsers(dest='command', help='Commands')

    score_parser = subparsers.add_parser('score', help='Score an indicator record file (JSON or YAML)')
    score_parser.add_argument('file', help='Indicator record file')
    score_parser.add_argument('--model', choices=['macro', 'currency'], help='Scoring model (auto-detected by default)')
    score_parser.add_argument('--save', metavar='NAME', help='Save the result under NAME')
    score_parser.add_argument('--remote', action='store_true', help='Save through the API server')
    score_parser.add_argument('--export', choices=['json', 'csv', 'all'], help='Export the result')
    score_parser.add_argument('--chart', action='store_true', help='Write an HTML factor chart')

    list_parser = subparsers.add_parser('list', help='List saved scores')
    list_parser.add_argument('--remote', action='store_true', help='Read through the API server')

    delete_parser = subparsers.add_parser('delete', help='Delete a saved score')
    delete_parser.add_argument('id', help='Saved score id')
    delete_parser.add_argument('--remote', action='store_true', help='Delete through the API server')

    export_parser = subparsers.add_parser('export', help='Export a saved score')
    export_parser.add_argument('id', help='Saved score id')
    export_parser.add_argument('--csv', action='store_true', help='CSV instead of JSON')

    serve_parser = subparsers.add_parser('serve', help='Run the saved-score API server')
    serve_parser.add_argument('--host', help='Host address')
    serve_parser.add_argument('--port', type=int, help='Port number')

    dash_parser = subparsers.add_parser('dashboard', help='Launch interactive dashboard')
    dash_parser.add_argument('--host', default='127.0.0.1', help='Host address')
    dash_parser.add_argument('--port', type=int, default=8050, help='Port number')
    dash_parser.add_argument('--no-debug', action='store_true', help='Disable debug mode')

    return parser


COMMANDS = {
    'score': run_score,
    'list': run_list,
    'delete': run_delete,
    'export': run_export,
    'serve': run_server_command,
    'dashboard': run_dashboard,
}


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    config = ConfigLoader(args.config)
    log_level = "DEBUG" if args.verbose else config.log_level
    setup_logger(log_level=log_level, log_file=config.log_file)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        return 1

    try:
        return handler(args, config)
    except (OSError, ValueError) as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
