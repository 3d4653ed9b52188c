#!/usr/bin/env python3
"""
Scenario Analysis Example

Shows how the same currency pair scores under each market regime, and how
a single indicator change moves the single-currency score.
"""

import sys
from dataclasses import replace
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from macroscore.models import (
    REGIME_WEIGHTS,
    CurrencyIndicators,
    MacroIndicators,
    calculate_score,
)
from macroscore.visualization import ScoreCharts

BASE_PAIR = {
    'selectedPair': 'EUR/USD',
    'base_currency_rate_hike_probability': 30,
    'base_currency_pmi': 51,
    'base_currency_2y_yield': 2.9,
    'base_currency_inflation_expectation': 2.2,
    'quote_currency_rate_cut_probability': 55,
    'quote_currency_guidance_shift': 'dovish',
    'quote_currency_pmi': 49,
    'quote_currency_2y_yield': 4.3,
    'quote_currency_inflation_expectation': 2.5,
    'etf_flows': 'major_inflows',
}

REGIME_SCENARIOS = {
    'Neutral': {'vix': 20},
    'Risk-On': {'vix': 14, 'sp500_new_highs': True},
    'Risk-Off': {'vix': 31, 'gold_vs_stocks_monthly': 3.5},
    'CB Week': {'vix': 31, 'is_cb_week': True},
}


def analyze_regimes():
    """Score one pair under every regime."""
    print("\n" + "=" * 70)
    print("REGIME SCENARIO ANALYSIS: EUR/USD")
    print("=" * 70)

    results = {}
    print("-" * 70)
    print(f"{'Scenario':<12} {'Regime':<10} {'Base':<8} {'Quote':<8} {'Diff':<8} {'Bias':<20}")
    print("-" * 70)

    for name, overrides in REGIME_SCENARIOS.items():
        result = calculate_score(CurrencyIndicators.from_dict({**BASE_PAIR, **overrides}))
        results[name] = result
        print(f"{name:<12} {result.regime:<10} {result.base_currency_score:+.2f}    "
              f"{result.quote_currency_score:+.2f}    {result.total_score:+.2f}    {result.bias_label:<20}")

    print("-" * 70)

    print("\n⚖️  REGIME WEIGHTS:")
    for regime, weights in REGIME_WEIGHTS.items():
        print(f"   {regime.value:<10} " + "  ".join(f"{k} {v:.2f}" for k, v in weights.to_dict().items()))

    return results


def analyze_cpi_shock():
    """Move CPI momentum and watch the single-currency score."""
    print("\n" + "=" * 70)
    print("CPI MOMENTUM SENSITIVITY: USD")
    print("=" * 70)

    record = MacroIndicators(cb_hawkish_index=0.7, cpi=3.2, vix=17, credit_spread_1m_change=-0.1)

    print(f"\n{'3m change':<12} {'Inflation':<12} {'Total':<10} {'Bias':<15}")
    print("-" * 50)
    for change in (-0.3, -0.1, 0.0, 0.1, 0.3):
        result = calculate_score(replace(record, cpi_3m_change=change))
        print(f"{change:+.1f}{'':<8} {result.scores['inflation_score']:+.2f}{'':<7} "
              f"{result.total_score:+.2f}{'':<5} {result.bias_label:<15}")


def main():
    """Run scenario analysis examples."""
    print("\n" + "🎯 " * 20)
    print("MACRO SCORE SCENARIO ANALYZER")
    print("🎯 " * 20)

    regime_results = analyze_regimes()
    analyze_cpi_shock()

    print("\n📊 Generating comparison chart...")
    charts = ScoreCharts()
    fig = charts.create_comparison_chart(
        regime_results['Risk-On'], regime_results['Risk-Off'], 'Risk-On', 'Risk-Off'
    )
    path = charts.save_chart(fig, "regime_comparison")
    print(f"   Saved: {path}")

    print("\n" + "=" * 70)
    print("Analysis complete!")
    print("=" * 70 + "\n")


if __name__ == "__main__":
    main()
