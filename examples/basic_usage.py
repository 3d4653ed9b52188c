#!/usr/bin/env python3
"""
Basic Usage Example

Scores a single currency with the 7-factor model and a currency pair with
the regime-weighted model, then saves both to a local score store.
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from macroscore.models import CurrencyIndicators, MacroIndicators, calculate_score
from macroscore.storage import JsonScoreStore, SavedScore
from macroscore.visualization import ScoreCharts


def main():
    """Run basic usage example."""
    print("=" * 60)
    print("MACRO SCORE - Basic Example")
    print("=" * 60)

    # 1. Single-currency record
    print("\n1. Scoring a single currency (USD)...")
    usd = MacroIndicators(
        cb_hawkish_index=0.8,
        cpi=3.5,
        cpi_target=2.0,
        cpi_3m_change=0.1,
        current_nfp=250,
        nfp_12m_values=(180, 220) * 6,
        credit_spread_1m_change=-0.05,
        vix=18,
        pmi=56,
        pmi_3y_values=(47, 53) * 18,
        ca_gdp=1.0,
        ca_5y_values=(-1, 1) * 10,
        gpr=80,
        gpr_3y_values=(60, 80) * 18,
    )
    usd_result = calculate_score(usd)

    for factor, score in usd_result.scores.items():
        print(f"   • {factor:16} {score:+.2f}")
    print(f"\n   Total: {usd_result.total_score:+.2f} → {usd_result.bias_label}")

    # 2. Currency pair, loose mapping as it arrives from a form or file
    print("\n2. Scoring a currency pair (AUD/JPY)...")
    pair_data = {
        'selectedPair': 'AUD/JPY',
        'base_currency_rate_hike_probability': 60,
        'base_currency_guidance_shift': 'hawkish',
        'base_currency_employment_health': 1,
        'base_currency_pmi': 54,
        'base_currency_2y_yield': 4.1,
        'base_currency_inflation_expectation': 2.8,
        'quote_currency_rate_cut_probability': 30,
        'quote_currency_pmi': 48,
        'quote_currency_2y_yield': 0.2,
        'quote_currency_inflation_expectation': 1.9,
        'vix': 14,
        'sp500_new_highs': True,
        'relevant_etf_flows': {'FXA': 150, 'FXY': -80},
    }
    pair_result = calculate_score(pair_data)

    print(f"   Regime: {pair_result.regime}")
    print(f"   Base {pair_result.base_currency_score:+.2f} / Quote {pair_result.quote_currency_score:+.2f}")
    print(f"   Differential: {pair_result.total_score:+.2f} → {pair_result.bias_label}")
    print(f"   {pair_result.trading_recommendation}")

    # 3. Save both
    print("\n3. Saving scores...")
    store = JsonScoreStore("output/example-scores.json")
    store.append(SavedScore.from_result(usd_result, usd.to_dict(), "USD example"))
    store.append(SavedScore.from_result(pair_result, pair_data, "AUD/JPY example"))

    for saved in store.list_scores()[:5]:
        print(f"   • {saved.name:20} {saved.total_score:+.2f}  {saved.bias}")

    # 4. Chart
    print("\n4. Generating factor breakdown chart...")
    charts = ScoreCharts()
    path = charts.save_chart(charts.create_factor_breakdown_chart(pair_result), "example_breakdown")
    print(f"   Saved: {path}")

    print("\n" + "=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
