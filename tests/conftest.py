# tests/conftest.py

"""
Pytest Fixtures - Shared indicator records, stores and API clients

SCENARIO REFERENCE (usd_record_data):
- cb 0.6, inflation -1.0, labor ~1.97, risk 0.175, pmi 1.5, ca ~0.92, geo ~-0.92
- total ~0.51 -> Mild Bullish
"""

import pytest

from macroscore.api.server import create_app
from macroscore.storage.score_store import JsonScoreStore
from macroscore.utils.config_loader import ConfigLoader


# =============================================================================
# INDICATOR RECORDS
# =============================================================================

@pytest.fixture
def usd_record_data():
    """Single-currency record with full histories."""
    return {
        'cb_hawkish_index': 0.8,
        'cpi': 3.5,
        'cpi_target': 2.0,
        'cpi_3m_change': 0.1,
        'current_nfp': 250,
        'nfp_12m_values': [180, 220] * 6,        # mean 200, std 20
        'credit_spread_1m_change': -0.05,
        'vix': 18,
        'pmi': 56,
        'pmi_3y_values': [47, 53] * 18,          # mean 50, std 3
        'ca_gdp': 1.0,
        'ca_5y_values': [-1, 1] * 10,            # mean 0, std 1
        'gpr': 80,
        'gpr_3y_values': [60, 80] * 18,          # mean 70, std 10
    }


@pytest.fixture
def eurusd_record_data():
    """Pair record in the neutral regime: only EUR rate pricing differs."""
    return {
        'selectedPair': 'EUR/USD',
        'base_currency_rate_hike_probability': 80,
        'vix': 20,
    }


# =============================================================================
# STORAGE / API
# =============================================================================

@pytest.fixture
def store(tmp_path):
    """Empty score store in a temp directory."""
    return JsonScoreStore(tmp_path / "macro-scores.json", max_entries=50)


@pytest.fixture
def settings_file(tmp_path):
    """settings.yaml pointing every path into the temp directory."""
    path = tmp_path / "settings.yaml"
    path.write_text(
        "storage:\n"
        f"  path: {tmp_path / 'data' / 'macro-scores.json'}\n"
        "  max_entries: 50\n"
        f"  fallback_path: {tmp_path / 'data' / 'macro-scores-local.json'}\n"
        "  fallback_max_entries: 20\n"
        "client:\n"
        "  base_url: http://127.0.0.1:9/api\n"
        "  timeout: 0.5\n"
        "logging:\n"
        "  level: WARNING\n"
        "  file: null\n"
        "output:\n"
        f"  dir: {tmp_path / 'output'}\n",
        encoding='utf-8'
    )
    return path


@pytest.fixture
def config(settings_file):
    return ConfigLoader(str(settings_file))


@pytest.fixture
def app(store, config):
    """Flask app serving the score API over the temp store."""
    flask_app = create_app(store=store, config=config)
    flask_app.config['TESTING'] = True
    return flask_app


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
