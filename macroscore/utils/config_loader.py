"""Configuration loader utility."""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

# Used when config/settings.yaml is missing or leaves a key out
DEFAULTS: Dict[str, Any] = {
    'storage': {
        'path': 'data/macro-scores.json',
        'max_entries': 50,
        'fallback_path': 'data/macro-scores-local.json',
        'fallback_max_entries': 20,
    },
    'server': {
        'host': '127.0.0.1',
        'port': 3001,
        'api_prefix': '/api',
    },
    'client': {
        'base_url': 'http://localhost:3001/api',
        'timeout': 5,
    },
    'logging': {
        'level': 'INFO',
        'file': None,
    },
    'output': {
        'dir': 'output',
    },
}


class ConfigLoader:
    """Load and manage configuration settings."""

    def __init__(self, config_path: Optional[str] = None):
        """Initialize config loader.

        Args:
            config_path: Path to config file. Defaults to config/settings.yaml
        """
        load_dotenv()

        if config_path is None:
            config_path = os.getenv('MACROSCORE_CONFIG')

        if config_path is None:
            project_root = Path(__file__).parent.parent.parent
            config_path = project_root / "config" / "settings.yaml"

        self.config_path = Path(config_path)
        self._config: Dict[str, Any] = copy.deepcopy(DEFAULTS)
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from YAML file on top of the defaults."""
        if self.config_path.exists():
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
            self._merge(self._config, loaded)

        self._substitute_env_vars(self._config)

    def _merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> None:
        """Recursively merge ``override`` into ``base``."""
        for key, value in override.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                self._merge(base[key], value)
            else:
                base[key] = value

    def _substitute_env_vars(self, config: Dict[str, Any]) -> None:
        """Recursively substitute environment variables in config."""
        for key, value in config.items():
            if isinstance(value, str) and value.startswith('${') and value.endswith('}'):
                env_var = value[2:-1]
                config[key] = os.getenv(env_var, '')
            elif isinstance(value, dict):
                self._substitute_env_vars(value)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by dot-separated key.

        Args:
            key: Dot-separated key (e.g., 'storage.path')
            default: Default value if key not found

        Returns:
            Configuration value
        """
        keys = key.split('.')
        value = self._config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    @property
    def storage(self) -> Dict[str, Any]:
        """Get score store settings."""
        return self.get('storage', {})

    @property
    def server(self) -> Dict[str, Any]:
        """Get HTTP server settings."""
        return self.get('server', {})

    @property
    def client(self) -> Dict[str, Any]:
        """Get storage client settings."""
        return self.get('client', {})

    @property
    def log_level(self) -> str:
        return os.getenv('MACROSCORE_LOG_LEVEL') or self.get('logging.level', 'INFO')

    @property
    def log_file(self) -> Optional[str]:
        return self.get('logging.file')

    @property
    def output_dir(self) -> str:
        return self.get('output.dir', 'output')
