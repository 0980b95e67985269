"""
Configuration Module for the MusicBrainz cover catalog
Handles logging setup, Flask app initialization and extraction settings
"""

import os
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_OUT_DIR = 'out'
DEFAULT_BATCH_SIZE = 5000
CATALOG_FILENAME = 'catalog.db'
DEFAULT_CATALOG_DB_PATH = os.path.join(DEFAULT_OUT_DIR, CATALOG_FILENAME)

CANONICAL_STRATEGIES = ('window', 'stream')


class ConfigError(ValueError):
    """Raised when a required setting is missing or malformed"""


@dataclass(frozen=True)
class ExtractConfig:
    """Settings for one extraction run, captured once at start-up"""
    source_url: str
    output_dir: Path
    batch_size: int = DEFAULT_BATCH_SIZE
    database_name: Optional[str] = None
    canonical_strategy: str = 'window'

    @property
    def final_path(self) -> Path:
        return self.output_dir / CATALOG_FILENAME


def configure_logging():
    """
    Configure application logging with standard format

    Returns:
        Logger instance for the config module
    """
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    return logging.getLogger(__name__)


def init_app_config(app, catalog_path=None):
    """
    Initialize Flask app configuration

    This sets up:
    - Custom JSON provider (insertion-ordered keys, UTF-8 output)
    - Path of the catalog database served by the lookup routes

    Args:
        app: Flask application instance
        catalog_path: Catalog file to serve (default: CATALOG_DB_PATH env)
    """
    from utils.json_provider import CatalogJSONProvider
    app.json = CatalogJSONProvider(app)
    app.config['CATALOG_DB_PATH'] = str(
        catalog_path or os.environ.get('CATALOG_DB_PATH', DEFAULT_CATALOG_DB_PATH)
    )


def _parse_batch_size(value) -> int:
    try:
        batch_size = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"BATCH_SIZE must be an integer, got {value!r}")
    if batch_size < 1:
        raise ConfigError(f"BATCH_SIZE must be at least 1, got {batch_size}")
    return batch_size


def load_extract_config(env: Optional[Mapping[str, str]] = None,
                        require_database: bool = False,
                        **overrides) -> ExtractConfig:
    """
    Build the extraction settings from the environment

    Args:
        env: Mapping to read settings from (default: os.environ)
        require_database: If True, D1_DATABASE must be set (deploy runs)
        **overrides: Values that take precedence over the environment
            (source_url, output_dir, batch_size, database_name,
            canonical_strategy); None values are ignored

    Returns:
        ExtractConfig

    Raises:
        ConfigError: If a required setting is missing or invalid
    """
    env = os.environ if env is None else env
    overrides = {k: v for k, v in overrides.items() if v is not None}

    source_url = overrides.pop('source_url', None) or env.get('MB_PG_URL')
    if not source_url:
        raise ConfigError("MB_PG_URL is required")

    # Each setting comes from its override when given, else from env
    config = ExtractConfig(
        source_url=source_url,
        output_dir=Path(overrides.pop('output_dir', None) or env.get('OUT_DIR') or DEFAULT_OUT_DIR),
        batch_size=_parse_batch_size(
            overrides.pop('batch_size', None) or env.get('BATCH_SIZE') or DEFAULT_BATCH_SIZE
        ),
        database_name=overrides.pop('database_name', None) or env.get('D1_DATABASE') or None,
        canonical_strategy=(
            overrides.pop('canonical_strategy', None) or env.get('CANONICAL_STRATEGY') or 'window'
        ),
    )
    if overrides:
        raise TypeError(f"Unknown settings: {', '.join(sorted(overrides))}")

    if config.canonical_strategy not in CANONICAL_STRATEGIES:
        raise ConfigError(
            f"CANONICAL_STRATEGY must be one of {', '.join(CANONICAL_STRATEGIES)}, "
            f"got {config.canonical_strategy!r}"
        )
    if require_database and not config.database_name:
        raise ConfigError("D1_DATABASE is required")

    return config
