"""
Configuration Loader

Loads the YAML configuration files: store and API settings, per-feed
settings, markets, category tables, color and material tables.
"""

import os
from pathlib import Path
from typing import Any, Dict

import yaml

# Overrides the config directory (tests, alternative stores)
CONFIG_DIR_ENV = "SHOPFEEDS_CONFIG_DIR"


def _get_config_dir() -> Path:
    """Get the config directory path."""
    override = os.environ.get(CONFIG_DIR_ENV)
    if override:
        return Path(override)

    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'store.yaml')

    Returns:
        Parsed YAML content as dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def load_store_settings() -> Dict[str, Any]:
    """
    Load store settings (shop, API version, brand, fetch and throttle policy).

    Example:
        {
            'shop': 'emmanuela-gr',
            'api_version': '2024-01',
            'throttle': {'retries': 6, 'step': 5, 'max_wait': 30, ...},
            ...
        }
    """
    return load_config('store.yaml')


def load_feed_settings(feed: str) -> Dict[str, Any]:
    """
    Load the settings block of one feed from feeds.yaml.

    Args:
        feed: Feed key ('google', 'meta', 'glami', 'bestprice', 'local_inventory')

    Raises:
        KeyError: If the feed has no settings block
    """
    feeds = load_config('feeds.yaml')
    if feed not in feeds:
        raise KeyError(f"No settings for feed '{feed}' in feeds.yaml")
    return feeds[feed]


def load_market_config() -> Dict[str, Any]:
    """
    Load markets.yaml (markets, priority names, handling and transit times).
    """
    return load_config('markets.yaml')


def load_category_tables() -> Dict[str, Dict[str, Any]]:
    """
    Load the category tables keyed by feed.

    Example:
        {
            'google': {'default': 188, 'rules': [{'keywords': ['earrings'], 'category': 194}, ...]},
            'bestprice': {'default': 'Κοσμήματα', 'exact': {...}, 'rules': [...]},
            ...
        }
    """
    return load_config('categories.yaml')


def load_color_tables() -> Dict[str, Dict[str, str]]:
    """
    Load color tables ('english' for Google/Meta, 'greek' for GLAMI/BestPrice).
    """
    return load_config('colors.yaml')


def load_material_tables() -> Dict[str, Dict[str, Any]]:
    """
    Load material tables keyed by feed.
    """
    return load_config('materials.yaml')
