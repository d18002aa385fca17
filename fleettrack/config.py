"""Configuration loading: YAML file, then environment overrides."""

from __future__ import annotations

import copy
import logging
import os

import yaml

_PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
DEFAULT_CONFIG_PATH = os.path.join(_PACKAGE_DIR, "config.yaml")

DEFAULTS = {
    "database": {"url": "sqlite:///data/fleettrack.db"},
    "cache": {"redis_url": None, "ttl": 3600},
    "pricing": {"default_fuel_price": 2.0, "currency": "TND"},
    "aggregation": {"include_awaiting_confirmation": False, "trend_window_days": 30},
    "planification": {"auto_loading": True},
    "logging": {"level": "INFO"},
}


def _merge(base: dict, override: dict) -> dict:
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: str | None = None) -> dict:
    """Load the YAML configuration merged over built-in defaults.

    ``FLEETTRACK_CONFIG`` selects the file when *path* is not given;
    ``DATABASE_URL`` and ``REDIS_URL`` override the file values.
    """
    path = path or os.environ.get("FLEETTRACK_CONFIG", DEFAULT_CONFIG_PATH)
    file_config = {}
    if os.path.exists(path):
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
    config = _merge(DEFAULTS, file_config)

    if os.environ.get("DATABASE_URL"):
        config["database"]["url"] = os.environ["DATABASE_URL"]
    if os.environ.get("REDIS_URL"):
        config["cache"]["redis_url"] = os.environ["REDIS_URL"]
    return config


def configure_logging(config: dict) -> None:
    level = str(config.get("logging", {}).get("level", "INFO")).upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
