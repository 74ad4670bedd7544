"""
Engine configuration.

Thresholds and weights live in args/analytics.yaml under the
`analytics` key. Anything missing from the file falls back to the
defaults below, merged key by key, so a config that only sets
`timezone` is valid.
"""

import copy
from pathlib import Path
from typing import Any

import yaml

from habitpulse.logging_config import get_logger

from . import CONFIG_PATH

logger = get_logger(__name__)

DEFAULT_CONFIG: dict[str, Any] = {
    "timezone": "local",
    "streak": {
        "history_days": 365,
    },
    "adherence": {
        "done_ratio": 0.8,
    },
    "momentum": {
        "window_days": 7,
        "streak_reference_days": 30,
        "volume_reference_minutes": 2100,
        "deep_session_reference": 10,
        "weights": {
            "streak": 0.25,
            "volume": 0.25,
            "consistency": 0.25,
            "deep_work": 0.25,
        },
        "rising_ratio": 1.1,
        "falling_ratio": 0.9,
    },
    "burnout": {
        "window_days": 7,
        "high_volume_minutes": 2400,
        "high_volume_points": 40,
        "elevated_volume_minutes": 1800,
        "elevated_volume_points": 20,
        "low_mood_threshold": 2.5,
        "low_mood_points": 30,
        "low_energy_threshold": 2.5,
        "low_energy_points": 20,
        "no_rest_points": 10,
        "high_band": 60,
        "medium_band": 30,
    },
    "brain_load": {
        "capacity_units": 360,
        "high_load_weight": 1.5,
        "low_load_weight": 0.5,
        "high_load_categories": ["Work", "Study"],
        "high_load_name_markers": ["Code", "Deep"],
        "overload_above": 90,
        "high_above": 60,
    },
    "energy_curve": {
        "window_days": 30,
    },
    "topics": {
        "default_days": 30,
        "max_entries": 10,
    },
    "deep_work": {
        "min_session_minutes": 45,
        "window_days": 7,
    },
    "series": {
        "week_days": 7,
        "month_days": 30,
        "heatmap_days": 365,
    },
    "scores": {
        "recent_limit": 10,
    },
}


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively overlay `override` onto a copy of `base`."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: str | Path | None = None) -> dict[str, Any]:
    """Load configuration from YAML file, falling back to defaults."""
    config_path = Path(path) if path else CONFIG_PATH
    if not config_path.exists():
        return copy.deepcopy(DEFAULT_CONFIG)

    with open(config_path) as f:
        loaded = yaml.safe_load(f) or {}

    section = loaded.get("analytics", {})
    if not isinstance(section, dict):
        logger.warning("config_section_ignored", path=str(config_path))
        section = {}
    return merge_config(DEFAULT_CONFIG, section)
