"""
Configuration loading for Open Network Wars.

All tunable constants live in config.json next to this module. Missing keys
(or a missing/invalid file) fall back to the built-in defaults below.
"""

import json
import os
from functools import lru_cache
from typing import Any, Dict

CONFIG_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'config.json')

DEFAULT_CONFIG: Dict[str, Any] = {
    'version': '1.4.0',
    'grid_cols': 6,
    'grid_rows': 7,
    'total_nodes': 30,
    'nodes_per_faction': 6,
    'strength_per_faction': 20,
    'faction_count': 5,
    'victory_threshold': 24,
    'attacker_win_chance': 0.52,
    'min_attack_strength': 2,
    'units_left_behind': 1,
    'secret_base_seed': 'ONW_PWA_SEED_v1',
}


@lru_cache(maxsize=None)
def _read_config(path: str) -> Dict[str, Any]:
    config = dict(DEFAULT_CONFIG)
    try:
        with open(path, 'r') as f:
            config.update(json.load(f))
    except (FileNotFoundError, json.JSONDecodeError):
        # Use defaults if config file is missing or invalid
        pass
    return config


def load_config() -> Dict[str, Any]:
    """
    Load game configuration.

    Returns:
        A fresh dict of config values (defaults overlaid with config.json)
    """
    return dict(_read_config(CONFIG_PATH))
