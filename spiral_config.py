#!/usr/bin/env python3
"""
SPIRAL_CONFIG.PY - Saved spiral preferences

Loads and saves the last-used SpiralConfig as JSON. The rest of the
package only ever sees SpiralConfig values; persistence is layered on top.
"""

import json
import os
from typing import Dict

from spiral_models import SpiralConfig, PAPER_SIZES, DPI_OPTIONS

# Config file path
CONFIG_PATH = os.path.join(os.path.dirname(__file__), "spiral_config.json")


def get_defaults() -> Dict:
    """Return default config values."""
    return SpiralConfig().to_dict()


def config_from_dict(data: Dict) -> SpiralConfig:
    """Build a SpiralConfig from saved values, falling back to defaults.

    Unknown keys are ignored; an unsupported DPI or a non-string paper size
    is reset to the default. Selecting a paper preset also copies its
    dimensions.
    """
    defaults = get_defaults()
    values = dict(defaults)
    known = set(SpiralConfig.field_names())
    values.update({k: v for k, v in data.items() if k in known})

    if not isinstance(values["dpi"], int) or values["dpi"] not in DPI_OPTIONS:
        values["dpi"] = defaults["dpi"]
    if not isinstance(values["paper_size"], str):
        values["paper_size"] = defaults["paper_size"]

    paper_key = values["paper_size"]
    if paper_key != "custom" and paper_key in PAPER_SIZES:
        values["paper_width_mm"] = PAPER_SIZES[paper_key].width_mm
        values["paper_height_mm"] = PAPER_SIZES[paper_key].height_mm

    return SpiralConfig(**values)


def load_config(path: str = CONFIG_PATH) -> SpiralConfig:
    """Load config from JSON file; defaults when missing or unreadable."""
    if not os.path.exists(path):
        return SpiralConfig()
    try:
        with open(path, 'r') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        print(f"Could not read {path} ({e}); using defaults")
        return SpiralConfig()

    if not isinstance(data, dict):
        print(f"Ignoring {path}: expected a JSON object")
        return SpiralConfig()
    return config_from_dict(data)


def save_config(config: SpiralConfig, path: str = CONFIG_PATH):
    """Save config to JSON file."""
    with open(path, 'w') as f:
        json.dump(config.to_dict(), f, indent=2)
