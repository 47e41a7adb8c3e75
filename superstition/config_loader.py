"""Configuration loader with per-variant overrides.

Usage:
  from superstition.config_loader import load_config
  cfg = load_config("debug")  # merges base config.yml with config_debug.yml if present

Merge rules:
  - Built-in DEFAULTS first, then config.yml, then config_<variant>.yml.
  - Shallow merge for top-level keys (later file overrides earlier).
  - For mapping values under 'canvas' and 'paths', perform key-wise override (deep one level).
  - Missing file -> ignored.
  - Environment variable VIZ_VARIANT overrides the requested variant;
    VIZ_DATA_ROOT overrides data_root.
"""
from __future__ import annotations

import copy
import logging
import os
from typing import Any

import yaml

logger = logging.getLogger(__name__)

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))

VARIANTS = ("comparison", "debug")
NESTED_KEYS = ("canvas", "paths")

DEFAULTS: dict[str, Any] = {
    "variant": "comparison",
    "data_root": "./extracted",
    "year": 2022,
    "rows": 5,
    "max_workers": 4,
    "canvas": {"width": 1200, "height": 900},
    "paths": {
        "spreadsheet": "{country}/{continent}_{country}.xlsx",
        "tabular": "{country}/{country}_Superstition_Index.csv",
        "debug": "superstition_idx_korea.csv",
    },
    "output": None,
}


def _read_yaml(path: str) -> dict[str, Any]:
    if not os.path.exists(path):
        return {}
    try:
        with open(path, encoding="utf-8") as fp:
            data = yaml.safe_load(fp)
        return data if isinstance(data, dict) else {}
    except yaml.YAMLError as exc:
        logger.warning("Failed to parse YAML in %s: %s, using empty config", path, exc)
        return {}
    except OSError as exc:
        logger.warning("Failed to read %s: %s, using empty config", path, exc)
        return {}


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for k, v in override.items():
        if k in NESTED_KEYS and isinstance(v, dict):
            sub = base.get(k, {})
            out = dict(sub) if isinstance(sub, dict) else {}
            out.update(v)
            merged[k] = out
        else:
            merged[k] = v
    return merged


def load_config(variant: str | None = None, root: str | None = None) -> dict[str, Any]:
    """Load defaults, config.yml and a variant-specific override if present.

    Variant file pattern: config_<variant>.yml (e.g., config_debug.yml).
    If VIZ_VARIANT env var is set, it supersedes variant.
    """
    root = root or ROOT
    env_variant = os.getenv("VIZ_VARIANT")
    if env_variant:
        variant = env_variant
    variant = (variant or "").strip().lower()

    cfg = _merge(copy.deepcopy(DEFAULTS), _read_yaml(os.path.join(root, "config.yml")))
    if not variant:
        variant = str(cfg.get("variant") or "comparison").strip().lower()
    if variant not in VARIANTS:
        raise ValueError(f"Unknown variant '{variant}' (expected one of {', '.join(VARIANTS)})")
    cfg = _merge(cfg, _read_yaml(os.path.join(root, f"config_{variant}.yml")))
    cfg["variant"] = variant

    env_root = os.getenv("VIZ_DATA_ROOT", "").strip()
    if env_root:
        cfg["data_root"] = env_root
    return cfg


__all__ = ["DEFAULTS", "VARIANTS", "load_config"]
