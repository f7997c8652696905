"""
YAML → threshold overrides loader.

Loads analysis thresholds from thresholds.yaml (bundled with the package) and
optionally merges user overrides from ~/.lift-insights/thresholds.yaml.

Usage:
    from lift_insights.core.engine.config_loader import get_threshold
    mild = get_threshold("progression", "DROP_THRESHOLD_MILD", 15.0)

If a YAML file cannot be read or parsed, it is logged and ignored and all
lookups fall back to the Python defaults from config.py (no crash).
"""

from __future__ import annotations

import importlib.resources
import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, TypeVar

import yaml

logger = logging.getLogger(__name__)

T = TypeVar("T", int, float)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; return {} on any read or parse error."""
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring threshold file %s: %s", path, exc)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring threshold file %s: top level is not a mapping", path)
        return {}
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled thresholds.yaml, or None if not found."""
    ref = importlib.resources.files("lift_insights").joinpath("thresholds.yaml")
    if not ref.is_file():
        return None
    return Path(str(ref))


def get_user_yaml_path() -> Path | None:
    """Return ~/.lift-insights/thresholds.yaml if it exists, else None."""
    home = Path(os.environ.get("HOME", "~")).expanduser()
    p = home / ".lift-insights" / "thresholds.yaml"
    return p if p.exists() else None


def load_model_config() -> dict[str, Any]:
    """
    Load and merge threshold configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/lift_insights/thresholds.yaml
    2. User override at ~/.lift-insights/thresholds.yaml

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = get_user_yaml_path()
    if user is not None:
        user_cfg = _load_yaml_file(user)
        if user_cfg:
            logger.debug("Applying threshold overrides from %s", user)
            config = _deep_merge(config, user_cfg)

    return config


@lru_cache(maxsize=1)
def _cached_config() -> dict[str, Any]:
    return load_model_config()


def reload_model_config() -> None:
    """Drop the cached configuration so the next lookup re-reads the YAML files."""
    _cached_config.cache_clear()


def get_threshold(section: str, key: str, default: T) -> T:
    """
    Read one threshold, falling back to ``default``.

    Values that are not numbers are logged and ignored. The result is
    coerced to the type of ``default``.
    """
    section_cfg = _cached_config().get(section)
    if not isinstance(section_cfg, dict) or key not in section_cfg:
        return default
    value = section_cfg[key]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        logger.warning("Threshold %s.%s must be a number, got %r", section, key, value)
        return default
    return type(default)(value)
