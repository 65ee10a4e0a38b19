"""
YAML → ModelTables loader.

Loads model constants from model.yaml (bundled with the package) and
optionally merges user overrides from ~/.onerm/model.yaml.

Usage:
    from onerm.core.engine.config_loader import load_model_tables
    tables = load_model_tables()
    k = tables.lift_constants[LiftType.SQUAT]

If the bundled YAML cannot be parsed, the Python defaults from config.py
are used (no crash).  If the user override file exists but has parse
errors or invalid values, a warning is logged and the file is ignored.
"""

from __future__ import annotations

import logging
import math
import os
from pathlib import Path
from typing import Any

import yaml

from .. import config
from ..errors import ModelConfigError
from ..models import EnduranceProfile, LiftType, ModelTables, RepSpeed

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file.

    Raises:
        ModelConfigError: if the file cannot be read or is not a mapping
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
    except (OSError, yaml.YAMLError) as e:
        raise ModelConfigError(f"cannot read {path}: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ModelConfigError(f"{path}: top level must be a mapping")
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


def _section(raw: dict, name: str, enum_cls) -> dict:
    """Return section *name* keyed by enum member; the key set must match exactly."""
    section = raw.get(name)
    if not isinstance(section, dict):
        raise ModelConfigError(f"section '{name}' is missing or not a mapping")
    expected = set(enum_cls.values())
    unknown = set(map(str, section)) - expected
    missing = expected - set(map(str, section))
    if unknown:
        raise ModelConfigError(f"section '{name}' has unknown keys: {sorted(unknown)}")
    if missing:
        raise ModelConfigError(f"section '{name}' is missing keys: {sorted(missing)}")
    return {enum_cls(str(k)): v for k, v in section.items()}


def _positive_float(section: str, key, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ModelConfigError(f"{section}.{key.value} must be a number, got {value!r}")
    v = float(value)
    if not math.isfinite(v) or v <= 0:
        raise ModelConfigError(f"{section}.{key.value} must be strictly positive, got {value!r}")
    return v


def _positive_int(section: str, key, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ModelConfigError(f"{section}.{key.value} must be a positive integer, got {value!r}")
    return value


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def default_model_config() -> dict[str, Any]:
    """Return the Python defaults from config.py in the YAML layout."""
    return {
        "lift_constants": dict(config.LIFT_CONSTANTS),
        "rep_limits": dict(config.REP_LIMITS),
        "endurance_factors": dict(config.ENDURANCE_FACTORS),
        "velocity_multipliers": dict(config.VELOCITY_MULTIPLIERS),
    }


def build_model_tables(raw: dict[str, Any]) -> ModelTables:
    """
    Validate a config dict and turn it into immutable ModelTables.

    Raises:
        ModelConfigError: on missing/unknown keys or non-positive values
    """
    lifts = _section(raw, "lift_constants", LiftType)
    limits = _section(raw, "rep_limits", LiftType)
    endurance = _section(raw, "endurance_factors", EnduranceProfile)
    velocity = _section(raw, "velocity_multipliers", RepSpeed)
    return ModelTables(
        lift_constants={k: _positive_float("lift_constants", k, v) for k, v in lifts.items()},
        rep_limits={k: _positive_int("rep_limits", k, v) for k, v in limits.items()},
        endurance_factors={
            k: _positive_float("endurance_factors", k, v) for k, v in endurance.items()
        },
        velocity_multipliers={
            k: _positive_float("velocity_multipliers", k, v) for k, v in velocity.items()
        },
    )


def default_model_tables() -> ModelTables:
    """ModelTables built from config.py only (no YAML)."""
    return build_model_tables(default_model_config())


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled model.yaml, or None if not found."""
    # config_loader.py lives at src/onerm/core/engine/config_loader.py
    candidate = Path(__file__).parent.parent.parent / "model.yaml"
    return candidate if candidate.exists() else None


def get_user_config_dir() -> Path:
    """Return the per-user config directory (ONERM_HOME or ~/.onerm)."""
    override = os.environ.get("ONERM_HOME")
    if override:
        return Path(override).expanduser()
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / ".onerm"


def get_user_yaml_path() -> Path | None:
    """Return the user model.yaml if it exists, else None."""
    p = get_user_config_dir() / "model.yaml"
    return p if p.exists() else None


def load_model_config() -> dict[str, Any]:
    """
    Load and merge model configuration from YAML sources.

    Load order (later overrides earlier):
    1. Python defaults from config.py
    2. Bundled src/onerm/model.yaml
    3. User override at ~/.onerm/model.yaml

    A source that fails to load or validate is skipped with a warning.
    """
    cfg = default_model_config()

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        try:
            merged = _deep_merge(cfg, _load_yaml_file(bundled))
            build_model_tables(merged)
            cfg = merged
        except ModelConfigError as e:
            logger.warning("Bundled model tables unusable (%s); using defaults", e)

    user = get_user_yaml_path()
    if user is not None:
        try:
            merged = _deep_merge(cfg, _load_yaml_file(user))
            build_model_tables(merged)
            cfg = merged
            logger.info("Applied user model overrides from %s", user)
        except ModelConfigError as e:
            logger.warning("Ignoring user model overrides: %s", e)

    return cfg


def load_model_tables() -> ModelTables:
    """Load, merge and validate the active model tables."""
    return build_model_tables(load_model_config())
