"""Loading engine settings from JSON."""
from __future__ import annotations

import logging
from dataclasses import fields
from pathlib import Path

from gridbattle.core.config import BattleConfig
from gridbattle.data.errors import DataLoadError, DataValidationError
from gridbattle.data.json_loader import load_json_object

logger = logging.getLogger(__name__)

# Settings whose value must be at least one.
_POSITIVE = {
    "grid_width",
    "grid_height",
    "cooldown_divisor",
    "cooldown_threshold",
    "max_ticks",
    "wave_pause_interval",
    "consistency_check_interval",
}


def load_battle_config(path: Path | str | None = None) -> BattleConfig:
    """Read a settings file, falling back to defaults when it does not exist."""
    if path is None:
        return BattleConfig()
    config_path = Path(path)
    try:
        raw = load_json_object(config_path)
    except DataLoadError:
        if config_path.exists():
            raise
        logger.debug("No settings file at %s, using defaults", config_path)
        return BattleConfig()

    known = {f.name: f for f in fields(BattleConfig)}
    unknown = sorted(set(raw) - set(known))
    if unknown:
        raise DataValidationError(f"Unknown settings: {unknown}", source=config_path)

    values: dict[str, object] = {}
    for key, value in raw.items():
        expects_int = known[key].type in (int, "int")
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DataValidationError(f"Setting '{key}' must be a number.", source=config_path)
        if expects_int and not isinstance(value, int):
            raise DataValidationError(f"Setting '{key}' must be an integer.", source=config_path)
        if value < (1 if key in _POSITIVE else 0):
            raise DataValidationError(f"Setting '{key}' is out of range.", source=config_path)
        values[key] = value if expects_int else float(value)
    return BattleConfig(**values)
