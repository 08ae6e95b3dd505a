"""Deterministic enemy stat scaling by stage level."""
from __future__ import annotations

import math

from gridbattle.domain.entities import UnitStats

# Linear growth up to the final stage, compounded by a mild exponential term.
FINAL_STAGE = 512
LINEAR_GROWTH = 5.0
EXPONENTIAL_BASE = 1.003
# Defense and speed take only a share of the growth.
DEFENSE_SHARE = 0.5
SPEED_SHARE = 0.2


def stage_multiplier(stage_level: int) -> float:
    if stage_level <= 0:
        return 1.0
    linear = 1 + (stage_level / FINAL_STAGE) * LINEAR_GROWTH
    return linear * EXPONENTIAL_BASE ** (stage_level - 1)


def scale_enemy_stats(base: UnitStats, *, stage_level: int) -> UnitStats:
    """Return a scaled copy of ``base``; level 0 returns an unmodified copy."""
    scaled = base.copy()
    if stage_level <= 0:
        return scaled
    factor = stage_multiplier(stage_level)
    scaled.max_hp = float(math.floor(base.max_hp * factor))
    scaled.hp = float(math.floor(base.hp * factor))
    scaled.damage = float(math.floor(base.damage * factor))
    scaled.defense = float(math.floor(base.defense * (1 + (factor - 1) * DEFENSE_SHARE)))
    scaled.speed = float(math.floor(base.speed * (1 + (factor - 1) * SPEED_SHARE)))
    return scaled
