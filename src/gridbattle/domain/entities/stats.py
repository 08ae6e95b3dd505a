"""Stat models for runtime units."""
from __future__ import annotations

from dataclasses import dataclass, fields, replace


@dataclass(slots=True)
class UnitStats:
    """Combat stats; rates and chances are fractions in [0, 1]."""

    hp: float
    max_hp: float
    damage: float
    speed: float
    defense: float
    crit_chance: float
    crit_damage: float
    evasion: float
    accuracy: float
    penetration: float = 0.0
    lifesteal: float = 0.0

    def copy(self) -> "UnitStats":
        return replace(self)


STAT_NAMES = tuple(f.name for f in fields(UnitStats))
# Stats a status modifier may touch; hp is owned by damage and healing only.
MODIFIABLE_STATS = tuple(name for name in STAT_NAMES if name != "hp")
