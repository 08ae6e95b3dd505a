"""Unit template definitions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Tuple

UnitSide = Literal["hero", "enemy"]


@dataclass(slots=True)
class UnitDef:
    """Template a hero or enemy instance is created from."""

    id: str
    name: str
    side: UnitSide
    hp: float
    damage: float
    speed: float
    defense: float
    crit_chance: float
    crit_damage: float
    evasion: float
    accuracy: float
    penetration: float = 0.0
    lifesteal: float = 0.0
    ability_ids: Tuple[str, ...] = ()
    tags: Tuple[str, ...] = ()
