"""Ability definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .status_def import StatusEffectType


class AbilityType(str, Enum):
    OFFENSIVE = "offensive"
    SUPPORT = "support"


class EffectType(str, Enum):
    DAMAGE = "damage"
    HEAL = "heal"
    BUFF = "buff"
    STATUS = "status"
    LIFESTEAL = "lifesteal"


class TargetType(str, Enum):
    ENEMY = "enemy"
    AOE = "aoe"
    SELF = "self"


class AoePattern(str, Enum):
    """Named area shapes that replace the plain radius rule."""

    CLEAVE = "cleave"
    FIREBALL = "fireball"


@dataclass(frozen=True, slots=True)
class StatModifier:
    stat: str
    value: float
    is_percent: bool = False


@dataclass(frozen=True, slots=True)
class AbilityEffectDef:
    """One effect of an ability; optional fields depend on ``type``."""

    type: EffectType
    target_type: TargetType
    value: float | None = None
    radius: int | None = None
    status_type: StatusEffectType | None = None
    duration: int | None = None
    damage_per_tick: float | None = None
    stat_modifier: StatModifier | None = None
    pattern: AoePattern | None = None


@dataclass(frozen=True, slots=True)
class AbilityDef:
    """Describes an ability a unit can use in combat."""

    id: str
    name: str
    type: AbilityType
    range: int
    cooldown: int
    effects: Tuple[AbilityEffectDef, ...]
    description: str = ""

    def has_effect(self, effect_type: EffectType) -> bool:
        return any(effect.type is effect_type for effect in self.effects)
