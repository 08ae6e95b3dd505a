"""Domain definition exports."""

from .ability_def import (
    AbilityDef,
    AbilityEffectDef,
    AbilityType,
    AoePattern,
    EffectType,
    StatModifier,
    TargetType,
)
from .stage_def import StageDef
from .status_def import STATUS_CATEGORIES, StatusCategory, StatusEffectType, category_for
from .unit_def import UnitDef

__all__ = [
    "AbilityDef",
    "AbilityEffectDef",
    "AbilityType",
    "AoePattern",
    "EffectType",
    "STATUS_CATEGORIES",
    "StageDef",
    "StatModifier",
    "StatusCategory",
    "StatusEffectType",
    "TargetType",
    "UnitDef",
    "category_for",
]
