"""Abilities repository."""
from __future__ import annotations

from typing import Dict

from gridbattle.data.errors import DataValidationError
from gridbattle.data.repositories.base import RepositoryBase
from gridbattle.domain.defs import (
    AbilityDef,
    AbilityEffectDef,
    AbilityType,
    AoePattern,
    EffectType,
    StatModifier,
    StatusEffectType,
    TargetType,
)
from gridbattle.domain.entities import MODIFIABLE_STATS

_ABILITY_FIELDS = {"name", "type", "range", "cooldown", "effects"}
_EFFECT_FIELDS = {"type", "target_type"}
_EFFECT_OPTIONAL = {"value", "radius", "status_type", "duration", "damage_per_tick", "stat_modifier", "pattern"}
# Effects that are meaningless without a magnitude.
_VALUE_REQUIRED = {EffectType.DAMAGE, EffectType.HEAL, EffectType.LIFESTEAL}


class AbilitiesRepository(RepositoryBase[AbilityDef]):
    """Loads ability definitions and their effect lists."""

    def __init__(self, base_path=None) -> None:
        super().__init__("abilities.json", base_path)

    def _build(self, raw: dict[str, object]) -> Dict[str, AbilityDef]:
        abilities: Dict[str, AbilityDef] = {}
        for raw_id, payload in raw.items():
            context = f"ability '{raw_id}'"
            data = self._require_mapping(payload, context)
            self._assert_fields(data, required=_ABILITY_FIELDS, optional={"description"}, context=context)

            raw_effects = data["effects"]
            if not isinstance(raw_effects, list) or not raw_effects:
                raise DataValidationError(f"{context} effects must be a non-empty list.")

            abilities[raw_id] = AbilityDef(
                id=raw_id,
                name=self._require_str(data["name"], f"{context} name"),
                type=self._require_enum(data["type"], AbilityType, f"{context} type"),
                range=self._require_int(data["range"], f"{context} range", minimum=0),
                cooldown=self._require_int(data["cooldown"], f"{context} cooldown", minimum=0),
                effects=tuple(
                    self._parse_effect(entry, f"{context} effect #{index}")
                    for index, entry in enumerate(raw_effects)
                ),
                description=self._require_str(data.get("description", ""), f"{context} description"),
            )
        return abilities

    def _parse_effect(self, payload: object, context: str) -> AbilityEffectDef:
        data = self._require_mapping(payload, context)
        self._assert_fields(data, required=_EFFECT_FIELDS, optional=_EFFECT_OPTIONAL, context=context)

        effect_type = self._require_enum(data["type"], EffectType, f"{context} type")
        value = self._optional_number(data, "value", context)
        if effect_type in _VALUE_REQUIRED and value is None:
            raise DataValidationError(f"{context} of type '{effect_type.value}' requires a value.")

        status_type = None
        if "status_type" in data:
            status_type = self._require_enum(data["status_type"], StatusEffectType, f"{context} status_type")
        if effect_type is EffectType.STATUS and status_type is None:
            raise DataValidationError(f"{context} of type 'status' requires a status_type.")

        stat_modifier = None
        if "stat_modifier" in data:
            stat_modifier = self._parse_modifier(data["stat_modifier"], f"{context} stat_modifier")
        if effect_type is EffectType.BUFF and stat_modifier is None:
            raise DataValidationError(f"{context} of type 'buff' requires a stat_modifier.")

        pattern = None
        if "pattern" in data:
            pattern = self._require_enum(data["pattern"], AoePattern, f"{context} pattern")

        return AbilityEffectDef(
            type=effect_type,
            target_type=self._require_enum(data["target_type"], TargetType, f"{context} target_type"),
            value=value,
            radius=self._optional_int(data, "radius", context),
            status_type=status_type,
            duration=self._optional_int(data, "duration", context, minimum=1),
            damage_per_tick=self._optional_number(data, "damage_per_tick", context),
            stat_modifier=stat_modifier,
            pattern=pattern,
        )

    def _parse_modifier(self, payload: object, context: str) -> StatModifier:
        data = self._require_mapping(payload, context)
        self._assert_fields(data, required={"stat", "value"}, optional={"is_percent"}, context=context)
        stat = self._require_str(data["stat"], f"{context} stat")
        if stat not in MODIFIABLE_STATS:
            raise DataValidationError(f"{context} stat must be one of {sorted(MODIFIABLE_STATS)}, got '{stat}'.")
        return StatModifier(
            stat=stat,
            value=self._require_number(data["value"], f"{context} value"),
            is_percent=self._require_bool(data.get("is_percent", False), f"{context} is_percent"),
        )

    def _optional_number(self, data: dict[str, object], key: str, context: str) -> float | None:
        if key not in data:
            return None
        return self._require_number(data[key], f"{context} {key}", minimum=0)

    def _optional_int(self, data: dict[str, object], key: str, context: str, *, minimum: int = 0) -> int | None:
        if key not in data:
            return None
        return self._require_int(data[key], f"{context} {key}", minimum=minimum)

