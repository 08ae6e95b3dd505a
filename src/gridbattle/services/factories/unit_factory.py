"""Factory for creating battle-ready unit instances from templates."""
from __future__ import annotations

from typing import Collection

from gridbattle.core.rng import RNG
from gridbattle.data.repositories import AbilitiesRepository, UnitsRepository
from gridbattle.domain.enemy_scaling import scale_enemy_stats
from gridbattle.domain.entities import UnitInstance, UnitStats
from gridbattle.services.errors import FactoryError

from .id_factory import make_instance_id


def create_unit_instance(
    template_id: str,
    *,
    units_repo: UnitsRepository,
    abilities_repo: AbilitiesRepository,
    rng: RNG,
    stage_level: int = 0,
    taken_ids: Collection[str] = (),
) -> UnitInstance:
    """Instantiate a unit; enemies are scaled to ``stage_level``."""
    try:
        unit_def = units_repo.get(template_id)
    except KeyError as exc:
        raise FactoryError(f"Unit '{template_id}' not found.") from exc

    abilities = []
    for ability_id in unit_def.ability_ids:
        try:
            abilities.append(abilities_repo.get(ability_id))
        except KeyError as exc:
            raise FactoryError(f"Ability '{ability_id}' not found for unit '{template_id}'.") from exc

    stats = UnitStats(
        hp=unit_def.hp,
        max_hp=unit_def.hp,
        damage=unit_def.damage,
        speed=unit_def.speed,
        defense=unit_def.defense,
        crit_chance=unit_def.crit_chance,
        crit_damage=unit_def.crit_damage,
        evasion=unit_def.evasion,
        accuracy=unit_def.accuracy,
        penetration=unit_def.penetration,
        lifesteal=unit_def.lifesteal,
    )
    if unit_def.side == "enemy":
        stats = scale_enemy_stats(stats, stage_level=stage_level)

    return UnitInstance(
        id=make_instance_id(template_id, rng, taken_ids),
        name=unit_def.name,
        stats=stats,
        abilities=tuple(abilities),
        tags=unit_def.tags,
        template_id=unit_def.id,
    )
