"""Action selection and resolution for a unit whose gauge has filled."""
from __future__ import annotations

import logging
from typing import Dict, List, Set

from gridbattle.domain.battle_models import BattleUnit
from gridbattle.domain.defs import (
    AbilityDef,
    AbilityEffectDef,
    AbilityType,
    AoePattern,
    EffectType,
    StatusCategory,
    StatusEffectType,
    TargetType,
    category_for,
)
from gridbattle.domain.events import AbilityUsedEvent, AttackEvent, CriticalHitEvent, EvadedEvent
from gridbattle.domain.grid import GridPosition, chebyshev_distance

from .context import BattleContext
from .targeting import (
    cleave_targets,
    find_nearest,
    fireball_targets,
    nearest_in_range,
    step_toward,
    within_radius,
)

logger = logging.getLogger(__name__)

HEAL_THRESHOLD = 0.99
MAX_EVASION = 0.95
DEFENSE_FACTOR = 0.5
MIN_ATTACK_DAMAGE = 1.0
DEFAULT_AOE_RADIUS = 1
# Effects whose targets decide whether a cast happened at all.
_TARGETING_EFFECTS = (EffectType.DAMAGE, EffectType.STATUS, EffectType.HEAL, EffectType.BUFF)


def resolve_action(ctx: BattleContext, unit: BattleUnit, claimed: Set[GridPosition]) -> None:
    """Pick and carry out one action, then reset the unit's gauge."""
    used = _choose_and_act(ctx, unit, claimed)
    unit.finish_action(used)


def _choose_and_act(ctx: BattleContext, unit: BattleUnit, claimed: Set[GridPosition]) -> AbilityDef | None:
    allies = ctx.allies(unit)
    support = unit.ready_abilities(AbilityType.SUPPORT)

    if any(ally.stats.hp < ally.stats.max_hp * HEAL_THRESHOLD for ally in allies):
        for ability in support:
            if ability.has_effect(EffectType.HEAL) and cast_ability(ctx, unit, ability):
                return ability

    for ability in support:
        if ability.has_effect(EffectType.HEAL):
            continue
        if _still_active(ctx, unit, ability):
            continue
        if cast_ability(ctx, unit, ability):
            return ability

    target = find_nearest(unit.position, ctx.opponents(unit))
    if target is None:
        return None
    if chebyshev_distance(unit.position, target.position) > unit.effective_range():
        step_toward(ctx, unit, target, claimed)
        return None

    for ability in unit.ready_abilities(AbilityType.OFFENSIVE):
        if cast_ability(ctx, unit, ability):
            return ability

    basic_attack(ctx, unit, target)
    return None


def _still_active(ctx: BattleContext, caster: BattleUnit, ability: AbilityDef) -> bool:
    """True while a status this caster applied with ``ability`` sits on any living unit."""
    return any(
        effect.ability_id == ability.id and effect.source_id == caster.id
        for unit in ctx.state.combatants()
        for effect in unit.status_effects
    )


# -----------------------
# Abilities
# -----------------------
def effect_targets(ctx: BattleContext, caster: BattleUnit, ability: AbilityDef, effect: AbilityEffectDef) -> List[BattleUnit]:
    """Units one effect of ``ability`` would touch if cast right now."""
    if effect.type is EffectType.LIFESTEAL or effect.target_type is TargetType.SELF:
        return [caster]
    if effect.type is EffectType.HEAL:
        return [ally for ally in ctx.allies(caster) if ally.stats.hp < ally.stats.max_hp]
    if effect.type is EffectType.BUFF:
        return ctx.allies(caster)

    opponents = ctx.opponents(caster)
    if effect.target_type is TargetType.ENEMY:
        target = nearest_in_range(caster, opponents, ability.range)
        return [target] if target is not None else []
    if effect.pattern is AoePattern.CLEAVE:
        return cleave_targets(caster, opponents)
    if effect.pattern is AoePattern.FIREBALL:
        return fireball_targets(caster, opponents, ability.range)
    anchor = nearest_in_range(caster, opponents, ability.range)
    if anchor is None:
        return []
    radius = effect.radius if effect.radius is not None else DEFAULT_AOE_RADIUS
    return within_radius(anchor.position, opponents, radius)


def cast_ability(ctx: BattleContext, caster: BattleUnit, ability: AbilityDef) -> bool:
    """
    Resolve ``ability`` if it would affect anyone.

    Abilities that deal damage need a damage target; anything else needs a
    target for at least one of its effects. Nothing is emitted when the
    cast is refused, and the caller keeps looking for another action.
    """

    targets: Dict[int, List[BattleUnit]] = {
        index: effect_targets(ctx, caster, ability, effect) for index, effect in enumerate(ability.effects)
    }
    deciding = [
        index
        for index, effect in enumerate(ability.effects)
        if effect.type is EffectType.DAMAGE or not ability.has_effect(EffectType.DAMAGE)
    ]
    if not any(targets[index] for index in deciding if ability.effects[index].type in _TARGETING_EFFECTS):
        return False

    affected: List[str] = []
    for index, effect in enumerate(ability.effects):
        if effect.type is EffectType.LIFESTEAL:
            continue
        for unit in targets[index]:
            if unit.id not in affected:
                affected.append(unit.id)
    ctx.emit(
        AbilityUsedEvent(
            tick=ctx.tick,
            caster_id=caster.id,
            ability_id=ability.id,
            ability_name=ability.name,
            target_ids=tuple(affected),
        )
    )
    logger.debug("Tick %d: %s uses %s on %s", ctx.tick, caster.id, ability.id, affected)

    damage_dealt = 0.0
    for index, effect in enumerate(ability.effects):
        damage_dealt += _apply_effect(ctx, caster, ability, effect, targets[index], damage_dealt)
    return True


def _apply_effect(
    ctx: BattleContext,
    caster: BattleUnit,
    ability: AbilityDef,
    effect: AbilityEffectDef,
    targets: List[BattleUnit],
    damage_so_far: float,
) -> float:
    """Apply one effect; returns the damage it dealt."""
    if effect.type is EffectType.DAMAGE:
        dealt = 0.0
        for target in targets:
            if not target.is_alive:
                continue
            amount = effect.value or 0.0
            ctx.deal_damage(target, amount, source="ability", source_id=caster.id, ability_id=ability.id)
            dealt += amount
            ctx.check_death(target, killer_id=caster.id, cause=ability.id)
        return dealt

    if effect.type is EffectType.LIFESTEAL:
        if damage_so_far > 0 and caster.is_alive:
            ctx.heal(caster, damage_so_far * (effect.value or 0.0), source="lifesteal", source_id=caster.id)
        return 0.0

    if effect.type is EffectType.HEAL:
        for target in targets:
            if target.is_alive:
                ctx.heal(target, effect.value or 0.0, source="ability", source_id=caster.id)
        return 0.0

    if effect.type is EffectType.BUFF:
        for target in targets:
            if target.is_alive:
                ctx.apply_status(
                    target,
                    StatusEffectType.SHIELD,
                    duration=effect.duration,
                    modifier=effect.stat_modifier,
                    source_id=caster.id,
                    ability_id=ability.id,
                )
        return 0.0

    if effect.type is EffectType.STATUS:
        assert effect.status_type is not None, f"Ability '{ability.id}' status effect has no status_type."
        damage_per_tick = effect.damage_per_tick
        if damage_per_tick is None and category_for(effect.status_type) is StatusCategory.DOT:
            damage_per_tick = effect.value
        for target in targets:
            if target.is_alive:
                ctx.apply_status(
                    target,
                    effect.status_type,
                    duration=effect.duration,
                    damage_per_tick=damage_per_tick,
                    modifier=effect.stat_modifier,
                    value=effect.value,
                    source_id=caster.id,
                    ability_id=ability.id,
                )
        return 0.0

    raise ValueError(f"Unhandled effect type: {effect.type!r}")


# -----------------------
# Basic attack
# -----------------------
def basic_attack(ctx: BattleContext, attacker: BattleUnit, target: BattleUnit) -> None:
    """Evasion roll, crit roll, mitigated damage, lifesteal, death check."""
    evasion = max(0.0, min(MAX_EVASION, target.stats.evasion - (1 - attacker.stats.accuracy)))
    if ctx.rng.roll(evasion):
        ctx.emit(EvadedEvent(tick=ctx.tick, attacker_id=attacker.id, target_id=target.id))
        return

    is_crit = ctx.rng.roll(attacker.stats.crit_chance)
    raw = attacker.stats.damage * (attacker.stats.crit_damage if is_crit else 1)
    mitigation = target.stats.defense * (1 - attacker.stats.penetration) * DEFENSE_FACTOR
    damage = max(MIN_ATTACK_DAMAGE, raw - mitigation)

    ctx.emit(AttackEvent(tick=ctx.tick, attacker_id=attacker.id, target_id=target.id, damage=damage, is_crit=is_crit))
    if is_crit:
        ctx.emit(
            CriticalHitEvent(
                tick=ctx.tick,
                attacker_id=attacker.id,
                target_id=target.id,
                multiplier=attacker.stats.crit_damage,
            )
        )
    ctx.deal_damage(target, damage, source="attack", source_id=attacker.id)
    if attacker.stats.lifesteal > 0:
        ctx.heal(attacker, damage * attacker.stats.lifesteal, source="lifesteal", source_id=attacker.id)
    ctx.check_death(target, killer_id=attacker.id, cause="attack")
