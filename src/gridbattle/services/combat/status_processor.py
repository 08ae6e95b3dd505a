"""Start-of-tick status effect processing."""
from __future__ import annotations

from gridbattle.domain.battle_models import BattleUnit
from gridbattle.domain.defs import StatusEffectType
from gridbattle.domain.events import StatusExpiredEvent

from .context import BattleContext


def process_status_effects(ctx: BattleContext) -> None:
    """Run damage over time, regeneration and expiry for every living unit."""
    for unit in ctx.state.combatants():
        if not _apply_damage_over_time(ctx, unit):
            continue
        _apply_regeneration(ctx, unit)
        _expire_effects(ctx, unit)


def _apply_damage_over_time(ctx: BattleContext, unit: BattleUnit) -> bool:
    """Returns False when the unit died and needs no further processing."""
    for effect in list(unit.status_effects):
        if not effect.damage_per_tick or effect.damage_per_tick <= 0:
            continue
        ctx.deal_damage(
            unit,
            effect.damage_per_tick,
            source="dot",
            source_id=effect.source_id,
            ability_id=effect.ability_id,
            status_type=effect.status_type,
        )
        if ctx.check_death(unit, killer_id=effect.source_id, cause="dot"):
            return False
    return True


def _apply_regeneration(ctx: BattleContext, unit: BattleUnit) -> None:
    for effect in unit.status_effects:
        # A regeneration effect carrying a stat modifier is a plain buff.
        if effect.status_type is not StatusEffectType.REGENERATION or effect.stat is not None:
            continue
        if effect.value:
            ctx.heal(unit, effect.value, source="regeneration", source_id=effect.source_id)


def _expire_effects(ctx: BattleContext, unit: BattleUnit) -> None:
    expired = []
    for effect in unit.status_effects:
        effect.remaining_duration -= 1
        if effect.remaining_duration <= 0:
            expired.append(effect)
    if not expired:
        return
    for effect in expired:
        unit.status_effects.remove(effect)
        ctx.emit(
            StatusExpiredEvent(
                tick=ctx.tick,
                target_id=unit.id,
                status_id=effect.id,
                status_type=effect.status_type,
            )
        )
    unit.recalculate_stats(ctx.config.cooldown_divisor)
