"""Enemy wave cadence, hero scrolling and wave spawn-in."""
from __future__ import annotations

import logging
from typing import List, Set

from gridbattle.core.config import BattleConfig
from gridbattle.domain.battle_models import BattleUnit
from gridbattle.domain.events import (
    DeathEvent,
    PositionChange,
    WaveCompleteEvent,
    WaveStartEvent,
    WaveTransitionEvent,
)
from gridbattle.domain.grid import GridPosition

from .context import BattleContext

logger = logging.getLogger(__name__)

# Two formation columns per side, six rows starting at row 2.
SLOTS_PER_COLUMN_PAIR = 12
FIRST_SLOT_ROW = 2


def _slot(index: int, config: BattleConfig) -> tuple[int, int]:
    """Row and column-offset of formation slot ``index``."""
    if index >= SLOTS_PER_COLUMN_PAIR:
        overflow = index - SLOTS_PER_COLUMN_PAIR
        return (overflow // 2) % config.grid_height, overflow % 2
    return min(config.grid_height - 1, FIRST_SLOT_ROW + index // 2), index % 2


def hero_slot(index: int, config: BattleConfig) -> GridPosition:
    row, offset = _slot(index, config)
    return GridPosition(row, offset)


def enemy_slot(index: int, config: BattleConfig) -> GridPosition:
    row, offset = _slot(index, config)
    return GridPosition(row, config.grid_width - 1 - offset)


def announces_checkpoint(cleared_wave: int, total_waves: int, interval: int) -> bool:
    """Every ``interval``-th wave, and the wave before the last, offer a pause."""
    return cleared_wave % interval == 0 or cleared_wave == total_waves - 1


def handle_enemy_wipe(ctx: BattleContext, *, pause_at_checkpoints: bool) -> None:
    """Advance to the next wave, pause before it, or end the battle."""
    state = ctx.state
    if not state.remaining_enemy_waves:
        ctx.finish("heroes", "elimination")
        return

    cleared = state.current_wave
    if announces_checkpoint(cleared, state.total_waves, ctx.config.wave_pause_interval):
        ctx.emit(
            WaveCompleteEvent(
                tick=ctx.tick,
                wave_number=cleared,
                next_wave_number=cleared + 1,
                total_waves=state.total_waves,
            )
        )
        if pause_at_checkpoints:
            state.transition_in_progress = True
            logger.debug("Paused after wave %d of %d", cleared, state.total_waves)
            return
    spawn_next_wave(ctx)


def spawn_next_wave(ctx: BattleContext) -> None:
    state = ctx.state
    wave_ids = state.remaining_enemy_waves.pop(0)
    state.current_wave += 1
    state.transition_in_progress = False

    _clear_remnants(ctx)
    transitions = _scroll_heroes(ctx)
    ctx.emit(
        WaveTransitionEvent(
            tick=ctx.tick,
            wave_number=state.current_wave,
            scroll_distance=ctx.config.scroll_distance,
            hero_transitions=tuple(transitions),
        )
    )

    incoming = [state.get_unit(unit_id) for unit_id in wave_ids]
    spawns = _place_wave(ctx, incoming)
    ctx.emit(
        WaveStartEvent(
            tick=ctx.tick,
            wave_number=state.current_wave,
            total_waves=state.total_waves,
            spawns=tuple(spawns),
        )
    )
    logger.debug("Wave %d of %d entered with %d units", state.current_wave, state.total_waves, len(spawns))


def _clear_remnants(ctx: BattleContext) -> None:
    for unit in ctx.state.enemies:
        if unit.is_alive and unit.wave is not None and unit.wave < ctx.state.current_wave:
            unit.is_alive = False
            unit.status_effects.clear()
            ctx.grid.vacate(unit.position)
            ctx.emit(DeathEvent(tick=ctx.tick, unit_id=unit.id, position=unit.position, cause="wave_cleared"))
            logger.debug("Removed %s left over from wave %d", unit.id, unit.wave)


def _scroll_heroes(ctx: BattleContext) -> List[PositionChange]:
    """Shift heroes toward column 0, left-most first, never onto a claimed cell."""
    shift = ctx.config.scroll_distance + 1
    claimed: Set[GridPosition] = set()
    transitions: List[PositionChange] = []
    heroes = sorted(ctx.state.living("heroes"), key=lambda hero: hero.position.col)
    for hero in heroes:
        origin = hero.position
        col = max(0, origin.col - shift)
        while col < origin.col:
            candidate = GridPosition(origin.row, col)
            if candidate not in claimed and ctx.grid.is_free(candidate):
                break
            col += 1
        destination = GridPosition(origin.row, min(col, origin.col))
        if destination != origin and not ctx.grid.move(hero.id, origin, destination):
            destination = origin
        hero.position = destination
        claimed.add(destination)
        transitions.append(PositionChange(unit_id=hero.id, from_position=origin, to_position=destination))
    return transitions


def _place_wave(ctx: BattleContext, incoming: List[BattleUnit]) -> List[PositionChange]:
    config = ctx.config
    spawns: List[PositionChange] = []
    for index, unit in enumerate(incoming):
        slot = enemy_slot(index, config)
        position = ctx.grid.find_nearest_free(slot, config.spawn_search_radius)
        if position is None:
            position = ctx.grid.find_nearest_free(slot, max(config.grid_width, config.grid_height))
        if position is None:
            logger.warning("No free cell for %s in wave %d; it does not enter", unit.id, ctx.state.current_wave)
            unit.is_alive = False
            continue
        if position != slot:
            logger.warning("Slot %s taken, %s spawns at %s", slot.to_dict(), unit.id, position.to_dict())
        ctx.grid.occupy(position, unit.id)
        unit.position = position
        unit.cooldown = 0.0
        spawns.append(
            PositionChange(
                unit_id=unit.id,
                from_position=GridPosition(slot.row, config.offboard_col),
                to_position=position,
            )
        )
    return spawns
