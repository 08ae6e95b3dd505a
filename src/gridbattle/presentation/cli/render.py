"""Text rendering of battle logs and boards."""
from __future__ import annotations

import os
from typing import Dict, List

from gridbattle.core.config import BattleConfig
from gridbattle.domain.battle_models import BattleState
from gridbattle.domain.events import (
    AbilityUsedEvent,
    AttackEvent,
    BattleEvent,
    BattleStartEvent,
    CriticalHitEvent,
    DamageEvent,
    DeathEvent,
    DefeatEvent,
    EvadedEvent,
    HealEvent,
    MoveEvent,
    StatusAppliedEvent,
    StatusExpiredEvent,
    TickEvent,
    VictoryEvent,
    WaveCompleteEvent,
    WaveStartEvent,
    WaveTransitionEvent,
)
from gridbattle.domain.grid import GridPosition


def debug_enabled() -> bool:
    """Return True only when GRIDBATTLE_DEBUG is explicitly set to '1'."""
    return os.getenv("GRIDBATTLE_DEBUG") == "1"


def _cell(pos: GridPosition) -> str:
    return f"({pos.row},{pos.col})"


def format_event(event: BattleEvent, names: Dict[str, str], *, debug: bool = False) -> str | None:
    """One log line for ``event``; tick lines only appear in debug mode."""

    def name(unit_id: str | None) -> str:
        if unit_id is None:
            return "?"
        return names.get(unit_id, unit_id)

    prefix = f"[{event.tick:>4}] "
    if isinstance(event, BattleStartEvent):
        return f"{prefix}Battle starts: {len(event.heroes)} heroes against wave 1 of {event.total_waves}."
    if isinstance(event, TickEvent):
        if not debug:
            return None
        gauges = ", ".join(f"{name(s.unit_id)} {s.cooldown:.0f}" for s in event.cooldowns)
        return f"{prefix}tick: {gauges}"
    if isinstance(event, MoveEvent):
        return f"{prefix}{name(event.unit_id)} moves {_cell(event.from_position)} -> {_cell(event.to_position)}."
    if isinstance(event, AttackEvent):
        return f"{prefix}{name(event.attacker_id)} attacks {name(event.target_id)}."
    if isinstance(event, CriticalHitEvent):
        return f"{prefix}Critical hit! (x{event.multiplier:g})"
    if isinstance(event, EvadedEvent):
        return f"{prefix}{name(event.target_id)} evades {name(event.attacker_id)}."
    if isinstance(event, AbilityUsedEvent):
        targets = ", ".join(name(t) for t in event.target_ids)
        return f"{prefix}{name(event.caster_id)} uses {event.ability_name} on {targets}."
    if isinstance(event, DamageEvent):
        return f"{prefix}{name(event.target_id)} takes {event.amount:g} damage (HP now {event.remaining_hp:g})."
    if isinstance(event, HealEvent):
        return f"{prefix}{name(event.target_id)} recovers {event.amount:g} HP (HP now {event.new_hp:g})."
    if isinstance(event, StatusAppliedEvent):
        return f"{prefix}{name(event.target_id)} is affected by {event.status_type.value} for {event.duration} ticks."
    if isinstance(event, StatusExpiredEvent):
        return f"{prefix}{event.status_type.value} wears off {name(event.target_id)}."
    if isinstance(event, DeathEvent):
        return f"{prefix}{name(event.unit_id)} falls."
    if isinstance(event, WaveCompleteEvent):
        return f"{prefix}Wave {event.wave_number} of {event.total_waves} cleared."
    if isinstance(event, WaveTransitionEvent):
        return f"{prefix}The party advances toward wave {event.wave_number}."
    if isinstance(event, WaveStartEvent):
        return f"{prefix}Wave {event.wave_number} of {event.total_waves}: {len(event.spawns)} enemies arrive."
    if isinstance(event, VictoryEvent):
        return f"{prefix}Victory ({event.reason})."
    if isinstance(event, DefeatEvent):
        return f"{prefix}Defeat ({event.reason})."
    return f"{prefix}{event.type.value}"


def render_log(state: BattleState, *, debug: bool | None = None) -> List[str]:
    show_ticks = debug_enabled() if debug is None else debug
    names = {unit.id: unit.name for unit in state.units()}
    lines = []
    for event in state.events:
        line = format_event(event, names, debug=show_ticks)
        if line is not None:
            lines.append(line)
    return lines


def render_board(state: BattleState, config: BattleConfig) -> List[str]:
    """Final positions: H/E for living heroes/enemies, '.' for empty cells."""
    board = [["." for _ in range(config.grid_width)] for _ in range(config.grid_height)]
    for unit in state.combatants():
        pos = unit.position
        if 0 <= pos.row < config.grid_height and 0 <= pos.col < config.grid_width:
            board[pos.row][pos.col] = "H" if unit.is_hero else "E"
    return [" ".join(row) for row in board]


def render_summary(state: BattleState) -> List[str]:
    lines = [f"Winner: {state.winner or 'none'} after {state.tick} ticks (wave {state.current_wave}/{state.total_waves})"]
    for unit in state.units():
        if not unit.is_hero and not state.is_deployed(unit):
            continue
        status = f"{unit.stats.hp:g}/{unit.stats.max_hp:g}" if unit.is_alive else "DOWN"
        side = "hero " if unit.is_hero else "enemy"
        lines.append(f"  {side} {unit.name:<20} {status}")
    return lines


def render_heading_lines(title: str) -> List[str]:
    """A blank line and a consistent section heading."""
    return ["", f"=== {title} ==="]
