"""Battle domain models."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Tuple

from gridbattle.core.types import Side
from gridbattle.domain.defs import AbilityDef, AbilityType
from gridbattle.domain.entities import UnitStats
from gridbattle.domain.event_log import EventLog
from gridbattle.domain.grid import GridPosition
from gridbattle.domain.status_effects import StatusEffect, compute_stats


@dataclass(slots=True)
class BattleUnit:
    """Represents an individual participant in battle."""

    id: str
    name: str
    is_hero: bool
    position: GridPosition
    base_stats: UnitStats
    stats: UnitStats
    cooldown_rate: float
    abilities: Tuple[AbilityDef, ...] = ()
    ability_cooldowns: Dict[str, int] = field(default_factory=dict)
    status_effects: List[StatusEffect] = field(default_factory=list)
    cooldown: float = 0.0
    is_alive: bool = True
    wave: int | None = None

    @property
    def side(self) -> Side:
        return "heroes" if self.is_hero else "enemies"

    def is_ready(self, ability: AbilityDef) -> bool:
        return self.ability_cooldowns.get(ability.id, 0) == 0

    def ready_abilities(self, ability_type: AbilityType) -> List[AbilityDef]:
        return [a for a in self.abilities if a.type is ability_type and self.is_ready(a)]

    def effective_range(self) -> int:
        """Longest reach among ready offensive abilities; melee otherwise."""
        ranges = [a.range for a in self.ready_abilities(AbilityType.OFFENSIVE)]
        return max(ranges, default=1)

    def recalculate_stats(self, cooldown_divisor: float) -> None:
        self.stats = compute_stats(self.base_stats, self.stats.hp, self.status_effects)
        self.cooldown_rate = self.stats.speed / cooldown_divisor

    def finish_action(self, used: AbilityDef | None = None) -> None:
        """Reset the gauge and tick ability cooldowns down by one use."""
        self.cooldown = 0.0
        for ability_id, remaining in self.ability_cooldowns.items():
            if remaining > 0:
                self.ability_cooldowns[ability_id] = remaining - 1
        if used is not None:
            self.ability_cooldowns[used.id] = used.cooldown


@dataclass(slots=True)
class BattleState:
    """Everything a battle produced; the event log is the authoritative record."""

    heroes: List[BattleUnit]
    enemies: List[BattleUnit]
    events: EventLog = field(default_factory=EventLog)
    tick: int = 0
    winner: Side | None = None
    current_wave: int = 1
    total_waves: int = 1
    remaining_enemy_waves: List[List[str]] = field(default_factory=list)
    transition_in_progress: bool = False
    is_over: bool = False

    def units(self) -> Iterator[BattleUnit]:
        yield from self.heroes
        yield from self.enemies

    def get_unit(self, unit_id: str) -> BattleUnit:
        for unit in self.units():
            if unit.id == unit_id:
                return unit
        raise KeyError(unit_id)

    def is_deployed(self, unit: BattleUnit) -> bool:
        """Heroes always; enemies once their wave has entered the board."""
        return unit.is_hero or (unit.wave or 1) <= self.current_wave

    def combatants(self) -> List[BattleUnit]:
        """Living, deployed units in roster order (heroes first)."""
        return [unit for unit in self.units() if unit.is_alive and self.is_deployed(unit)]

    def living(self, side: Side) -> List[BattleUnit]:
        roster = self.heroes if side == "heroes" else self.enemies
        return [unit for unit in roster if unit.is_alive and self.is_deployed(unit)]
