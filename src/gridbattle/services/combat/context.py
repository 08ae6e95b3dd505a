"""Shared mutable state for one running battle."""
from __future__ import annotations

import logging
from typing import List

from gridbattle.core.config import BattleConfig
from gridbattle.core.rng import RNG
from gridbattle.core.types import DamageSource, HealSource, Outcome, Side
from gridbattle.domain.battle_models import BattleState, BattleUnit
from gridbattle.domain.defs import StatModifier, StatusEffectType, category_for
from gridbattle.domain.events import (
    BattleEvent,
    DamageEvent,
    DeathEvent,
    DefeatEvent,
    HealEvent,
    StatusAppliedEvent,
    VictoryEvent,
)
from gridbattle.domain.grid import OccupancyGrid
from gridbattle.domain.status_effects import StatusEffect

logger = logging.getLogger(__name__)

DEFAULT_STATUS_DURATION = 3


class BattleContext:
    """
    Bundles the battle state with the grid, settings and random source.

    Every hp change and every status application in the engine goes
    through this class so the matching event is never forgotten.
    """

    def __init__(self, state: BattleState, grid: OccupancyGrid, config: BattleConfig, rng: RNG) -> None:
        self.state = state
        self.grid = grid
        self.config = config
        self.rng = rng
        self._status_counter = 0

    @property
    def tick(self) -> int:
        return self.state.tick

    def emit(self, event: BattleEvent) -> None:
        self.state.events.append(event)

    # -----------------------
    # Roster queries
    # -----------------------
    def allies(self, unit: BattleUnit) -> List[BattleUnit]:
        return self.state.living(unit.side)

    def opponents(self, unit: BattleUnit) -> List[BattleUnit]:
        return self.state.living("enemies" if unit.is_hero else "heroes")

    # -----------------------
    # Hit points
    # -----------------------
    def deal_damage(
        self,
        target: BattleUnit,
        amount: float,
        *,
        source: DamageSource,
        source_id: str | None = None,
        ability_id: str | None = None,
        status_type: StatusEffectType | None = None,
    ) -> None:
        target.stats.hp = max(0.0, target.stats.hp - amount)
        self.emit(
            DamageEvent(
                tick=self.tick,
                target_id=target.id,
                amount=amount,
                remaining_hp=target.stats.hp,
                source=source,
                source_id=source_id,
                ability_id=ability_id,
                status_type=status_type,
            )
        )

    def heal(self, unit: BattleUnit, amount: float, *, source: HealSource, source_id: str | None = None) -> float:
        """Restore up to ``amount`` hp; returns what was actually restored."""
        restored = min(amount, unit.stats.max_hp - unit.stats.hp)
        if restored <= 0:
            return 0.0
        unit.stats.hp += restored
        self.emit(
            HealEvent(
                tick=self.tick,
                target_id=unit.id,
                amount=restored,
                new_hp=unit.stats.hp,
                source=source,
                source_id=source_id,
            )
        )
        return restored

    def check_death(self, unit: BattleUnit, *, killer_id: str | None, cause: str) -> bool:
        """Retire ``unit`` if it has no hp left; returns True when it died now."""
        if not unit.is_alive or unit.stats.hp > 0:
            return False
        unit.is_alive = False
        unit.status_effects.clear()
        self.grid.vacate(unit.position)
        self.emit(DeathEvent(tick=self.tick, unit_id=unit.id, position=unit.position, killer_id=killer_id, cause=cause))
        logger.debug("Tick %d: %s died (%s)", self.tick, unit.id, cause)
        return True

    # -----------------------
    # Status effects
    # -----------------------
    def apply_status(
        self,
        target: BattleUnit,
        status_type: StatusEffectType,
        *,
        duration: int | None = None,
        damage_per_tick: float | None = None,
        modifier: StatModifier | None = None,
        value: float | None = None,
        source_id: str | None = None,
        ability_id: str | None = None,
    ) -> StatusEffect:
        self._status_counter += 1
        turns = duration if duration is not None else DEFAULT_STATUS_DURATION
        effect = StatusEffect(
            id=f"status-{self._status_counter}",
            status_type=status_type,
            category=category_for(status_type),
            duration=turns,
            remaining_duration=turns,
            damage_per_tick=damage_per_tick,
            stat=modifier.stat if modifier is not None else None,
            value=modifier.value if modifier is not None else value,
            is_percent=modifier.is_percent if modifier is not None else False,
            source_id=source_id,
            ability_id=ability_id,
        )
        target.status_effects.append(effect)
        target.recalculate_stats(self.config.cooldown_divisor)
        self.emit(
            StatusAppliedEvent(
                tick=self.tick,
                target_id=target.id,
                status_id=effect.id,
                status_type=status_type,
                category=effect.category,
                duration=turns,
                source_id=source_id,
            )
        )
        return effect

    # -----------------------
    # Outcome
    # -----------------------
    def remaining_hp(self, side: Side) -> float:
        """Total hp of a side's living units, waves still waiting included."""
        roster = self.state.heroes if side == "heroes" else self.state.enemies
        return sum((unit.stats.hp for unit in roster if unit.is_alive), 0.0)

    def finish(self, winner: Side, reason: Outcome) -> None:
        state = self.state
        state.winner = winner
        state.is_over = True
        state.transition_in_progress = False
        event_cls = VictoryEvent if winner == "heroes" else DefeatEvent
        self.emit(
            event_cls(
                tick=self.tick,
                reason=reason,
                hero_hp=self.remaining_hp("heroes"),
                enemy_hp=self.remaining_hp("enemies"),
            )
        )
        logger.info("Battle over at tick %d: %s win (%s)", self.tick, winner, reason)
