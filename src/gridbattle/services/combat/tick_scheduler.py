"""The tick loop that drives a battle from start to outcome."""
from __future__ import annotations

import logging
from typing import Dict, List, Sequence, Set, Union

from gridbattle.core.config import DEFAULT_CONFIG, BattleConfig
from gridbattle.core.rng import RNG
from gridbattle.domain.battle_models import BattleState, BattleUnit
from gridbattle.domain.defs import AbilityDef, EffectType, StatusCategory, StatusEffectType
from gridbattle.domain.entities import MODIFIABLE_STATS, UnitInstance
from gridbattle.domain.events import BattleStartEvent, CooldownSnapshot, TickEvent, UnitPlacement
from gridbattle.domain.grid import GridPosition, OccupancyGrid
from gridbattle.domain.status_effects import has_category
from gridbattle.services.errors import BattleSetupError

from .ability_resolver import resolve_action
from .context import BattleContext
from .status_processor import process_status_effects
from .wave_controller import enemy_slot, handle_enemy_wipe, hero_slot, spawn_next_wave

logger = logging.getLogger(__name__)

EnemyRoster = Union[Sequence[UnitInstance], Sequence[Sequence[UnitInstance]]]


class BattleEngine:
    """
    Deterministic grid battle between a hero roster and one or more enemy waves.

    ``run`` simulates until one side is eliminated or the tick ceiling is
    reached. With ``pause_at_checkpoints`` it also returns after a
    ``WaveComplete`` checkpoint, leaving ``state.transition_in_progress``
    set; ``resume`` spawns the next wave and carries on.
    """

    def __init__(
        self,
        heroes: Sequence[UnitInstance],
        enemies: EnemyRoster,
        *,
        rng: RNG,
        config: BattleConfig | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        waves = _normalise_waves(enemies)
        _validate_rosters(heroes, waves, self.config)

        hero_units = [_battle_unit(instance, self.config, is_hero=True) for instance in heroes]
        enemy_units: List[BattleUnit] = []
        for wave_number, wave in enumerate(waves, start=1):
            enemy_units.extend(
                _battle_unit(instance, self.config, is_hero=False, wave=wave_number) for instance in wave
            )

        state = BattleState(
            heroes=hero_units,
            enemies=enemy_units,
            total_waves=len(waves),
            remaining_enemy_waves=[[instance.id for instance in wave] for wave in waves[1:]],
        )
        grid = OccupancyGrid(self.config.grid_width, self.config.grid_height)
        self._ctx = BattleContext(state, grid, self.config, rng)
        self._pause_at_checkpoints = False
        self._place_starting_units(heroes, waves[0])

    @property
    def state(self) -> BattleState:
        return self._ctx.state

    @property
    def grid(self) -> OccupancyGrid:
        return self._ctx.grid

    # -----------------------
    # Public API
    # -----------------------
    def run(self, pause_at_checkpoints: bool = False) -> BattleState:
        self._pause_at_checkpoints = pause_at_checkpoints
        state = self.state
        if not state.events:
            self._ctx.emit(
                BattleStartEvent(
                    tick=0,
                    heroes=tuple(UnitPlacement(u.id, u.position) for u in state.heroes),
                    enemies=tuple(UnitPlacement(u.id, u.position) for u in state.combatants() if not u.is_hero),
                    total_waves=state.total_waves,
                )
            )
        if not state.transition_in_progress:
            self._loop()
        return state

    def resume(self) -> BattleState:
        """Leave a checkpoint: spawn the waiting wave and keep simulating."""
        state = self.state
        if state.is_over:
            return state
        if not state.transition_in_progress:
            raise RuntimeError("The battle is not paused at a wave checkpoint.")
        spawn_next_wave(self._ctx)
        self._loop()
        return state

    # -----------------------
    # Setup
    # -----------------------
    def _place_starting_units(self, heroes: Sequence[UnitInstance], first_wave: Sequence[UnitInstance]) -> None:
        grid = self.grid
        state = self.state
        # Explicit formation positions are honoured before any slot is handed out.
        for instance in list(heroes) + list(first_wave):
            if instance.position is not None:
                if not grid.occupy(instance.position, instance.id):
                    raise BattleSetupError(
                        f"Unit '{instance.id}' cannot start at {instance.position.to_dict()}: cell unavailable."
                    )
                state.get_unit(instance.id).position = instance.position

        for index, instance in enumerate(heroes):
            if instance.position is None:
                self._claim_slot(state.get_unit(instance.id), hero_slot(index, self.config))
        for index, instance in enumerate(first_wave):
            if instance.position is None:
                self._claim_slot(state.get_unit(instance.id), enemy_slot(index, self.config))

        # Later waves wait in the off-board column until they spawn.
        for wave_ids in state.remaining_enemy_waves:
            for index, unit_id in enumerate(wave_ids):
                row = enemy_slot(index, self.config).row
                state.get_unit(unit_id).position = GridPosition(row, self.config.offboard_col)

    def _claim_slot(self, unit: BattleUnit, slot: GridPosition) -> None:
        config = self.config
        position = self.grid.find_nearest_free(slot, max(config.grid_width, config.grid_height))
        if position is None:
            raise BattleSetupError(f"No free cell left for unit '{unit.id}'.")
        self.grid.occupy(position, unit.id)
        unit.position = position

    # -----------------------
    # Tick loop
    # -----------------------
    def _loop(self) -> None:
        state = self.state
        while not state.is_over and not state.transition_in_progress:
            if state.tick >= self.config.max_ticks:
                self._resolve_stalemate()
                return
            self._run_tick()

    def _run_tick(self) -> None:
        ctx = self._ctx
        state = self.state
        state.tick += 1

        process_status_effects(ctx)
        if self._side_eliminated():
            return
        self._settle_positions()

        threshold = self.config.cooldown_threshold
        combatants = state.combatants()
        for unit in combatants:
            unit.cooldown = min(threshold, unit.cooldown + unit.cooldown_rate)
        ctx.emit(
            TickEvent(
                tick=state.tick,
                cooldowns=tuple(CooldownSnapshot(u.id, u.cooldown, u.cooldown_rate) for u in combatants),
            )
        )

        # sorted() is stable, so equal gauges keep roster order.
        ready = sorted((u for u in combatants if u.cooldown >= threshold), key=lambda u: -u.cooldown)
        claimed: Set[GridPosition] = set()
        for unit in ready:
            if not unit.is_alive:
                continue
            if has_category(unit.status_effects, StatusCategory.CONTROL):
                unit.finish_action()
            else:
                resolve_action(ctx, unit, claimed)
            if self._side_eliminated():
                return

    def _side_eliminated(self) -> bool:
        """Handle a wiped side; True means the tick's action phase is over."""
        state = self.state
        if not state.living("heroes"):
            self._ctx.finish("enemies", "elimination")
            return True
        if not state.living("enemies"):
            handle_enemy_wipe(self._ctx, pause_at_checkpoints=self._pause_at_checkpoints)
            return True
        return False

    def _settle_positions(self) -> None:
        """Clamp stray positions every tick and reconcile the grid periodically."""
        grid = self.grid
        state = self.state
        living = {unit.id: unit for unit in state.combatants()}
        for unit in living.values():
            clamped = grid.clamp(unit.position)
            if clamped != unit.position:
                logger.warning("Tick %d: %s was off the board at %s", state.tick, unit.id, unit.position.to_dict())
                self._reseat(unit, clamped, living)

        if state.tick % self.config.consistency_check_interval != 0:
            return
        for position, unit_id in grid.items():
            if unit_id not in living:
                logger.warning("Tick %d: cell %s held by inactive unit %s", state.tick, position.to_dict(), unit_id)
                grid.vacate(position)
        for unit in living.values():
            if grid.occupant(unit.position) != unit.id:
                logger.warning(
                    "Tick %d: grid disagrees with %s at %s; restoring", state.tick, unit.id, unit.position.to_dict()
                )
                self._reseat(unit, unit.position, living)

    def _reseat(self, unit: BattleUnit, wanted: GridPosition, living: Dict[str, BattleUnit]) -> None:
        """Put ``unit`` on ``wanted`` unless another living unit stands there."""
        grid = self.grid
        owner = grid.occupant(wanted)
        target: GridPosition | None = wanted
        if owner is not None and owner != unit.id and owner in living and living[owner].position == wanted:
            target = grid.cell_of(unit.id) or grid.find_nearest_free(wanted, max(grid.width, grid.height))
            if target is None:
                logger.warning("Tick %d: no free cell left for %s", self.state.tick, unit.id)
                return
            logger.warning(
                "Tick %d: %s is held by %s; %s moves to %s",
                self.state.tick,
                wanted.to_dict(),
                owner,
                unit.id,
                target.to_dict(),
            )
        unit.position = target
        grid.force(target, unit.id)

    def _resolve_stalemate(self) -> None:
        ctx = self._ctx
        hero_hp = ctx.remaining_hp("heroes")
        enemy_hp = ctx.remaining_hp("enemies")
        logger.debug("Tick ceiling reached: heroes %.1f hp, enemies %.1f hp", hero_hp, enemy_hp)
        ctx.finish("heroes" if hero_hp > enemy_hp else "enemies", "timeout")


def simulate_battle(
    heroes: Sequence[UnitInstance],
    enemies: EnemyRoster,
    *,
    rng: RNG,
    config: BattleConfig | None = None,
) -> BattleState:
    """Run a whole battle, every wave included, and return its final state."""
    return BattleEngine(heroes, enemies, rng=rng, config=config).run()


# -----------------------
# Input handling
# -----------------------
def _normalise_waves(enemies: EnemyRoster) -> List[List[UnitInstance]]:
    if not enemies:
        raise BattleSetupError("At least one enemy is required.")
    if all(isinstance(entry, UnitInstance) for entry in enemies):
        return [list(enemies)]  # type: ignore[arg-type]
    waves: List[List[UnitInstance]] = []
    for number, wave in enumerate(enemies, start=1):
        if isinstance(wave, UnitInstance) or not wave:
            raise BattleSetupError(f"Wave {number} must be a non-empty list of units.")
        if not all(isinstance(entry, UnitInstance) for entry in wave):
            raise BattleSetupError(f"Wave {number} contains something other than a unit.")
        waves.append(list(wave))
    return waves


def _validate_rosters(heroes: Sequence[UnitInstance], waves: List[List[UnitInstance]], config: BattleConfig) -> None:
    if not heroes:
        raise BattleSetupError("At least one hero is required.")
    seen: Set[str] = set()
    for instance in [*heroes, *(unit for wave in waves for unit in wave)]:
        if instance.id in seen:
            raise BattleSetupError(f"Duplicate unit id '{instance.id}'.")
        seen.add(instance.id)
        if instance.stats.max_hp <= 0 or instance.stats.hp <= 0:
            raise BattleSetupError(f"Unit '{instance.id}' must start with positive hp.")
        if instance.stats.speed < 0:
            raise BattleSetupError(f"Unit '{instance.id}' has negative speed.")
        for ability in instance.abilities:
            _validate_ability(instance.id, ability)
    on_board = len(heroes) + len(waves[0])
    if on_board > config.grid_width * config.grid_height:
        raise BattleSetupError(f"{on_board} units do not fit on a {config.grid_width}x{config.grid_height} grid.")


def _validate_ability(unit_id: str, ability: AbilityDef) -> None:
    context = f"Ability '{ability.id}' of unit '{unit_id}'"
    if not ability.effects:
        raise BattleSetupError(f"{context} has no effects.")
    for effect in ability.effects:
        if effect.type is EffectType.STATUS and not isinstance(effect.status_type, StatusEffectType):
            raise BattleSetupError(f"{context} references unknown status type {effect.status_type!r}.")
        if effect.type is EffectType.BUFF and effect.stat_modifier is None:
            raise BattleSetupError(f"{context} buff has no stat modifier.")
        modifier = effect.stat_modifier
        if modifier is not None and modifier.stat not in MODIFIABLE_STATS:
            raise BattleSetupError(f"{context} modifies unknown stat '{modifier.stat}'.")


def _battle_unit(instance: UnitInstance, config: BattleConfig, *, is_hero: bool, wave: int | None = None) -> BattleUnit:
    stats = instance.stats.copy()
    return BattleUnit(
        id=instance.id,
        name=instance.name,
        is_hero=is_hero,
        position=GridPosition(0, 0),
        base_stats=instance.stats.copy(),
        stats=stats,
        cooldown_rate=stats.speed / config.cooldown_divisor,
        abilities=instance.abilities,
        ability_cooldowns={ability.id: 0 for ability in instance.abilities},
        wave=wave,
    )
