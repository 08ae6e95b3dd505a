"""Battle event taxonomy.

Every event is an immutable record stamped with the tick it happened on.
Payloads carry ids and positions only, never live unit objects, so a
finished log can be replayed without the engine.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Tuple

from gridbattle.core.types import DamageSource, HealSource, Outcome
from gridbattle.domain.defs import StatusCategory, StatusEffectType
from gridbattle.domain.grid import GridPosition


class BattleEventType(str, Enum):
    BATTLE_START = "battle_start"
    TICK = "tick"
    MOVE = "move"
    ATTACK = "attack"
    ABILITY_USED = "ability_used"
    DAMAGE = "damage"
    HEAL = "heal"
    EVADED = "evaded"
    CRITICAL_HIT = "critical_hit"
    STATUS_APPLIED = "status_applied"
    STATUS_EXPIRED = "status_expired"
    DEATH = "death"
    WAVE_START = "wave_start"
    WAVE_COMPLETE = "wave_complete"
    WAVE_TRANSITION = "wave_transition"
    VICTORY = "victory"
    DEFEAT = "defeat"


@dataclass(frozen=True, slots=True)
class UnitPlacement:
    unit_id: str
    position: GridPosition


@dataclass(frozen=True, slots=True)
class PositionChange:
    """Logical destination plus the animation-only origin."""

    unit_id: str
    from_position: GridPosition
    to_position: GridPosition


@dataclass(frozen=True, slots=True)
class CooldownSnapshot:
    unit_id: str
    cooldown: float
    cooldown_rate: float


@dataclass(frozen=True, slots=True)
class BattleEvent:
    """Base battle event."""

    type: ClassVar[BattleEventType]

    tick: int


@dataclass(frozen=True, slots=True)
class BattleStartEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.BATTLE_START

    heroes: Tuple[UnitPlacement, ...]
    enemies: Tuple[UnitPlacement, ...]
    total_waves: int


@dataclass(frozen=True, slots=True)
class TickEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.TICK

    cooldowns: Tuple[CooldownSnapshot, ...]


@dataclass(frozen=True, slots=True)
class MoveEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.MOVE

    unit_id: str
    from_position: GridPosition
    to_position: GridPosition


@dataclass(frozen=True, slots=True)
class AttackEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.ATTACK

    attacker_id: str
    target_id: str
    damage: float
    is_crit: bool = False


@dataclass(frozen=True, slots=True)
class AbilityUsedEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.ABILITY_USED

    caster_id: str
    ability_id: str
    ability_name: str
    target_ids: Tuple[str, ...]


@dataclass(frozen=True, slots=True)
class DamageEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.DAMAGE

    target_id: str
    amount: float
    remaining_hp: float
    source: DamageSource
    source_id: str | None = None
    ability_id: str | None = None
    status_type: StatusEffectType | None = None


@dataclass(frozen=True, slots=True)
class HealEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.HEAL

    target_id: str
    amount: float
    new_hp: float
    source: HealSource
    source_id: str | None = None


@dataclass(frozen=True, slots=True)
class EvadedEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.EVADED

    attacker_id: str
    target_id: str


@dataclass(frozen=True, slots=True)
class CriticalHitEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.CRITICAL_HIT

    attacker_id: str
    target_id: str
    multiplier: float


@dataclass(frozen=True, slots=True)
class StatusAppliedEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.STATUS_APPLIED

    target_id: str
    status_id: str
    status_type: StatusEffectType
    category: StatusCategory
    duration: int
    source_id: str | None = None


@dataclass(frozen=True, slots=True)
class StatusExpiredEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.STATUS_EXPIRED

    target_id: str
    status_id: str
    status_type: StatusEffectType


@dataclass(frozen=True, slots=True)
class DeathEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.DEATH

    unit_id: str
    position: GridPosition
    killer_id: str | None = None
    cause: str = "attack"


@dataclass(frozen=True, slots=True)
class WaveStartEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.WAVE_START

    wave_number: int
    total_waves: int
    spawns: Tuple[PositionChange, ...]


@dataclass(frozen=True, slots=True)
class WaveCompleteEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.WAVE_COMPLETE

    wave_number: int
    next_wave_number: int
    total_waves: int


@dataclass(frozen=True, slots=True)
class WaveTransitionEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.WAVE_TRANSITION

    wave_number: int
    scroll_distance: int
    hero_transitions: Tuple[PositionChange, ...]


@dataclass(frozen=True, slots=True)
class VictoryEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.VICTORY

    reason: Outcome = "elimination"
    hero_hp: float = 0.0
    enemy_hp: float = 0.0


@dataclass(frozen=True, slots=True)
class DefeatEvent(BattleEvent):
    type: ClassVar[BattleEventType] = BattleEventType.DEFEAT

    reason: Outcome = "elimination"
    hero_hp: float = 0.0
    enemy_hp: float = 0.0
