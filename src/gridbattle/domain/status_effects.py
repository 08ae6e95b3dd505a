"""Runtime status effects and the derived-stat rule."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from gridbattle.domain.defs import StatusCategory, StatusEffectType
from gridbattle.domain.entities import MODIFIABLE_STATS, UnitStats


@dataclass(slots=True)
class StatusEffect:
    """A timed modifier attached to one unit."""

    id: str
    status_type: StatusEffectType
    category: StatusCategory
    duration: int
    remaining_duration: int
    damage_per_tick: float | None = None
    stat: str | None = None
    value: float | None = None
    is_percent: bool = False
    source_id: str | None = None
    ability_id: str | None = None

    @property
    def is_active(self) -> bool:
        return self.remaining_duration > 0


def apply_modifier(current: float, value: float, *, is_percent: bool) -> float:
    if is_percent:
        return current * (1 + value / 100)
    return max(0.0, current + value)


def compute_stats(base: UnitStats, hp: float, effects: Iterable[StatusEffect]) -> UnitStats:
    """
    Rebuild current stats from ``base`` plus every active modifier.

    ``hp`` is carried over untouched so recalculation can never heal or
    damage a unit; calling this twice with the same effects is idempotent.
    """

    stats = base.copy()
    stats.hp = hp
    for effect in effects:
        if not effect.is_active or effect.stat is None or effect.value is None:
            continue
        if effect.stat not in MODIFIABLE_STATS:
            continue
        current = getattr(stats, effect.stat)
        setattr(stats, effect.stat, apply_modifier(current, effect.value, is_percent=effect.is_percent))
    return stats


def has_category(effects: Sequence[StatusEffect], category: StatusCategory) -> bool:
    return any(effect.is_active and effect.category is category for effect in effects)
