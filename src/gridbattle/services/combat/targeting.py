"""Nearest-target selection, area patterns and single-step movement."""
from __future__ import annotations

from typing import Iterable, List, Set, Tuple

from gridbattle.domain.battle_models import BattleUnit
from gridbattle.domain.events import MoveEvent
from gridbattle.domain.grid import GridPosition, chebyshev_distance

from .context import BattleContext

# Candidate order matters: equal scores keep this order after a stable sort.
NEIGHBOUR_STEPS: Tuple[Tuple[int, int], ...] = (
    (0, 1),  # right
    (0, -1),  # left
    (1, 0),  # down
    (-1, 0),  # up
    (1, 1),  # down-right
    (1, -1),  # down-left
    (-1, 1),  # up-right
    (-1, -1),  # up-left
)
CLEAVE_EXTRA_TARGETS = 2
FIREBALL_BLOCK = ((0, 0), (1, 0), (0, 1), (1, 1))


def find_nearest(origin: GridPosition, candidates: Iterable[BattleUnit]) -> BattleUnit | None:
    """Closest candidate by Chebyshev distance; the earliest one wins ties."""
    nearest: BattleUnit | None = None
    best = 0
    for candidate in candidates:
        distance = chebyshev_distance(origin, candidate.position)
        if nearest is None or distance < best:
            nearest = candidate
            best = distance
    return nearest


def nearest_in_range(unit: BattleUnit, candidates: Iterable[BattleUnit], max_range: int) -> BattleUnit | None:
    reachable = [c for c in candidates if chebyshev_distance(unit.position, c.position) <= max_range]
    return find_nearest(unit.position, reachable)


def within_radius(center: GridPosition, candidates: Iterable[BattleUnit], radius: int) -> List[BattleUnit]:
    return [c for c in candidates if chebyshev_distance(center, c.position) <= radius]


def cleave_targets(unit: BattleUnit, opponents: List[BattleUnit]) -> List[BattleUnit]:
    """An adjacent primary plus opponents adjacent to both the primary and the caster."""
    primary = nearest_in_range(unit, opponents, 1)
    if primary is None:
        return []
    targets = [primary]
    for candidate in opponents:
        if len(targets) > CLEAVE_EXTRA_TARGETS:
            break
        if candidate is primary:
            continue
        if (
            chebyshev_distance(candidate.position, primary.position) == 1
            and chebyshev_distance(candidate.position, unit.position) == 1
        ):
            targets.append(candidate)
    return targets


def fireball_targets(unit: BattleUnit, opponents: List[BattleUnit], max_range: int) -> List[BattleUnit]:
    """Every opponent on the 2x2 block anchored at the nearest opponent in range."""
    anchor = nearest_in_range(unit, opponents, max_range)
    if anchor is None:
        return []
    block = {anchor.position.offset(d_row, d_col) for d_row, d_col in FIREBALL_BLOCK}
    return [candidate for candidate in opponents if candidate.position in block]


def step_toward(ctx: BattleContext, unit: BattleUnit, target: BattleUnit, claimed: Set[GridPosition]) -> bool:
    """
    Move ``unit`` one cell toward ``target``.

    Steps are scored ``distance*100 - 50 (if closer) - 10*alignment`` and
    tried lowest first. A step may lengthen the distance by at most one so
    units can slide around blockers. Returns True when the unit moved.
    """

    origin = unit.position
    current = chebyshev_distance(origin, target.position)
    to_row = target.position.row - origin.row
    to_col = target.position.col - origin.col

    scored = []
    for d_row, d_col in NEIGHBOUR_STEPS:
        candidate = origin.offset(d_row, d_col)
        if candidate in claimed or not ctx.grid.is_free(candidate):
            continue
        distance = chebyshev_distance(candidate, target.position)
        alignment = d_row * to_row + d_col * to_col
        score = distance * 100 - (50 if distance < current else 0) - alignment * 10
        scored.append((score, distance, candidate))
    scored.sort(key=lambda entry: entry[0])

    for _, distance, candidate in scored:
        if distance - current > 1:
            continue
        if not ctx.grid.move(unit.id, origin, candidate):
            continue
        claimed.add(candidate)
        unit.position = candidate
        ctx.emit(MoveEvent(tick=ctx.tick, unit_id=unit.id, from_position=origin, to_position=candidate))
        return True
    return False
