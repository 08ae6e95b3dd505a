"""Roster entries handed to the engine."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from gridbattle.domain.defs import AbilityDef
from gridbattle.domain.grid import GridPosition

from .stats import UnitStats


@dataclass(slots=True)
class UnitInstance:
    """A concrete hero or enemy ready to enter a battle."""

    id: str
    name: str
    stats: UnitStats
    abilities: Tuple[AbilityDef, ...] = ()
    tags: Tuple[str, ...] = ()
    template_id: str | None = None  # template the instance was built from
    position: GridPosition | None = None  # formation override
