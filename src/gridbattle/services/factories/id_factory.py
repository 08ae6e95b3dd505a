"""Deterministic instance identifiers."""
from __future__ import annotations

from typing import Collection

from gridbattle.core.rng import RNG


def make_instance_id(prefix: str, rng: RNG, taken: Collection[str] = ()) -> str:
    """Draw ``prefix-xxxxxx`` ids from ``rng`` until one is not in ``taken``."""
    while True:
        candidate = f"{prefix}-{rng.randint(0, 0xFFFFFF):06x}"
        if candidate not in taken:
            return candidate
