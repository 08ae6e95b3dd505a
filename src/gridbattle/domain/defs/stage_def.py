"""Stage definition structures."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple


@dataclass(slots=True)
class StageDef:
    """A stage is an ordered series of enemy waves."""

    id: str
    name: str
    level: int
    waves: Tuple[Tuple[str, ...], ...]

    @property
    def total_waves(self) -> int:
        return len(self.waves)
