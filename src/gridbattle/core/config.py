"""Engine tuning knobs."""
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BattleConfig:
    """Immutable settings for one simulation run."""

    grid_width: int = 8
    grid_height: int = 8
    cooldown_divisor: float = 10.0
    cooldown_threshold: float = 100.0
    max_ticks: int = 10000
    scroll_distance: int = 2
    wave_pause_interval: int = 3
    spawn_search_radius: int = 3
    consistency_check_interval: int = 10

    @property
    def offboard_col(self) -> int:
        """Column reserved for wave units that have not entered the board."""
        return self.grid_width


DEFAULT_CONFIG = BattleConfig()
