"""Runtime entity exports."""

from .stats import MODIFIABLE_STATS, STAT_NAMES, UnitStats
from .unit import UnitInstance

__all__ = [
    "MODIFIABLE_STATS",
    "STAT_NAMES",
    "UnitInstance",
    "UnitStats",
]
