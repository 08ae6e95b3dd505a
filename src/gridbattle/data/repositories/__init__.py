"""Repository exports."""

from .abilities_repo import AbilitiesRepository
from .stages_repo import StagesRepository
from .units_repo import UnitsRepository

__all__ = [
    "AbilitiesRepository",
    "StagesRepository",
    "UnitsRepository",
]
