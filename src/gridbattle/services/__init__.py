"""Service layer exports."""

from .battle_service import BattleService
from .combat import BattleEngine, simulate_battle
from .errors import BattleSetupError, FactoryError

__all__ = [
    "BattleEngine",
    "BattleService",
    "BattleSetupError",
    "FactoryError",
    "simulate_battle",
]
