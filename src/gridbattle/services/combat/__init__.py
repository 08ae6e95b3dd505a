"""Grid combat engine."""

from .tick_scheduler import BattleEngine, simulate_battle

__all__ = ["BattleEngine", "simulate_battle"]
