"""Shared type aliases for the core and domain layers."""
from typing import Literal

Side = Literal["heroes", "enemies"]
Outcome = Literal["elimination", "timeout"]
DamageSource = Literal["attack", "ability", "dot"]
HealSource = Literal["ability", "lifesteal", "regeneration"]

__all__ = ["DamageSource", "HealSource", "Outcome", "Side"]
