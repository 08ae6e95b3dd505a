"""Seedable random source injected into the combat engine."""
from __future__ import annotations

from random import Random


class RNG:
    """
    Wrapper around random.Random used for every combat roll.

    The engine never touches the global random module; replaying a battle
    only requires the same seed and the same inputs.
    """

    def __init__(self, seed: int) -> None:
        self._seed = seed
        self._random = Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def random(self) -> float:
        """Return the next float in [0.0, 1.0)."""
        return self._random.random()

    def roll(self, chance: float) -> bool:
        """Return True when the next draw falls below ``chance``."""
        return self.random() < chance

    def randint(self, a: int, b: int) -> int:
        """Return a random integer N such that a <= N <= b."""
        return self._random.randint(a, b)
