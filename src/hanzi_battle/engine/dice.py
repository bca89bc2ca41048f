"""Injectable random source.

Every random decision in the engine (opponent selection, level jitter,
damage variance, capture and drop rolls) goes through a ``DiceRoller``,
so tests can seed it or substitute a scripted ``random.Random``.
"""

from __future__ import annotations

import random
from collections.abc import Sequence
from typing import TypeVar

from hanzi_battle.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")


class DiceRoller:
    """Random source for game mechanics.

    Example:
        >>> roller = DiceRoller(seed=42)
        >>> 1 <= roller.randint(1, 6) <= 6
        True
    """

    def __init__(self, *, seed: int | None = None, rng: random.Random | None = None) -> None:
        """Initialize the dice roller.

        Args:
            seed: Optional seed for reproducible rolls.
            rng: Explicit generator to draw from; overrides ``seed``.
        """
        self._seed = seed
        self._rng = rng if rng is not None else random.Random(seed)
        logger.debug("DiceRoller initialized", seed=seed, custom_rng=rng is not None)

    @property
    def seed(self) -> int | None:
        return self._seed

    def randint(self, low: int, high: int) -> int:
        """Uniform integer in ``[low, high]``, both ends inclusive."""
        return self._rng.randint(low, high)

    def random(self) -> float:
        """Uniform float in ``[0, 1)``."""
        return self._rng.random()

    def choice(self, options: Sequence[T]) -> T:
        """Uniform pick from a non-empty sequence."""
        if not options:
            raise ValueError("Cannot choose from an empty sequence")
        return options[self._rng.randrange(len(options))]

    def chance(self, probability: float) -> bool:
        """True with the given probability."""
        return self._rng.random() < probability

    def variance(self, spread: int) -> int:
        """Uniform integer in ``[-spread, +spread]``."""
        return self._rng.randint(-spread, spread)


__all__ = ["DiceRoller"]
