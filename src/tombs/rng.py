from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Dict, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K")


@dataclass
class RandomSource:
    """Seedable dice for the dungeon generator and confused monsters.

    Two sources built with the same seed produce the same dungeon.
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        self._rng = random.Random(self.seed)
        if self.seed is not None:
            logger.debug("RandomSource seeded with %s", self.seed)

    def randint(self, a: int, b: int) -> int:
        """Inclusive on both ends, like random.randint."""
        return self._rng.randint(a, b)

    def randrange(self, start: int, stop: int) -> int:
        """Half-open [start, stop)."""
        return self._rng.randrange(start, stop)

    def coin_flip(self) -> bool:
        return self._rng.randrange(2) == 0

    def weighted_choice(self, weights: Dict[K, int]) -> K:
        """Pick a key of a spawn table with probability weight / total.

        Zero-weight entries are never picked. Raises ValueError for an empty
        table, a negative weight, or a table whose weights are all zero.
        """
        if not weights:
            raise ValueError("weighted_choice requires a non-empty weights mapping")
        for key, weight in weights.items():
            if weight < 0:
                raise ValueError(f"Weight for {key!r} must be non-negative, got {weight}")
        total = sum(weights.values())
        if total == 0:
            raise ValueError("All weights are zero; cannot make a weighted choice")

        roll = self._rng.randrange(total)
        for key, weight in weights.items():
            if roll < weight:
                return key
            roll -= weight
        raise AssertionError("roll exceeded the table total")


__all__ = ["RandomSource"]
