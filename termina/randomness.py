"""
termina/randomness.py - Injectable Random Source

Every random draw the engine makes (shuffle order, noise, flavor fragments,
inference guesses, cosmetic iteration counts) goes through a RandomSource so
tests can script or seed it.
"""

from typing import List, Optional, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


class RandomSource:
    """Uniform randomness interface consumed by the engine."""

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        raise NotImplementedError

    def uniform(self, low: float, high: float) -> float:
        raise NotImplementedError

    def integers(self, low: int, high: int) -> int:
        """Uniform integer in [low, high)."""
        raise NotImplementedError

    def choice(self, options: Sequence[T]) -> T:
        if not options:
            raise ValueError("choice() from an empty sequence")
        return options[self.integers(0, len(options))]

    def shuffle(self, items: Sequence[T]) -> List[T]:
        """Return a uniformly permuted copy. The input is not modified."""
        raise NotImplementedError


class NumpyRandomSource(RandomSource):
    """RandomSource backed by numpy's Generator (PCG64)."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = np.random.default_rng(seed)

    def random(self) -> float:
        return float(self._rng.random())

    def uniform(self, low: float, high: float) -> float:
        return float(self._rng.uniform(low, high))

    def integers(self, low: int, high: int) -> int:
        return int(self._rng.integers(low, high))

    def shuffle(self, items: Sequence[T]) -> List[T]:
        order = self._rng.permutation(len(items))
        return [items[int(i)] for i in order]
