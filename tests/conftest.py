"""
tests/conftest.py - Shared fixtures for termina tests

Deterministic random sources and zero-noise configs.
"""

import pytest

from termina.randomness import RandomSource
from termina.types_config import Catalyst, EngineConfig


class FixedRandomSource(RandomSource):
    """
    Scripted RandomSource.

    unit: value returned by uniform(-1, 1) (scaled linearly for other ranges)
    roll: value returned by random(); >= 0.5 suppresses mutters
    index: offset returned by integers() and therefore choice()
    """

    def __init__(self, unit: float = 0.0, roll: float = 0.99, index: int = 0):
        self.unit = unit
        self.roll = roll
        self.index = index
        self.shuffled = 0

    def random(self) -> float:
        return self.roll

    def uniform(self, low: float, high: float) -> float:
        return low + (self.unit + 1.0) / 2.0 * (high - low)

    def integers(self, low: int, high: int) -> int:
        return min(low + self.index, high - 1)

    def shuffle(self, items):
        self.shuffled += 1
        return list(items)


def quiet_config(variant_name: str = "OMEGA", noise: float = 0.0, **kwargs) -> EngineConfig:
    """EngineConfig with a fixed noise amplitude."""
    return EngineConfig(
        catalyst=Catalyst(name="Harker", emotional_noise=noise),
        variant_name=variant_name,
        track_bias_alignment=(variant_name == "OMEGA"),
        **kwargs
    )


@pytest.fixture
def fixed_rng():
    """Zero-noise, no-mutter random source."""
    return FixedRandomSource()


@pytest.fixture
def omega_config():
    return quiet_config("OMEGA")


@pytest.fixture
def termina_config():
    return quiet_config("TERMINA")
