"""
termina/types_config.py - Catalyst, EngineConfig and Variant Presets

Immutable configuration for engine runs.
Frozen dataclasses, no behavior beyond validation.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from .constants import MAX_CYCLES_BEFORE_BREAK, SELF_REFERENTIAL_EPSILON


@dataclass(frozen=True)
class Catalyst:
    """The half-present anchor the engine reads through.

    emotional_noise is the amplitude of a symmetric perturbation applied to
    every state update. memories are flavor only.
    """
    name: str = "Harker"
    emotional_noise: float = 0.0
    memories: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if isinstance(self.memories, list):
            object.__setattr__(self, 'memories', tuple(self.memories))
        if self.emotional_noise < 0:
            raise ValueError(f"emotional_noise must be >= 0, got {self.emotional_noise}")


DEFAULT_CATALYST = Catalyst(
    name="Harker",
    emotional_noise=3.5,
    memories=(
        "Warm hand in mine.",
        "The smell of old books.",
        "A promise I did not understand.",
        "A voice calling my name from very far away.",
    ),
)


@dataclass(frozen=True)
class EngineConfig:
    """Engine run configuration (immutable)."""
    catalyst: Catalyst = DEFAULT_CATALYST
    variant_name: str = "OMEGA"
    track_bias_alignment: bool = True
    self_referential_epsilon: float = SELF_REFERENTIAL_EPSILON
    max_cycles_before_break: int = MAX_CYCLES_BEFORE_BREAK
    random_seed: Optional[int] = None
    tenant_id: str = "termina"

    def __post_init__(self):
        if self.max_cycles_before_break < 1:
            raise ValueError(
                f"max_cycles_before_break must be >= 1, got {self.max_cycles_before_break}"
            )
        if self.self_referential_epsilon <= 0:
            raise ValueError(
                f"self_referential_epsilon must be > 0, got {self.self_referential_epsilon}"
            )


# =============================================================================
# VARIANT PRESETS
# =============================================================================

# Bias/alignment tracking on
OMEGA = EngineConfig(variant_name="OMEGA", track_bias_alignment=True)

# Wrath/entropy only
TERMINA = EngineConfig(variant_name="TERMINA", track_bias_alignment=False)

VARIANTS = {
    "OMEGA": OMEGA,
    "TERMINA": TERMINA,
}
