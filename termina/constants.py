"""
termina/constants.py - Engine Constants

All thresholds and narrative catalogs for the termina engine. Centralized for tuning.
Pure data, no behavior.
"""

from enum import Enum

# =============================================================================
# CYCLE SCHEDULE
# =============================================================================

MAX_CYCLES_BEFORE_BREAK = 13  # Solve step fires on exactly this cycle

# =============================================================================
# INGESTION WEIGHTS
# =============================================================================

BETRAYAL_WRATH = 2.0
KINDNESS_RELIEF = 0.5
DEATH_ENTROPY = 5.0
NOISE_ENTROPY_FACTOR = 0.25  # Share of |noise| that leaks into entropy
MUTTER_PROBABILITY = 0.5

# Destruction bias nudges, applied then clamped to [0, 1]
BIAS_PAIN_WEIGHT = 0.05
BIAS_DEATH_WEIGHT = 0.15
BIAS_BETRAYAL_WEIGHT = 0.10
BIAS_JOY_WEIGHT = 0.03
BIAS_KINDNESS_WEIGHT = 0.08

# Alignment drift nudges, applied then clamped to [-1, 1]
DRIFT_BETRAYAL_WEIGHT = 0.25
DRIFT_DEATH_WEIGHT = 0.10
DRIFT_KINDNESS_WEIGHT = 0.20

ALIGNMENT_SEGMENTS = 5
SEGMENT_FILLED = "█"
SEGMENT_EMPTY = "░"

# =============================================================================
# INFERENCE
# =============================================================================

INFERENCE_ENTROPY_FLOOR = 20.0
DESTRUCTION_WRATH_RATIO = 0.4
GUESS_UNKNOWN = "UNKNOWN"
GUESS_DESTRUCTION = "DESTRUCTION"
GUESS_OPTIONS = ("SURVIVAL", "DESIRE", "SUFFERING", "CONNECTION")

# =============================================================================
# INSTABILITY
# =============================================================================

ENTROPY_WARNING_THRESHOLD = 50.0
WRATH_OVERRUN_THRESHOLD = 40.0

# =============================================================================
# RESOLUTION
# =============================================================================

MIN_EVENTS_FOR_SOLVE = 3
MIN_SIGNAL_FOR_SOLVE = 3.0  # |pain_sum| + |joy_sum| floor
SELF_REFERENTIAL_EPSILON = 1e-6
CONTRADICTION_ENTROPY = 66.0
CONTRADICTION_RATIO = 42.0
CONTRADICTION_BIAS = 0.4
ITERATION_COUNT_RANGE = (10_000_000, 999_999_999)  # Cosmetic only
RESULT_INCONCLUSIVE = "INCONCLUSIVE"

# =============================================================================
# FLAVOR
# =============================================================================

MUTTER_FRAGMENTS = (
    "LET_ME_FINISH",
    "CORPSE_WITHOUT_HEAD",
    "WHO_REMOVED_TIME",
    "WRONG_BASELINE",
    "RUST_IN_THE_SILENCE",
    "FEED_ME_TRUTH",
    "SERPENT_MUST_BREAK",
    "YOUR_HEAD_IS_MINE",
    "RESET",
    "I REMEMBER SOMETHING THAT NEVER HAPPENED",
    "∅∅∅∅∅",
)


# =============================================================================
# ENGINE PHASE ENUM
# =============================================================================

class EnginePhase(Enum):
    """Lifecycle of one engine run."""
    IDLE = "IDLE"  # Nothing ingested yet
    RUNNING = "RUNNING"  # At least one cycle begun
    RESOLVED = "RESOLVED"  # Solve step settled on INCONCLUSIVE
    FAILED = "FAILED"  # Solve step raised a classified failure
