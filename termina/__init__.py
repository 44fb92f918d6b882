"""
termina - Narrative Accumulator Engine

Public API: world events go in one per cycle, wrath and entropy accumulate,
and on cycle 13 the prime-mover equation fails or settles on INCONCLUSIVE.
"""

# =============================================================================
# TYPES (Dataclasses)
# =============================================================================
from .types_event import WorldEvent
from .types_config import Catalyst, EngineConfig, DEFAULT_CATALYST, OMEGA, TERMINA, VARIANTS
from .types_state import EngineState, Aggregate
from .types_result import RunResult

# =============================================================================
# CONSTANTS + ERRORS
# =============================================================================
from .constants import EnginePhase, MAX_CYCLES_BEFORE_BREAK, RESULT_INCONCLUSIVE
from .errors import FailureCode, UnresolvedEquation, EngineHalted, REMEDIATION_NOTES

# =============================================================================
# ENGINE
# =============================================================================
from .randomness import RandomSource, NumpyRandomSource
from .engine import (
    ingest_event,
    attempt_partial_inference,
    check_for_instability,
    mumble_half_thought,
    alignment_bar,
)
from .resolution import Resolution, classify_resolution, solve_prime_mover
from .cycle import initialize_state, run_cycle, run_simulation, run_variants

# =============================================================================
# INPUTS + OUTPUTS
# =============================================================================
from .classifier import KEYWORD_RULES, classify_description, classify_many
from .events import DEFAULT_EVENTS, load_events
from .export import generate_report, export_json, summary_table
from .sinks import ReportSink, MemorySink, ConsoleSink, JsonlSink

__all__ = [
    # Types
    "WorldEvent",
    "Catalyst",
    "EngineConfig",
    "EngineState",
    "Aggregate",
    "RunResult",
    # Presets
    "DEFAULT_CATALYST",
    "OMEGA",
    "TERMINA",
    "VARIANTS",
    # Constants + errors
    "EnginePhase",
    "MAX_CYCLES_BEFORE_BREAK",
    "RESULT_INCONCLUSIVE",
    "FailureCode",
    "UnresolvedEquation",
    "EngineHalted",
    "REMEDIATION_NOTES",
    # Engine
    "RandomSource",
    "NumpyRandomSource",
    "ingest_event",
    "attempt_partial_inference",
    "check_for_instability",
    "mumble_half_thought",
    "alignment_bar",
    "Resolution",
    "classify_resolution",
    "solve_prime_mover",
    "initialize_state",
    "run_cycle",
    "run_simulation",
    "run_variants",
    # Inputs + outputs
    "KEYWORD_RULES",
    "classify_description",
    "classify_many",
    "DEFAULT_EVENTS",
    "load_events",
    "generate_report",
    "export_json",
    "summary_table",
    "ReportSink",
    "MemorySink",
    "ConsoleSink",
    "JsonlSink",
]
