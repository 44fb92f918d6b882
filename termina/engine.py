"""
termina/engine.py - Event Ingestion, Inference and Instability

The per-cycle state updates of the engine. Functions mutate EngineState in
place and append to its text log and receipt ledger in causal order.
"""

import logging
import math
from typing import Any, Dict, List

import numpy as np

from receipts import emit_receipt

from .constants import (
    BETRAYAL_WRATH, KINDNESS_RELIEF, DEATH_ENTROPY, NOISE_ENTROPY_FACTOR,
    MUTTER_PROBABILITY, MUTTER_FRAGMENTS,
    BIAS_PAIN_WEIGHT, BIAS_DEATH_WEIGHT, BIAS_BETRAYAL_WEIGHT,
    BIAS_JOY_WEIGHT, BIAS_KINDNESS_WEIGHT,
    DRIFT_BETRAYAL_WEIGHT, DRIFT_DEATH_WEIGHT, DRIFT_KINDNESS_WEIGHT,
    ALIGNMENT_SEGMENTS, SEGMENT_FILLED, SEGMENT_EMPTY,
    INFERENCE_ENTROPY_FLOOR, DESTRUCTION_WRATH_RATIO,
    GUESS_UNKNOWN, GUESS_DESTRUCTION, GUESS_OPTIONS,
    ENTROPY_WARNING_THRESHOLD, WRATH_OVERRUN_THRESHOLD,
)
from .randomness import RandomSource
from .types_config import EngineConfig
from .types_event import WorldEvent
from .types_state import EngineState

logger = logging.getLogger(__name__)


# =============================================================================
# LOG + RECEIPT HELPERS
# =============================================================================

def log_line(state: EngineState, msg: str) -> str:
    """Append one prefixed line to the run log and mirror it to logging."""
    line = f"[TERM-LOG {state.cycles_run:03d}] {msg}"
    state.log.append(line)
    logger.debug(line)
    return line


def record(state: EngineState, config: EngineConfig, receipt_type: str,
           data: Dict[str, Any]) -> dict:
    """Emit a receipt stamped with variant and cycle under the run's tenant, and append it."""
    receipt = emit_receipt(receipt_type, {
        "variant": config.variant_name,
        "cycle": state.cycles_run,
        **data
    }, tenant_id=config.tenant_id)
    state.receipt_ledger.append(receipt)
    return receipt


def clamp(value: float, low: float, high: float) -> float:
    return float(np.clip(value, low, high))


def alignment_bar(drift: float) -> str:
    """Five-segment indicator: segments 0..idx filled, idx = round((drift + 1) * 2)."""
    drift = clamp(drift, -1.0, 1.0)
    idx = int(math.floor((drift + 1.0) * 2.0 + 0.5))
    idx = max(0, min(ALIGNMENT_SEGMENTS - 1, idx))
    filled = idx + 1
    return SEGMENT_FILLED * filled + SEGMENT_EMPTY * (ALIGNMENT_SEGMENTS - filled)


# =============================================================================
# FLAVOR
# =============================================================================

def mumble_half_thought(state: EngineState, config: EngineConfig,
                        rng: RandomSource) -> str:
    """Emit one flavor fragment. No effect on numeric state."""
    fragment = rng.choice(MUTTER_FRAGMENTS)
    log_line(state, "MUTTER: " + fragment)
    record(state, config, "mutter", {"fragment": fragment})
    return fragment


# =============================================================================
# INGESTION
# =============================================================================

def ingest_event(state: EngineState, event: WorldEvent, config: EngineConfig,
                 rng: RandomSource) -> float:
    """
    Fold one event into wrath, entropy and (when tracked) bias/alignment.

    Args:
        state: Current EngineState (mutated in place)
        event: WorldEvent to ingest
        config: EngineConfig with catalyst and capability flags
        rng: RandomSource for noise and flavor draws

    Returns:
        The signed noise applied to this update
    """
    state.ingested_events.append(event)
    log_line(state, f"INGEST: '{event.description}'")
    record(state, config, "ingest", {"event": event.to_dict()})

    delta_wrath = event.pain + (BETRAYAL_WRATH if event.betrayal else 0.0)
    if event.kindness:
        delta_wrath -= KINDNESS_RELIEF

    delta_entropy = abs(event.pain) + abs(event.joy) + (DEATH_ENTROPY if event.death else 0.0)

    if config.track_bias_alignment:
        state.destruction_bias = clamp(
            state.destruction_bias
            + BIAS_PAIN_WEIGHT * event.pain
            + BIAS_DEATH_WEIGHT * event.death
            + BIAS_BETRAYAL_WEIGHT * event.betrayal
            - BIAS_JOY_WEIGHT * event.joy
            - BIAS_KINDNESS_WEIGHT * event.kindness,
            0.0, 1.0,
        )
        state.alignment_drift = clamp(
            state.alignment_drift
            + DRIFT_BETRAYAL_WEIGHT * event.betrayal
            + DRIFT_DEATH_WEIGHT * event.death
            - DRIFT_KINDNESS_WEIGHT * event.kindness,
            -1.0, 1.0,
        )

    # Symmetric in [-emotional_noise, +emotional_noise]
    noise = config.catalyst.emotional_noise * rng.uniform(-1.0, 1.0)

    state.wrath = max(0.0, state.wrath + delta_wrath + noise)
    state.entropy += max(0.0, delta_entropy + abs(noise) * NOISE_ENTROPY_FACTOR)
    state.wrath_trace.append(state.wrath)
    state.entropy_trace.append(state.entropy)

    sign = "+" if noise >= 0 else ""
    log_line(
        state,
        f"STATE-UPDATE: wrath={state.wrath:.2f}, entropy={state.entropy:.2f}, "
        f"noise={sign}{noise:.2f}"
    )
    record(state, config, "state_update", {
        "wrath": state.wrath,
        "entropy": state.entropy,
        "noise": noise,
        "delta_wrath": delta_wrath,
        "delta_entropy": delta_entropy,
    })

    if config.track_bias_alignment:
        log_line(
            state,
            f"BIAS-UPDATE: destruction_bias={state.destruction_bias:.2f}, "
            f"alignment={alignment_bar(state.alignment_drift)}"
        )
        record(state, config, "bias_update", {
            "destruction_bias": state.destruction_bias,
            "alignment_drift": state.alignment_drift,
        })

    if rng.random() < MUTTER_PROBABILITY:
        mumble_half_thought(state, config, rng)

    return noise


# =============================================================================
# PARTIAL INFERENCE
# =============================================================================

def attempt_partial_inference(state: EngineState, config: EngineConfig,
                              rng: RandomSource) -> str:
    """Guess the prime mover from current wrath/entropy. Log-only side effect."""
    log_line(state, "ATTEMPT: partial inference on prime mover of life…")

    if state.entropy < INFERENCE_ENTROPY_FLOOR:
        guess = GUESS_UNKNOWN
    elif state.wrath > state.entropy * DESTRUCTION_WRATH_RATIO:
        guess = GUESS_DESTRUCTION
    else:
        guess = rng.choice(GUESS_OPTIONS)

    state.guesses.append(guess)
    log_line(state, f"    INFERENCE-GUESS => {guess}")
    record(state, config, "inference", {"guess": guess})
    return guess


# =============================================================================
# INSTABILITY
# =============================================================================

def check_for_instability(state: EngineState, config: EngineConfig,
                          rng: RandomSource) -> List[str]:
    """
    Raise entropy and wrath alerts. Both may fire in the same call.

    Returns:
        Names of the alerts that fired ("ENTROPY_CRITICAL", "WRATH_OVERRUN")
    """
    fired = []

    if state.entropy > ENTROPY_WARNING_THRESHOLD and not state.resolved:
        log_line(state, "WARNING: ENTROPY approaching critical threshold…")
        fired.append("ENTROPY_CRITICAL")
        mumble_half_thought(state, config, rng)

    if state.wrath > WRATH_OVERRUN_THRESHOLD:
        log_line(state, "ALERT: WRATH-OVERRUN detected.")
        fired.append("WRATH_OVERRUN")
        mumble_half_thought(state, config, rng)

    if fired:
        record(state, config, "instability", {
            "alerts": fired,
            "wrath": state.wrath,
            "entropy": state.entropy,
        })
    return fired
