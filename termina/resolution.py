"""
termina/resolution.py - Solve Step and Failure Classification

The prime-mover equation: (betrayals + 2*deaths) / (joy - pain).
classify_resolution is pure; solve_prime_mover wraps it with logging,
receipts and the terminal state transition.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from .constants import (
    EnginePhase,
    MIN_EVENTS_FOR_SOLVE, MIN_SIGNAL_FOR_SOLVE,
    CONTRADICTION_ENTROPY, CONTRADICTION_RATIO, CONTRADICTION_BIAS,
    ITERATION_COUNT_RANGE, RESULT_INCONCLUSIVE,
)
from .engine import log_line, record
from .errors import FailureCode, UnresolvedEquation
from .randomness import RandomSource
from .types_config import EngineConfig
from .types_state import Aggregate, EngineState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Outcome of classifying one aggregate. code is None on the INCONCLUSIVE path."""
    code: Optional[FailureCode]
    ratio: Optional[float]
    fatal_line: str = ""
    message: str = ""


def classify_resolution(aggregate: Aggregate, entropy: float,
                        destruction_bias: float, epsilon: float) -> Resolution:
    """
    Classify an aggregate. First matching failure wins.

    Order: DATA_INSUFFICIENT, SELF_REFERENTIAL_LOOP, then the ratio is
    computed, then CONFLICTING_AXIOMS.

    Args:
        aggregate: Frozen totals over the ingested events
        entropy: Engine entropy at solve time
        destruction_bias: Engine destruction bias (0.0 when untracked)
        epsilon: Threshold under which joy - pain counts as zero

    Returns:
        Resolution with the failure code (or None) and the ratio when defined
    """
    signal = abs(aggregate.pain_sum) + abs(aggregate.joy_sum)
    if aggregate.event_count < MIN_EVENTS_FOR_SOLVE or signal < MIN_SIGNAL_FOR_SOLVE:
        return Resolution(
            code=FailureCode.DATA_INSUFFICIENT,
            ratio=None,
            fatal_line="FATAL: DATA_INSUFFICIENT for PRIME_MOVER equation.",
            message=(
                f"UNRESOLVED_EQUATION: {aggregate.event_count} events carrying "
                f"{signal:.2f} signal cannot constrain the prime mover."
            ),
        )

    denominator = aggregate.joy_sum - aggregate.pain_sum
    if abs(denominator) < epsilon:
        return Resolution(
            code=FailureCode.SELF_REFERENTIAL_LOOP,
            ratio=None,
            fatal_line="FATAL: DIVISION_BY_ZERO in PRIME_MOVER equation.",
            message="UNRESOLVED_EQUATION: (betrayals + 2*deaths) / (joy - pain) -> ∞",
        )

    ratio = (aggregate.betrayal_count + 2 * aggregate.death_count) / denominator

    if (entropy > CONTRADICTION_ENTROPY
            or abs(ratio) > CONTRADICTION_RATIO
            or (destruction_bias > CONTRADICTION_BIAS
                and aggregate.joy_sum > aggregate.pain_sum)):
        return Resolution(
            code=FailureCode.CONFLICTING_AXIOMS,
            ratio=ratio,
            fatal_line="FATAL: CONTRADICTION. No stable solution for PRIME_MOVER.",
            message=(
                "UNRESOLVED_EQUATION: prime mover of life cannot be reduced "
                "to a stable closed-form term."
            ),
        )

    return Resolution(code=None, ratio=ratio)


def solve_prime_mover(state: EngineState, config: EngineConfig,
                      rng: RandomSource) -> str:
    """
    Attempt to resolve the prime mover of life.

    Args:
        state: Current EngineState (mutated in place)
        config: EngineConfig with the self-referential epsilon
        rng: RandomSource for the cosmetic iteration count

    Returns:
        "INCONCLUSIVE" on the only success path

    Raises:
        UnresolvedEquation: with code 01, 02 or 03
    """
    log_line(state, "SOLVE: attempting to resolve PRIME_MOVER_OF_LIFE…")

    aggregate = Aggregate.from_events(state.ingested_events)
    state.aggregate = aggregate
    log_line(
        state,
        f"    AGGREGATE: pain={aggregate.pain_sum:.2f}, joy={aggregate.joy_sum:.2f}, "
        f"deaths={aggregate.death_count}, betrayals={aggregate.betrayal_count}"
    )
    record(state, config, "aggregate", {
        "pain_sum": aggregate.pain_sum,
        "joy_sum": aggregate.joy_sum,
        "death_count": aggregate.death_count,
        "betrayal_count": aggregate.betrayal_count,
        "event_count": aggregate.event_count,
    })

    state.iteration_count = rng.integers(*ITERATION_COUNT_RANGE)
    log_line(state, f"    ITERATIONS: {state.iteration_count:,} candidate forms evaluated")

    resolution = classify_resolution(
        aggregate, state.entropy, state.destruction_bias, config.self_referential_epsilon
    )

    if resolution.ratio is not None:
        state.ratio = resolution.ratio
        log_line(state, f"    RATIO-COMPUTED: {resolution.ratio:.4f}")

    if resolution.code is not None:
        failure = UnresolvedEquation(resolution.code, resolution.message)
        state.failure = failure
        state.phase = EnginePhase.FAILED
        log_line(state, resolution.fatal_line)
        record(state, config, "resolution_failure", {
            **failure.to_dict(),
            "ratio": resolution.ratio,
            "entropy": state.entropy,
        })
        logger.info("solve failed with code %s", resolution.code.value)
        raise failure

    state.solved_state = RESULT_INCONCLUSIVE
    state.phase = EnginePhase.RESOLVED
    log_line(state, f"RESULT: PRIME_MOVER tentative => {RESULT_INCONCLUSIVE}")
    record(state, config, "resolution", {
        "result": RESULT_INCONCLUSIVE,
        "ratio": resolution.ratio,
        "entropy": state.entropy,
    })
    return RESULT_INCONCLUSIVE
