"""
termina/cycle.py - Core Cycle Loop and Driver

Main entry points: run_cycle, run_simulation, run_variants.
"""

import logging
from typing import List, Optional, Sequence

from receipts import ledger_root

from .constants import EnginePhase, RESULT_INCONCLUSIVE
from .engine import (
    log_line, record, ingest_event, attempt_partial_inference, check_for_instability,
)
from .errors import EngineHalted, FailureCode, UnresolvedEquation
from .events import DEFAULT_EVENTS
from .randomness import NumpyRandomSource, RandomSource
from .resolution import solve_prime_mover
from .types_config import EngineConfig, OMEGA
from .types_event import WorldEvent
from .types_result import RunResult
from .types_state import EngineState

logger = logging.getLogger(__name__)

STATUS_UNRESOLVED = "UNRESOLVED"  # Run ended before the solve cycle


def initialize_state(config: EngineConfig) -> EngineState:
    """Fresh engine state for one run."""
    state = EngineState()
    record(state, config, "engine_init", {
        "catalyst": config.catalyst.name,
        "emotional_noise": config.catalyst.emotional_noise,
        "track_bias_alignment": config.track_bias_alignment,
        "self_referential_epsilon": config.self_referential_epsilon,
        "max_cycles_before_break": config.max_cycles_before_break,
    })
    return state


def run_cycle(state: EngineState, event: WorldEvent, config: EngineConfig,
              rng: RandomSource) -> None:
    """
    One cycle: ingest, infer, check stability, and solve on the break cycle.

    Args:
        state: Current EngineState (mutated in place)
        event: The event for this cycle
        config: EngineConfig
        rng: RandomSource

    Raises:
        EngineHalted: if the engine already failed
        UnresolvedEquation: if the solve step fails on this cycle
    """
    if state.phase is EnginePhase.FAILED:
        raise EngineHalted(
            f"Engine failed at cycle {state.cycles_run}; no further cycles accepted"
        )

    state.cycles_run += 1
    if state.phase is EnginePhase.IDLE:
        state.phase = EnginePhase.RUNNING
    log_line(state, "----- CYCLE BEGIN -----")
    record(state, config, "cycle_begin", {})

    ingest_event(state, event, config, rng)
    attempt_partial_inference(state, config, rng)
    check_for_instability(state, config, rng)

    if state.cycles_run == config.max_cycles_before_break:
        solve_prime_mover(state, config, rng)

    log_line(state, "----- CYCLE END -----")
    record(state, config, "cycle_end", {"wrath": state.wrath, "entropy": state.entropy})


def _status(state: EngineState) -> str:
    if state.failure is not None:
        return state.failure.code.value
    if state.solved_state is not None:
        return state.solved_state
    return STATUS_UNRESOLVED


def run_simulation(events: Optional[Sequence[WorldEvent]] = None,
                   config: EngineConfig = OMEGA,
                   rng: Optional[RandomSource] = None,
                   sink=None,
                   shuffle: bool = True,
                   stop_on_resolution: bool = True) -> RunResult:
    """
    Run one complete simulation.

    Args:
        events: Events to feed (defaults to the thirteen default events)
        config: EngineConfig with catalyst and variant flags
        rng: RandomSource (defaults to NumpyRandomSource seeded from config)
        sink: Optional ReportSink that receives the finished RunResult
        shuffle: Shuffle the events once before the loop
        stop_on_resolution: Stop feeding once the engine reaches INCONCLUSIVE

    Returns:
        RunResult with final state, status, failure details and log
    """
    if events is None:
        events = DEFAULT_EVENTS
    if rng is None:
        rng = NumpyRandomSource(config.random_seed)

    order = rng.shuffle(list(events)) if shuffle else list(events)
    state = initialize_state(config)

    try:
        for event in order:
            run_cycle(state, event, config, rng)
            if stop_on_resolution and state.solved_state == RESULT_INCONCLUSIVE:
                break
    except UnresolvedEquation as e:
        logger.info("run ended in failure %s: %s", e.code.value, e.message)
    except Exception as e:
        logger.exception("unclassified fault in cycle loop")
        failure = UnresolvedEquation(
            FailureCode.UNKNOWN_INTERNAL_ERROR, f"{type(e).__name__}: {e}"
        )
        state.failure = failure
        state.phase = EnginePhase.FAILED
        log_line(state, "FATAL: UNKNOWN_INTERNAL_ERROR inside cycle loop.")
        record(state, config, "resolution_failure", failure.to_dict())

    status = _status(state)
    record(state, config, "run_complete", {
        "status": status,
        "cycles_run": state.cycles_run,
        "ledger_root": ledger_root(state.receipt_ledger),
    })

    result = RunResult(
        final_state=state,
        status=status,
        failure=state.failure.to_dict() if state.failure is not None else None,
        summary=state.snapshot(),
        log=list(state.log),
        event_order=order,
        config=config,
    )

    if sink is not None:
        sink.emit(result)
    return result


def run_variants(configs: List[EngineConfig],
                 events: Optional[Sequence[WorldEvent]] = None) -> List[RunResult]:
    """
    Run several configurations in sequence, each with its own seeded source.

    Args:
        configs: List of EngineConfig objects
        events: Events shared by every run

    Returns:
        List of RunResult objects
    """
    results = []
    for config in configs:
        result = run_simulation(events, config=config)
        results.append(result)
    return results
