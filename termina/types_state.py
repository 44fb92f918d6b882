"""
termina/types_state.py - EngineState and Aggregate Dataclasses

Mutable engine state for a single run, plus the frozen solve-step aggregate.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .constants import EnginePhase
from .errors import UnresolvedEquation
from .types_event import WorldEvent


@dataclass(frozen=True)
class Aggregate:
    """Totals over the ingested-event buffer, computed by the solve step."""
    pain_sum: float
    joy_sum: float
    death_count: int
    betrayal_count: int
    event_count: int

    @classmethod
    def from_events(cls, events: List[WorldEvent]) -> "Aggregate":
        return cls(
            pain_sum=sum(e.pain for e in events),
            joy_sum=sum(e.joy for e in events),
            death_count=sum(1 for e in events if e.death),
            betrayal_count=sum(1 for e in events if e.betrayal),
            event_count=len(events),
        )


@dataclass
class EngineState:
    """Mutable engine state."""
    wrath: float = 0.0
    entropy: float = 0.0
    destruction_bias: float = 0.0
    alignment_drift: float = 0.0
    ingested_events: List[WorldEvent] = field(default_factory=list)
    cycles_run: int = 0
    solved_state: Optional[str] = None
    phase: EnginePhase = EnginePhase.IDLE
    failure: Optional[UnresolvedEquation] = None

    # Append-only outputs
    log: List[str] = field(default_factory=list)
    receipt_ledger: List[dict] = field(default_factory=list)

    # Solve-step outputs
    aggregate: Optional[Aggregate] = None
    ratio: Optional[float] = None
    iteration_count: Optional[int] = None

    # Per-cycle traces
    wrath_trace: List[float] = field(default_factory=list)
    entropy_trace: List[float] = field(default_factory=list)
    guesses: List[str] = field(default_factory=list)

    @property
    def resolved(self) -> bool:
        """True once a terminal resolution (success or failure) has occurred."""
        return self.solved_state is not None or self.failure is not None

    def snapshot(self) -> Dict[str, float]:
        """Final scalar summary for display."""
        return {
            "wrath": self.wrath,
            "entropy": self.entropy,
            "destruction_bias": self.destruction_bias,
            "alignment_drift": self.alignment_drift,
            "cycles_run": self.cycles_run,
            "events_ingested": len(self.ingested_events),
        }
