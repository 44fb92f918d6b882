"""
termina/types_result.py - RunResult Dataclass

Immutable run result container handed to sinks.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from .types_config import EngineConfig
from .types_event import WorldEvent
from .types_state import EngineState


@dataclass(frozen=True)
class RunResult:
    """Immutable run result."""
    final_state: EngineState
    status: str  # "INCONCLUSIVE", a failure code, or "UNRESOLVED" if solve never ran
    failure: Optional[Dict[str, Any]]
    summary: Dict[str, Any]
    log: List[str]
    event_order: List[WorldEvent]
    config: EngineConfig

    @property
    def failed(self) -> bool:
        return self.failure is not None
