"""
termina/errors.py - Failure Taxonomy

Classified stop conditions raised by the solve step and the cycle loop.
"""

from enum import Enum
from typing import Any, Dict

from receipts import StopRule


class FailureCode(Enum):
    """Machine-readable failure codes, in solve-step evaluation order."""
    DATA_INSUFFICIENT = "01"
    SELF_REFERENTIAL_LOOP = "02"
    CONFLICTING_AXIOMS = "03"
    UNKNOWN_INTERNAL_ERROR = "99"


REMEDIATION_NOTES: Dict[FailureCode, str] = {
    FailureCode.DATA_INSUFFICIENT: (
        "Feed more events before cycle 13, or events with stronger pain/joy signal."
    ),
    FailureCode.SELF_REFERENTIAL_LOOP: (
        "Joy and pain cancel out. Introduce an asymmetric event to break the loop."
    ),
    FailureCode.CONFLICTING_AXIOMS: (
        "Update required: catalyst deviation greater than projected. "
        "Recalibrating baseline..."
    ),
    FailureCode.UNKNOWN_INTERNAL_ERROR: (
        "Unclassified fault inside the cycle loop. Inspect the run log."
    ),
}


class UnresolvedEquation(StopRule):
    """Terminal failure of a run. Carries a FailureCode and a message."""

    def __init__(self, code: FailureCode, message: str):
        super().__init__(f"[{code.value}] {message}")
        self.code = code
        self.message = message

    @property
    def remediation(self) -> str:
        return REMEDIATION_NOTES[self.code]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "name": self.code.name,
            "message": self.message,
            "remediation": self.remediation,
        }


class EngineHalted(StopRule):
    """Raised when a cycle is requested from an engine that already failed."""
    pass
