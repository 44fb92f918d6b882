"""
termina/types_event.py - WorldEvent Dataclass

Immutable input record fed to the engine, one per cycle, and the Draft 2020-12
schema that event-file mappings must satisfy.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, List

from jsonschema import Draft202012Validator

# =============================================================================
# JSON Schema Definition (Draft 2020-12)
# =============================================================================

EVENT_SCHEMA: Dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "WorldEvent",
    "type": "object",
    "required": ["description"],
    "properties": {
        "description": {"type": "string", "minLength": 1, "pattern": r"\S"},
        "pain": {"type": "number"},
        "joy": {"type": "number"},
        "death": {"type": "boolean"},
        "betrayal": {"type": "boolean"},
        "kindness": {"type": "boolean"},
    },
    "additionalProperties": False,
}

Draft202012Validator.check_schema(EVENT_SCHEMA)
_EVENT_VALIDATOR = Draft202012Validator(EVENT_SCHEMA)


def event_errors(data: Any) -> List[str]:
    """Schema errors for one event mapping, as "field: message" strings."""
    return [
        f"{'/'.join(str(p) for p in err.absolute_path) or '<root>'}: {err.message}"
        for err in _EVENT_VALIDATOR.iter_errors(data)
    ]


@dataclass(frozen=True)
class WorldEvent:
    """A small piece of reality for the engine to ingest.

    pain and joy are non-negative by convention; the engine does not enforce it.
    """
    description: str
    pain: float = 0.0
    joy: float = 0.0
    death: bool = False
    betrayal: bool = False
    kindness: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WorldEvent":
        """
        Build from a mapping that satisfies EVENT_SCHEMA.

        Raises:
            ValueError: listing every schema violation
        """
        errors = event_errors(data)
        if errors:
            raise ValueError("Invalid WorldEvent: " + "; ".join(errors))
        return cls(
            description=data["description"],
            pain=float(data.get("pain", 0.0)),
            joy=float(data.get("joy", 0.0)),
            death=data.get("death", False),
            betrayal=data.get("betrayal", False),
            kindness=data.get("kindness", False),
        )
