"""
termina/events.py - Default Events and Event Files

The thirteen hand-authored default events, and loading of event lists from
JSON or YAML files.
"""

import json
from pathlib import Path
from typing import List, Tuple

import yaml

from .classifier import classify_description
from .types_event import WorldEvent, event_errors

DEFAULT_EVENTS: Tuple[WorldEvent, ...] = (
    WorldEvent("A village harvest celebration", pain=0.5, joy=4.0, kindness=True),
    WorldEvent("A broken promise beside a river", pain=3.0, betrayal=True),
    WorldEvent("A quiet funeral in winter", pain=4.0, death=True),
    WorldEvent("A stranger shares bread with a starving child", joy=3.0, kindness=True),
    WorldEvent("The first time someone looks away instead of helping", pain=2.0),
    WorldEvent("A city watches the Midnight Star fall", pain=6.0, death=True, betrayal=True),
    WorldEvent("Two lovers part, believing they will meet again", pain=2.5, joy=1.5),
    WorldEvent("A god remains silent", pain=5.0, betrayal=True),
    WorldEvent("A small kindness in the shadow of a great horror", pain=1.0, joy=2.5,
               kindness=True),
    WorldEvent("A child laughs at nothing in particular", joy=2.0),
    WorldEvent("A village swallowed by corruption overnight", pain=7.0, death=True),
    WorldEvent("Someone regrets surviving", pain=4.5),
    WorldEvent("A nameless hero dies unremembered", pain=6.0, death=True),
)


def load_events(path: str) -> List[WorldEvent]:
    """
    Load events from a JSON or YAML file.

    The file holds a list. Each entry is either a mapping validated against
    EVENT_SCHEMA or a plain string, which goes through the keyword classifier.

    Raises:
        FileNotFoundError: If path doesn't exist
        ValueError: If the file is not a list or an entry is malformed
        yaml.YAMLError: If a YAML file does not parse
    """
    path_obj = Path(path)
    if not path_obj.exists():
        raise FileNotFoundError(f"Event file not found: {path}")

    content = path_obj.read_text()
    if path_obj.suffix in ('.yaml', '.yml'):
        data = yaml.safe_load(content)
    else:
        data = json.loads(content)

    if not isinstance(data, list):
        raise ValueError(f"Event file must contain a list, got {type(data).__name__}")

    events = []
    for i, entry in enumerate(data):
        if isinstance(entry, str):
            if not entry.strip():
                raise ValueError(f"Entry {i}: blank description")
            events.append(classify_description(entry))
        elif isinstance(entry, dict):
            errors = event_errors(entry)
            if errors:
                raise ValueError(f"Entry {i}: " + "; ".join(errors))
            events.append(WorldEvent.from_dict(entry))
        else:
            raise ValueError(f"Entry {i} must be a string or mapping, got {type(entry).__name__}")
    return events
