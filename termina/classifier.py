"""
termina/classifier.py - Keyword Heuristic Classifier

Maps free-text descriptions to WorldEvent attributes with a fixed rule table
of (word patterns, effect) entries. Pure functions, no engine dependency.
"""

import re
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from .types_event import WorldEvent

PAIN_JOY_FLOOR = 0.0
PAIN_JOY_CEILING = 10.0
BASE_PAIN = 1.0
BASE_JOY = 0.5


@dataclass(frozen=True)
class KeywordRule:
    """One heuristic: if any pattern matches, apply the effect once.

    Patterns are regex fragments anchored at a word start; a fragment ending
    in \\b must match a whole word, otherwise it matches a word prefix.
    """
    name: str
    patterns: Tuple[str, ...]
    pain: float = 0.0
    joy: float = 0.0
    death: bool = False
    betrayal: bool = False
    kindness: bool = False
    regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        joined = "|".join(f"(?:{p})" for p in self.patterns)
        object.__setattr__(self, 'regex', re.compile(rf"\b(?:{joined})", re.IGNORECASE))

    def matches(self, text: str) -> bool:
        return self.regex.search(text) is not None


KEYWORD_RULES: Tuple[KeywordRule, ...] = (
    KeywordRule("death", (r"death", r"dies\b", r"died\b", r"dead\b", r"funeral",
                          r"corpse", r"kill", r"murder", r"slain\b", r"graves?\b"),
                pain=4.0, death=True),
    KeywordRule("betrayal", (r"betray", r"broken promise", r"lied\b", r"abandon",
                             r"traitor", r"deceiv", r"looks away\b"),
                pain=2.5, betrayal=True),
    KeywordRule("kindness", (r"rescu", r"sav(?:e|es|ed|ing)\b", r"help(?:s|ed|ing)?\b",
                             r"shar(?:e|es|ed|ing)\b", r"kindness\b", r"gifts?\b",
                             r"heal(?:s|ed|ing)?\b", r"protect"),
                joy=2.5, kindness=True),
    KeywordRule("suffering", (r"wars?\b", r"plague", r"famine", r"starv", r"burn",
                              r"grie(?:f|ve)", r"corrupt", r"ruin", r"horror", r"regret"),
                pain=2.0),
    KeywordRule("joy", (r"laugh", r"celebrat", r"feast", r"festival", r"wedding",
                        r"lov(?:e|es|ed|ing|er|ers)\b", r"harvest", r"danc", r"songs?\b"),
                joy=2.0),
    KeywordRule("silence", (r"silen(?:t|ce)\b", r"forgotten\b", r"unremembered\b",
                            r"nameless\b", r"alone\b"),
                pain=1.0),
)


def _clamp(value: float) -> float:
    return max(PAIN_JOY_FLOOR, min(PAIN_JOY_CEILING, value))


def matching_rules(text: str) -> List[KeywordRule]:
    """Rules with at least one pattern matching the text (case-insensitive)."""
    return [rule for rule in KEYWORD_RULES if rule.matches(text)]


def classify_description(text: str) -> WorldEvent:
    """
    Derive a WorldEvent from free text.

    Args:
        text: Event description

    Returns:
        WorldEvent with pain and joy clamped to [0, 10]

    Raises:
        ValueError: if text is blank
    """
    description = text.strip()
    if not description:
        raise ValueError("Cannot classify an empty description")

    pain = BASE_PAIN
    joy = BASE_JOY
    death = betrayal = kindness = False

    for rule in matching_rules(description):
        pain += rule.pain
        joy += rule.joy
        death = death or rule.death
        betrayal = betrayal or rule.betrayal
        kindness = kindness or rule.kindness

    return WorldEvent(
        description=description,
        pain=_clamp(pain),
        joy=_clamp(joy),
        death=death,
        betrayal=betrayal,
        kindness=kindness,
    )


def classify_many(lines: Iterable[str]) -> List[WorldEvent]:
    """Classify each non-blank line."""
    return [classify_description(line) for line in lines if line.strip()]
