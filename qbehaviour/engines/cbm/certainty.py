"""
Certainty-based marking (CBM) - score adjustment by stated certainty.

A correct answer earns more the surer the learner claimed to be; a wrong
answer costs more. All functions here are pure.
"""

from enum import Enum
from typing import Any, Optional


class CertaintyLevel(int, Enum):
    """Certainty levels, ordered from least to most sure."""
    LOW = 1   # Unsure
    MED = 2   # Mid
    HIGH = 3  # Quite sure

    @classmethod
    def parse(cls, value: Any) -> "CertaintyLevel":
        """Accept a level, an int, or a numeric string from submitted form data."""
        if isinstance(value, cls):
            return value
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ValueError(f"Not a certainty level: {value!r}") from None


# Multiplier applied to a positive fraction
RIGHT_SCORE = {
    CertaintyLevel.LOW: 1.0,
    CertaintyLevel.MED: 2.0,
    CertaintyLevel.HIGH: 3.0,
}

# Fixed score replacing a zero/negative fraction
WRONG_SCORE = {
    CertaintyLevel.LOW: 0.0,
    CertaintyLevel.MED: -2.0,
    CertaintyLevel.HIGH: -6.0,
}

CERTAINTY_LABELS = {
    CertaintyLevel.LOW: "C=1 (Unsure: <67%)",
    CertaintyLevel.MED: "C=2 (Mid: >67%)",
    CertaintyLevel.HIGH: "C=3 (Quite sure: >80%)",
}

# Fractions at or below this count as wrong
WRONG_THRESHOLD = 0.00000005


def default_certainty() -> CertaintyLevel:
    """Certainty assumed when the learner never chose one (e.g. regrades)."""
    return CertaintyLevel.LOW


def adjust_fraction(fraction: float, certainty: CertaintyLevel) -> float:
    """
    Map a raw fraction to its CBM score.

    Callers pass fractions already checked against the question's bounds;
    nothing is clamped here.
    """
    certainty = CertaintyLevel.parse(certainty)
    if fraction <= WRONG_THRESHOLD:
        return WRONG_SCORE[certainty]
    return RIGHT_SCORE[certainty] * fraction


def short_label(certainty: CertaintyLevel) -> str:
    return f"C={int(certainty)}"


def certainty_label(certainty: CertaintyLevel) -> str:
    return CERTAINTY_LABELS[CertaintyLevel.parse(certainty)]


def summary_with_certainty(summary: Optional[str], certainty: Optional[CertaintyLevel]) -> Optional[str]:
    """Append '[C=n]' to a summary. No certainty leaves the summary untouched."""
    if certainty is None:
        return summary
    label = short_label(CertaintyLevel.parse(certainty))
    if not summary:
        return f"[{label}]"
    return f"{summary} [{label}]"
