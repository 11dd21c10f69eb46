"""
CBM Engine - certainty-based marking.

Scores by certainty (right multiplier / wrong score):
- C=1 Unsure:     x1 /  0
- C=2 Mid:        x2 / -2
- C=3 Quite sure: x3 / -6
"""

from qbehaviour.engines.cbm.certainty import (
    CertaintyLevel,
    adjust_fraction,
    certainty_label,
    default_certainty,
    summary_with_certainty,
)

__all__ = [
    "CertaintyLevel",
    "adjust_fraction",
    "certainty_label",
    "default_certainty",
    "summary_with_certainty",
]
