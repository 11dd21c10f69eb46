"""
Question behaviours.

- immediate_grading: submit once, graded asynchronously
- immediate_cbm: the same with certainty-based marking (see qbehaviour.orchestration)
"""

from qbehaviour.plugins.behaviours.base import Behaviour
from qbehaviour.plugins.behaviours.immediate import ImmediateGradingBehaviour

__all__ = [
    "Behaviour",
    "ImmediateGradingBehaviour",
]
