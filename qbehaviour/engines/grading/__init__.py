"""Grading Engine - dispatch of captured responses to the external grader."""

from qbehaviour.engines.grading.service import GradingJob, GradingService, QueuedGradingService

__all__ = [
    "GradingJob",
    "GradingService",
    "QueuedGradingService",
]
