"""
Grading service - hands captured responses to an external grader.

Grading is asynchronous: the service queues the job and reports the step
as pending. The grader later delivers its result as a 'gradingresult'
action on the attempt, with the raw 'fraction' as a behaviour var.
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Deque, Dict, List, Protocol, Set

from qbehaviour.kernel.models.attempt import AttemptContext
from qbehaviour.kernel.models.step import StepState
from qbehaviour.kernel.models.submitted_answer import FileRef
from qbehaviour.logging_config import get_logger

logger = get_logger(__name__)


class GradingService(Protocol):
    def grade_response_async(
        self,
        attempt: AttemptContext,
        files: Set[FileRef],
        freetext: Dict[str, str],
    ) -> StepState: ...


@dataclass
class GradingJob:
    """One queued grading request."""
    usage_id: Any
    files: Set[FileRef] = field(default_factory=set)
    freetext: Dict[str, str] = field(default_factory=dict)


class QueuedGradingService:
    """FIFO in-memory queue of grading jobs."""

    def __init__(self):
        self._jobs: Deque[GradingJob] = deque()

    def grade_response_async(
        self,
        attempt: AttemptContext,
        files: Set[FileRef],
        freetext: Dict[str, str],
    ) -> StepState:
        job = GradingJob(usage_id=attempt.usage_id, files=set(files), freetext=dict(freetext))
        self._jobs.append(job)
        logger.info(
            "Grading job queued",
            extra={"usage_id": str(attempt.usage_id), "file_count": len(files), "freetext_count": len(freetext)},
        )
        return StepState.PENDING_GRADE

    def __len__(self) -> int:
        return len(self._jobs)

    def drain(self) -> List[GradingJob]:
        """Remove and return all queued jobs, oldest first."""
        jobs = list(self._jobs)
        self._jobs.clear()
        return jobs
