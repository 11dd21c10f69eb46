"""
Question attempt - the ordered step history of one learner on one question.

AttemptContext is what behaviours read. QuestionAttempt is the in-memory
host implementation: it dispatches actions to a behaviour and commits the
pending step when the behaviour keeps it.
"""

import uuid
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Protocol, Tuple

from qbehaviour.kernel.models.step import PendingStep, ProcessResult, Step, StepState
from qbehaviour.logging_config import attempt_id_var, get_logger

if TYPE_CHECKING:
    from qbehaviour.plugins.behaviours.base import Behaviour

logger = get_logger(__name__)


class AttemptContext(Protocol):
    """Read-only view of an attempt, as seen by behaviours."""

    usage_id: Any

    def get_state(self) -> StepState: ...

    def is_finished(self) -> bool: ...

    def is_active(self) -> bool: ...

    def get_last_step(self) -> Optional[Step]: ...

    def get_last_behaviour_var(self, name: str, default: Any = None) -> Any: ...

    def get_last_qt_data(self) -> Dict[str, Any]: ...


class QuestionAttempt:
    """In-memory attempt holding committed steps."""

    def __init__(
        self,
        usage_id: Any,
        attempt_id: Optional[uuid.UUID] = None,
        steps: Optional[List[Step]] = None,
    ):
        self.usage_id = usage_id
        self.id = attempt_id or uuid.uuid4()
        self._steps: List[Step] = list(steps or [])

    @property
    def steps(self) -> Tuple[Step, ...]:
        return tuple(self._steps)

    def get_state(self) -> StepState:
        if not self._steps:
            return StepState.ACTIVE
        return self._steps[-1].state

    def is_finished(self) -> bool:
        return self.get_state().is_finished()

    def is_active(self) -> bool:
        return self.get_state().is_active()

    def get_last_step(self) -> Optional[Step]:
        return self._steps[-1] if self._steps else None

    def get_last_behaviour_var(self, name: str, default: Any = None) -> Any:
        """Value of name in the most recent step that recorded it."""
        for step in reversed(self._steps):
            if step.has_behaviour_var(name):
                return step.get_behaviour_var(name)
        return default

    def get_last_qt_data(self) -> Dict[str, Any]:
        """Response data of the most recent learner step; grading results carry none."""
        for step in reversed(self._steps):
            if not step.has_behaviour_var("gradingresult"):
                return dict(step.qt_data)
        return {}

    def commit(self, pending: PendingStep) -> Step:
        step = pending.build()
        self._steps.append(step)
        return step

    def process_action(self, behaviour: "Behaviour", pending: PendingStep) -> ProcessResult:
        """Run one action through the behaviour and store the step if kept."""
        token = attempt_id_var.set(str(self.id))
        try:
            result = behaviour.process_action(pending)
            if result == ProcessResult.KEEP:
                step = self.commit(pending)
                logger.debug(
                    "Step committed",
                    extra={"usage_id": str(self.usage_id), "state": step.state.value, "step_count": len(self._steps)},
                )
            return result
        finally:
            attempt_id_var.reset(token)
