"""
Immediate grading behaviour - submit once, graded by an external grader.

Used on its own for questions without certainty, and as the delegate of
the CBM state machine.
"""

from typing import Any, Dict, Optional

from qbehaviour.engines.capture.response_capture import ResponseCapture
from qbehaviour.engines.grading.service import GradingService
from qbehaviour.kernel.models.attempt import AttemptContext
from qbehaviour.kernel.models.question import QuestionType
from qbehaviour.kernel.models.step import PendingStep, ProcessResult, Step, StepState
from qbehaviour.logging_config import get_logger
from qbehaviour.plugins.behaviours.base import AnyStep, Behaviour

logger = get_logger(__name__)

GRADER_FRACTION_VAR = "fraction"


class ImmediateGradingBehaviour(Behaviour):
    """
    Learner submits once; the response is captured and queued for grading.

    The grader reports back through a 'gradingresult' action carrying the
    raw 'fraction' as a behaviour var (empty when a human has to grade
    it), so the learner's response data stays the latest qt data.
    """

    def __init__(
        self,
        attempt: AttemptContext,
        question: QuestionType,
        capture: ResponseCapture,
        grading: GradingService,
    ):
        self.attempt = attempt
        self.question = question
        self.capture = capture
        self.grading = grading

    @property
    def name(self) -> str:
        return "immediate_grading"

    def get_min_fraction(self) -> float:
        return self.question.get_min_fraction()

    def get_max_fraction(self) -> float:
        return self.question.get_max_fraction()

    def get_expected_data(self) -> Dict[str, type]:
        if self.attempt.is_active():
            return {"submit": bool}
        return {}

    def get_right_answer_summary(self) -> Optional[str]:
        return self.question.get_right_answer_summary()

    def get_correct_response(self) -> Dict[str, Any]:
        return {}

    def get_resume_data(self) -> Dict[str, Any]:
        return self.attempt.get_last_qt_data()

    def is_same_response(self, step: AnyStep) -> bool:
        return self.question.is_same_response(self.attempt.get_last_qt_data(), step.qt_data)

    def is_complete_response(self, step: AnyStep) -> bool:
        return self.question.is_complete_response(step.qt_data)

    def start_grading(self, pending: PendingStep) -> StepState:
        """Capture the response, hand it to the grader, record the resulting state."""
        bundle = self.capture.capture(pending.qt_data, self.question.config, self.attempt.usage_id)
        state = self.grading.grade_response_async(self.attempt, bundle.files, bundle.freetext)
        pending.set_state(state)
        pending.set_new_response_summary(self.question.summarise_response(pending.qt_data))
        return state

    def process_submit(self, pending: PendingStep) -> ProcessResult:
        if self.attempt.is_finished():
            return ProcessResult.DISCARD

        if not self.question.is_gradable_response(pending.qt_data):
            pending.set_state(StepState.INVALID)
        else:
            self.start_grading(pending)
        return ProcessResult.KEEP

    def process_grading_result(self, pending: PendingStep) -> ProcessResult:
        if self.attempt.get_state() != StepState.PENDING_GRADE:
            logger.info(
                "Grading result ignored, no grading pending",
                extra={"usage_id": str(self.attempt.usage_id), "state": self.attempt.get_state().value},
            )
            return ProcessResult.DISCARD

        raw = pending.get_behaviour_var(GRADER_FRACTION_VAR)
        if raw is None or raw == "":
            pending.set_state(StepState.NEEDS_GRADING)
        else:
            fraction = float(raw)
            if not self.get_min_fraction() <= fraction <= self.get_max_fraction():
                raise ValueError(
                    f"Grader fraction {fraction} outside "
                    f"[{self.get_min_fraction()}, {self.get_max_fraction()}]"
                )
            pending.set_fraction(fraction)
            pending.set_state(StepState.graded_state_for_fraction(fraction))

        last = self.attempt.get_last_step()
        pending.set_new_response_summary(last.response_summary if last else None)
        return ProcessResult.KEEP

    def summarise_action(self, step: Step) -> str:
        summary = step.response_summary or "empty response"
        if step.has_behaviour_var("gradingresult"):
            if step.fraction is None:
                return f"Graded: {summary} (needs manual grading)"
            return f"Graded: {summary}"
        if step.has_behaviour_var("submit"):
            return f"Submitted: {summary}"
        return f"Saved: {summary}"
