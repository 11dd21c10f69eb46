"""
State machine for asynchronously graded submissions with certainty-based marking.

Lifecycle of one attempt:
    ACTIVE -> INVALID           submit without a gradable response or certainty
    ACTIVE -> PENDING_GRADE     submit queued for grading
    PENDING_GRADE -> GRADED_*   grading result, fraction rewritten by certainty
    PENDING_GRADE -> NEEDS_GRADING  grading result without a fraction
Submissions on a finished attempt are discarded and never stored.
"""

from typing import Any, Dict, Optional

from qbehaviour.engines.cbm.certainty import (
    CertaintyLevel,
    adjust_fraction,
    default_certainty,
    summary_with_certainty,
)
from qbehaviour.kernel.models.step import PendingStep, ProcessResult, Step, StepState
from qbehaviour.logging_config import get_logger
from qbehaviour.plugins.behaviours.base import AnyStep, Behaviour
from qbehaviour.plugins.behaviours.immediate import ImmediateGradingBehaviour

logger = get_logger(__name__)

CERTAINTY_VAR = "certainty"
RAW_FRACTION_VAR = "_rawfraction"
ASSUMED_CERTAINTY_VAR = "_assumedcertainty"


def _parse_certainty(value: Any) -> Optional[CertaintyLevel]:
    if value is None:
        return None
    try:
        return CertaintyLevel.parse(value)
    except ValueError:
        logger.warning("Ignoring unknown certainty value", extra={"certainty": str(value)})
        return None


class SubmissionStateMachine(Behaviour):
    """
    Immediate grading with certainty-based marking.

    Wraps a base behaviour: every decision that does not involve certainty
    is delegated to it, and the CBM rules are layered on top.
    """

    def __init__(self, base: ImmediateGradingBehaviour):
        self.base = base
        self.attempt = base.attempt
        self.question = base.question

    @property
    def name(self) -> str:
        return "immediate_cbm"

    def get_min_fraction(self) -> float:
        return adjust_fraction(self.base.get_min_fraction(), CertaintyLevel.HIGH)

    def get_max_fraction(self) -> float:
        return adjust_fraction(self.base.get_max_fraction(), CertaintyLevel.HIGH)

    def get_expected_data(self) -> Dict[str, type]:
        if self.attempt.is_active():
            return {"submit": bool, CERTAINTY_VAR: int}
        return self.base.get_expected_data()

    def get_right_answer_summary(self) -> Optional[str]:
        return summary_with_certainty(self.base.get_right_answer_summary(), CertaintyLevel.HIGH)

    def get_correct_response(self) -> Dict[str, Any]:
        if self.attempt.is_active():
            return {CERTAINTY_VAR: CertaintyLevel.HIGH}
        return {}

    def get_resume_data(self) -> Dict[str, Any]:
        data = dict(self.base.get_resume_data())
        last_certainty = self.attempt.get_last_behaviour_var(CERTAINTY_VAR)
        if last_certainty:
            data["-" + CERTAINTY_VAR] = last_certainty
        return data

    def is_same_response(self, step: AnyStep) -> bool:
        return self.base.is_same_response(step) and (
            _parse_certainty(self.attempt.get_last_behaviour_var(CERTAINTY_VAR))
            == _parse_certainty(step.get_behaviour_var(CERTAINTY_VAR))
        )

    def is_complete_response(self, step: AnyStep) -> bool:
        return self.base.is_complete_response(step) and step.has_behaviour_var(CERTAINTY_VAR)

    def process_submit(self, pending: PendingStep) -> ProcessResult:
        usage_id = str(self.attempt.usage_id)
        if self.attempt.is_finished():
            logger.info("Submit discarded, attempt finished", extra={"usage_id": usage_id})
            return ProcessResult.DISCARD

        certainty = _parse_certainty(pending.get_behaviour_var(CERTAINTY_VAR))
        if not self.question.is_gradable_response(pending.qt_data) or certainty is None:
            pending.set_state(StepState.INVALID)
            logger.info(
                "Submit stored as invalid",
                extra={"usage_id": usage_id, "has_certainty": certainty is not None},
            )
            return ProcessResult.KEEP

        pending.set_behaviour_var(CERTAINTY_VAR, certainty)
        state = self.base.start_grading(pending)
        logger.info(
            "Submit dispatched for grading",
            extra={"usage_id": usage_id, "state": state.value, "certainty": int(certainty)},
        )
        return ProcessResult.KEEP

    def process_grading_result(self, pending: PendingStep) -> ProcessResult:
        status = self.base.process_grading_result(pending)
        if status != ProcessResult.KEEP:
            return status

        last = self.attempt.get_last_step()
        certainty = None
        if last is not None and last.has_behaviour_var(CERTAINTY_VAR):
            certainty = _parse_certainty(last.get_behaviour_var(CERTAINTY_VAR))
        if certainty is None:
            certainty = default_certainty()
            pending.set_behaviour_var(ASSUMED_CERTAINTY_VAR, certainty)
            logger.warning(
                "No certainty on record, assuming default",
                extra={"usage_id": str(self.attempt.usage_id), "certainty": int(certainty)},
            )

        fraction = pending.get_fraction()
        if fraction is not None:
            pending.set_behaviour_var(RAW_FRACTION_VAR, fraction)
            pending.set_fraction(adjust_fraction(fraction, certainty))
            logger.debug(
                "Fraction adjusted",
                extra={"raw_fraction": fraction, "fraction": pending.get_fraction(), "certainty": int(certainty)},
            )
        pending.set_new_response_summary(
            summary_with_certainty(pending.get_new_response_summary(), certainty)
        )
        return status

    def summarise_action(self, step: Step) -> str:
        summary = self.base.summarise_action(step)
        if step.has_behaviour_var(CERTAINTY_VAR):
            summary = summary_with_certainty(summary, _parse_certainty(step.get_behaviour_var(CERTAINTY_VAR)))
        return summary


def create_cbm_behaviour(attempt, question, capture, grading) -> SubmissionStateMachine:
    """Build the CBM state machine around a fresh immediate-grading delegate."""
    return SubmissionStateMachine(ImmediateGradingBehaviour(attempt, question, capture, grading))
