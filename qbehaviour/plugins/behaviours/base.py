"""
Base Behaviour - Abstract interface for all question behaviours.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Union

from qbehaviour.kernel.models.attempt import AttemptContext
from qbehaviour.kernel.models.question import QuestionType
from qbehaviour.kernel.models.step import PendingStep, ProcessResult, Step, StepState

AnyStep = Union[Step, PendingStep]


class Behaviour(ABC):
    """
    Abstract base class for question behaviours.

    A behaviour decides, for one question attempt:
    - The score range and the data the form must submit
    - Whether a response is complete, or unchanged since last time
    - How submit, save and grading-result actions change the attempt
    - How each committed step is described in the attempt history

    Subclasses expose the attempt they drive as `attempt` and its
    question as `question`.
    """

    attempt: AttemptContext
    question: QuestionType

    @property
    @abstractmethod
    def name(self) -> str:
        """Behaviour name."""
        pass

    @abstractmethod
    def get_min_fraction(self) -> float:
        pass

    @abstractmethod
    def get_max_fraction(self) -> float:
        pass

    @abstractmethod
    def get_expected_data(self) -> Dict[str, type]:
        """Behaviour fields the form must post, with their types."""
        pass

    @abstractmethod
    def get_right_answer_summary(self) -> Optional[str]:
        pass

    @abstractmethod
    def get_correct_response(self) -> Dict[str, Any]:
        pass

    @abstractmethod
    def get_resume_data(self) -> Dict[str, Any]:
        """Data needed to restart the attempt where the learner left it."""
        pass

    @abstractmethod
    def is_same_response(self, step: AnyStep) -> bool:
        pass

    @abstractmethod
    def is_complete_response(self, step: AnyStep) -> bool:
        pass

    def process_save(self, pending: PendingStep) -> ProcessResult:
        """Store a draft response without grading it."""
        if not self.attempt.is_active():
            return ProcessResult.DISCARD
        if self.is_same_response(pending):
            return ProcessResult.DISCARD
        if self.is_complete_response(pending):
            pending.set_state(StepState.ACTIVE)
        else:
            pending.set_state(StepState.INVALID)
        pending.set_new_response_summary(self.question.summarise_response(pending.qt_data))
        return ProcessResult.KEEP

    @abstractmethod
    def process_submit(self, pending: PendingStep) -> ProcessResult:
        pass

    @abstractmethod
    def process_grading_result(self, pending: PendingStep) -> ProcessResult:
        pass

    @abstractmethod
    def summarise_action(self, step: Step) -> str:
        pass

    def process_action(self, pending: PendingStep) -> ProcessResult:
        """Route a pending step by the action flag it carries."""
        if pending.has_behaviour_var("gradingresult"):
            return self.process_grading_result(pending)
        if pending.has_behaviour_var("submit"):
            return self.process_submit(pending)
        return self.process_save(pending)
