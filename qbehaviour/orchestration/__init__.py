"""Orchestration layer - the CBM submission state machine."""

from qbehaviour.orchestration.state_machine import SubmissionStateMachine, create_cbm_behaviour
from qbehaviour.kernel.models.step import ProcessResult, StepState

__all__ = [
    "SubmissionStateMachine",
    "create_cbm_behaviour",
    "ProcessResult",
    "StepState",
]
