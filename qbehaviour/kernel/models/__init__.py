"""
Kernel Data Models

Attempt/step state models (pydantic), question settings, and the
SQLAlchemy table for per-field free-text settings.
"""

from qbehaviour.kernel.models.base import Base
from qbehaviour.kernel.models.step import PendingStep, ProcessResult, Step, StepState
from qbehaviour.kernel.models.attempt import AttemptContext, QuestionAttempt
from qbehaviour.kernel.models.submitted_answer import (
    FileRef,
    FreshUpload,
    Placeholder,
    SubmittedAnswer,
    as_submitted_answer,
)
from qbehaviour.kernel.models.question import (
    FileSubmissionQuestion,
    FreeTextFieldConfig,
    QuestionConfig,
    QuestionType,
)
from qbehaviour.kernel.models.freetext_field import FreeTextField

__all__ = [
    "Base",
    "PendingStep",
    "ProcessResult",
    "Step",
    "StepState",
    "AttemptContext",
    "QuestionAttempt",
    "FileRef",
    "FreshUpload",
    "Placeholder",
    "SubmittedAnswer",
    "as_submitted_answer",
    "FileSubmissionQuestion",
    "FreeTextFieldConfig",
    "QuestionConfig",
    "QuestionType",
    "FreeTextField",
]
