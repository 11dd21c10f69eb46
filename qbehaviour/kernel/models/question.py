"""
Question-side models: submission settings and the question type contract.
"""

from typing import Any, List, Mapping, Optional, Protocol

from pydantic import BaseModel, Field

from qbehaviour.config import get_settings
from qbehaviour.kernel.models.submitted_answer import FreshUpload, Placeholder


class QuestionConfig(BaseModel):
    """Per-question submission settings."""

    id: int
    enable_file_submissions: bool = True
    enable_free_text_submissions: bool = False
    fts_max_num_fields: int = Field(default=0, ge=0)
    fts_auto_generate_filenames: bool = True

    @property
    def file_submission_required(self) -> bool:
        """Files are the only way to answer, so a submission without them is unusable."""
        return self.enable_file_submissions and not self.enable_free_text_submissions


class FreeTextFieldConfig(BaseModel):
    """Filename settings for one free-text input."""

    preset_filename: bool = False
    filename: Optional[str] = None


class QuestionType(Protocol):
    """What a behaviour needs from the question it drives."""

    config: QuestionConfig

    def get_min_fraction(self) -> float: ...

    def get_max_fraction(self) -> float: ...

    def is_gradable_response(self, response: Mapping[str, Any]) -> bool: ...

    def is_complete_response(self, response: Mapping[str, Any]) -> bool: ...

    def is_same_response(self, previous: Mapping[str, Any], response: Mapping[str, Any]) -> bool: ...

    def summarise_response(self, response: Mapping[str, Any]) -> Optional[str]: ...

    def get_right_answer_summary(self) -> Optional[str]: ...


class FileSubmissionQuestion:
    """
    Question accepting uploaded files and/or free-text fields.

    Response fields: the file answer field (a SubmittedAnswer), and
    answertext{i} / answerfilename{i} for i < fts_max_num_fields.
    Grading is external, so there is no right answer to summarise.
    """

    def __init__(self, config: QuestionConfig, file_field: Optional[str] = None):
        self.config = config
        self.file_field = file_field or get_settings().file_answer_field

    @property
    def id(self) -> int:
        return self.config.id

    def get_min_fraction(self) -> float:
        return 0.0

    def get_max_fraction(self) -> float:
        return 1.0

    def _texts(self, response: Mapping[str, Any]) -> List[str]:
        if not self.config.enable_free_text_submissions:
            return []
        return [
            response.get(f"answertext{i}") or ""
            for i in range(self.config.fts_max_num_fields)
        ]

    def _has_files(self, response: Mapping[str, Any]) -> bool:
        if not self.config.enable_file_submissions:
            return False
        answer = response.get(self.file_field)
        if isinstance(answer, FreshUpload):
            return bool(answer.files)
        # Restored from storage; existence is checked at capture time
        return isinstance(answer, Placeholder) or bool(answer)

    def is_gradable_response(self, response: Mapping[str, Any]) -> bool:
        return self._has_files(response) or any(text != "" for text in self._texts(response))

    def is_complete_response(self, response: Mapping[str, Any]) -> bool:
        return self.is_gradable_response(response)

    def is_same_response(self, previous: Mapping[str, Any], response: Mapping[str, Any]) -> bool:
        keys = [self.file_field]
        for i in range(self.config.fts_max_num_fields):
            keys.extend((f"answertext{i}", f"answerfilename{i}"))
        return all(
            (previous.get(key) or None) == (response.get(key) or None)
            for key in keys
        )

    def summarise_response(self, response: Mapping[str, Any]) -> Optional[str]:
        parts = []
        answer = response.get(self.file_field)
        if self.config.enable_file_submissions and isinstance(answer, FreshUpload) and answer.files:
            names = sorted(f.filename for f in answer.files)
            parts.append("Files: " + ", ".join(names))
        texts = [
            response.get(f"answerfilename{i}") or f"field {i + 1}"
            for i, text in enumerate(self._texts(response))
            if text != ""
        ]
        if texts:
            parts.append("Text: " + ", ".join(texts))
        return "; ".join(parts) or None

    def get_right_answer_summary(self) -> Optional[str]:
        return None
