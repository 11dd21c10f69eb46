"""
Free-text field settings lookup.
"""

from typing import Dict, Optional, Protocol, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from qbehaviour.kernel.models.freetext_field import FreeTextField
from qbehaviour.kernel.models.question import FreeTextFieldConfig


class ConfigLookup(Protocol):
    def get(self, question_id: int, field_index: int) -> Optional[FreeTextFieldConfig]: ...


class InMemoryConfigLookup:
    """Settings held in a dict keyed by (question_id, field_index)."""

    def __init__(self, fields: Optional[Dict[Tuple[int, int], FreeTextFieldConfig]] = None):
        self._fields = dict(fields or {})

    def set(self, question_id: int, field_index: int, config: FreeTextFieldConfig) -> None:
        self._fields[(question_id, field_index)] = config

    def get(self, question_id: int, field_index: int) -> Optional[FreeTextFieldConfig]:
        return self._fields.get((question_id, field_index))


class SqlConfigLookup:
    """Settings read from the qtype_freetext_fields table."""

    def __init__(self, session: Session):
        self.session = session

    def get(self, question_id: int, field_index: int) -> Optional[FreeTextFieldConfig]:
        row = self.session.execute(
            select(FreeTextField).where(
                FreeTextField.question_id == question_id,
                FreeTextField.input_index == field_index,
            )
        ).scalar_one_or_none()
        if row is None:
            return None
        return FreeTextFieldConfig(preset_filename=row.preset_filename, filename=row.filename)
