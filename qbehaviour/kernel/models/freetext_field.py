"""
FreeTextField model - per-input filename settings of a free-text question.

One row per (question, input index). A row with preset_filename set forces
the stored filename; a row without it only supplies a fallback.
"""

from typing import Optional

from sqlalchemy import Boolean, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from qbehaviour.kernel.models.base import Base


class FreeTextField(Base):
    """Filename settings for one free-text input of a question."""

    __tablename__ = "qtype_freetext_fields"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    question_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    input_index: Mapped[int] = mapped_column(Integer, nullable=False)
    preset_filename: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    filename: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    __table_args__ = (
        UniqueConstraint("question_id", "input_index", name="uq_freetext_field_question_index"),
    )

    def __repr__(self) -> str:
        return f"<FreeTextField q={self.question_id} #{self.input_index} {self.filename!r}>"
