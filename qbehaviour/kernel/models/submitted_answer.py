"""
Submitted file answers.

The value under the file answer field is one of two variants:
- FreshUpload: files the learner just uploaded, available directly.
- Placeholder: the field was restored from storage (regrade); the files
  must be fetched again from the content store.
A field that is missing or empty is an upload of nothing, never a regrade.
"""

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Union

from pydantic import BaseModel, ConfigDict


class FileRef(BaseModel):
    """Reference to one stored file."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content_hash: str
    size: int = 0


@dataclass(frozen=True)
class FreshUpload:
    """Files uploaded with the current request."""

    files: FrozenSet[FileRef] = field(default_factory=frozenset)

    @classmethod
    def of(cls, files: Iterable[FileRef]) -> "FreshUpload":
        return cls(files=frozenset(files))


@dataclass(frozen=True)
class Placeholder:
    """Stand-in for files that live in the content store under field_name."""

    field_name: str


SubmittedAnswer = Union[FreshUpload, Placeholder]


def as_submitted_answer(value: Any, field_name: str) -> SubmittedAnswer:
    """
    Normalize a raw qt var into a SubmittedAnswer.

    None or "" means nothing was uploaded. Any other non-variant value
    (a stored draft-area id, a hash string) is a stored reference: the
    upload object is gone and the files have to be resolved from storage.
    """
    if isinstance(value, (FreshUpload, Placeholder)):
        return value
    if value is None or value == "":
        return FreshUpload()
    return Placeholder(field_name=field_name)
