"""
Content store - where previously submitted files are kept.

Files are filed under (context id, field name). A question usage belongs
to exactly one context; regrades find the context through the usage id.
"""

from collections import defaultdict
from typing import Any, Dict, Iterable, Optional, Protocol, Set, Tuple

from qbehaviour.kernel.models.submitted_answer import FileRef


class ContentStore(Protocol):
    def resolve_files(self, field_name: str, context_id: int) -> Set[FileRef]: ...


class InMemoryContentStore:
    """Dict-backed content store, also usable as the usage -> context resolver."""

    def __init__(self):
        self._files: Dict[Tuple[int, str], Set[FileRef]] = defaultdict(set)
        self._usage_contexts: Dict[Any, int] = {}

    def register_usage(self, usage_id: Any, context_id: int) -> None:
        self._usage_contexts[usage_id] = context_id

    def context_for_usage(self, usage_id: Any) -> Optional[int]:
        return self._usage_contexts.get(usage_id)

    def save_files(self, field_name: str, context_id: int, files: Iterable[FileRef]) -> None:
        self._files[(context_id, field_name)].update(files)

    def resolve_files(self, field_name: str, context_id: int) -> Set[FileRef]:
        return set(self._files.get((context_id, field_name), ()))
