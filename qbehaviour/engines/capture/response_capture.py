"""
Response capture - turns submitted fields into the files sent for grading.

Two sources:
- the file answer field: fresh uploads, or files re-fetched from the
  content store when the step was restored for a regrade;
- free-text inputs answertext{i}, each stored as a named text file.
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Mapping, Optional, Set

from qbehaviour.config import Settings, get_settings
from qbehaviour.engines.capture.config_lookup import ConfigLookup
from qbehaviour.engines.capture.content_store import ContentStore
from qbehaviour.kernel.models.question import QuestionConfig
from qbehaviour.kernel.models.submitted_answer import (
    FileRef,
    FreshUpload,
    SubmittedAnswer,
    as_submitted_answer,
)
from qbehaviour.logging_config import get_logger

logger = get_logger(__name__)

ContextResolver = Callable[[Any], Optional[int]]


class CaptureError(Exception):
    """Submitted content that must exist could not be found."""


@dataclass
class ResponseBundle:
    """Everything handed to the grader for one submission."""
    files: Set[FileRef] = field(default_factory=set)
    freetext: Dict[str, str] = field(default_factory=dict)


class ResponseCapture:
    """Extracts files and free-text answers from submitted response data."""

    def __init__(
        self,
        content_store: ContentStore,
        config_lookup: ConfigLookup,
        context_resolver: ContextResolver,
        settings: Optional[Settings] = None,
    ):
        self.content_store = content_store
        self.config_lookup = config_lookup
        self.context_resolver = context_resolver
        self.settings = settings or get_settings()

    def capture_files(
        self,
        submitted: SubmittedAnswer,
        usage_id: Any,
        *,
        required: bool = True,
    ) -> Set[FileRef]:
        """
        Files for the submitted answer.

        Placeholders mean the upload object is gone (regrade); the files
        are looked up again in the usage's context.

        Raises:
            CaptureError: no files found while required, or the usage has
                no context to look them up in.
        """
        if isinstance(submitted, FreshUpload):
            files = set(submitted.files)
        else:
            context_id = self.context_resolver(usage_id)
            if context_id is None:
                logger.error("No context for question usage", extra={"usage_id": str(usage_id)})
                raise CaptureError(f"Question usage {usage_id} has no context")
            logger.warning(
                "Upload object unavailable, re-fetching stored files",
                extra={"usage_id": str(usage_id), "field_name": submitted.field_name, "context_id": context_id},
            )
            files = self.content_store.resolve_files(submitted.field_name, context_id)

        if required and not files:
            logger.error("Required files missing", extra={"usage_id": str(usage_id)})
            raise CaptureError(f"No submitted files found for question usage {usage_id}")
        return files

    def _default_filename(self, index: int) -> str:
        return self.settings.freetext_filename_template.format(index=index + 1)

    def capture_free_text(self, response: Mapping[str, Any], config: QuestionConfig) -> Dict[str, str]:
        """
        Map filename -> text for every non-empty free-text input.

        Filename priority: a preset filename from the field settings, then
        the learner's filename, then File{i+1}.txt. Without field settings
        the auto-generate flag forces the generated name. Colliding names
        overwrite earlier entries.
        """
        answers: Dict[str, str] = {}
        for i in range(config.fts_max_num_fields):
            text = response.get(f"answertext{i}") or ""
            if text == "":
                continue

            filename = response.get(f"answerfilename{i}") or ""
            field_config = self.config_lookup.get(config.id, i)
            if field_config is not None:
                if field_config.preset_filename:
                    if not field_config.filename:
                        logger.error(
                            "Preset filename not configured",
                            extra={"question_id": config.id, "input_index": i},
                        )
                        raise CaptureError(f"Question {config.id} input {i} has no preset filename")
                    filename = field_config.filename
                elif filename == "":
                    filename = self._default_filename(i)
            elif config.fts_auto_generate_filenames or filename == "":
                filename = self._default_filename(i)

            logger.debug("Free text captured", extra={"input_index": i, "target_filename": filename})
            answers[filename] = text
        return answers

    def capture(self, response: Mapping[str, Any], config: QuestionConfig, usage_id: Any) -> ResponseBundle:
        """Collect whatever the question enables into one bundle."""
        bundle = ResponseBundle()
        if config.enable_file_submissions:
            field_name = self.settings.file_answer_field
            submitted = as_submitted_answer(response.get(field_name), field_name)
            bundle.files = self.capture_files(
                submitted,
                usage_id,
                required=config.file_submission_required,
            )
        if config.enable_free_text_submissions:
            bundle.freetext = self.capture_free_text(response, config)
        return bundle
