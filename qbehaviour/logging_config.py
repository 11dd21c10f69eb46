"""
Logging for question behaviours.

Behaviour modules log transitions with structured extra= fields
(usage_id, state, certainty, ...). While QuestionAttempt.process_action
runs, attempt_id_var holds the attempt's id and AttemptContextFilter
copies it onto every record, so one attempt's lines can be followed.

configure_logging() is for hosts and scripts that do not set up logging
themselves. It only touches the "qbehaviour" logger, never the root.

Usage:
    from qbehaviour.logging_config import get_logger
    logger = get_logger(__name__)
    logger.info("Submit dispatched for grading", extra={"usage_id": usage_id, "state": state.value})
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any, Dict, Optional

from qbehaviour.config import Settings, get_settings

PACKAGE_LOGGER = "qbehaviour"

attempt_id_var: ContextVar[Optional[str]] = ContextVar("attempt_id", default=None)

# Structured fields behaviours attach via extra=, in output order
STEP_FIELDS = (
    "attempt_id",
    "usage_id",
    "question_id",
    "state",
    "certainty",
    "has_certainty",
    "fraction",
    "raw_fraction",
    "step_count",
    "context_id",
    "field_name",
    "file_count",
    "freetext_count",
    "input_index",
    "target_filename",
)


class AttemptContextFilter(logging.Filter):
    """Stamp the attempt currently being processed onto the record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "attempt_id", None) is None:
            record.attempt_id = attempt_id_var.get()  # type: ignore[attr-defined]
        return True


def step_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """The structured step fields present on a record."""
    return {
        name: getattr(record, name)
        for name in STEP_FIELDS
        if getattr(record, name, None) is not None
    }


class StepFormatter(logging.Formatter):
    """
    One line per record: the message followed by its step fields.

    With json_lines the same content is written as a JSON object, for
    hosts that ship logs to an aggregator.
    """

    def __init__(self, json_lines: bool = False):
        super().__init__("%(asctime)s %(levelname)-5s [%(name)s] %(message)s", datefmt="%H:%M:%S")
        self.json_lines = json_lines

    def format(self, record: logging.LogRecord) -> str:
        fields = step_fields(record)
        if self.json_lines:
            payload: Dict[str, Any] = {
                "level": record.levelname,
                "logger": record.name,
                "message": record.getMessage(),
                **fields,
            }
            if record.exc_info:
                payload["exception"] = self.formatException(record.exc_info)
            return json.dumps(payload, default=str)

        line = super().format(record)
        if fields:
            line += " " + " ".join(f"{key}={value}" for key, value in fields.items())
        return line


def configure_logging(settings: Optional[Settings] = None) -> logging.Handler:
    """
    Attach a stderr handler to the package logger.

    Level comes from settings.log_level (DEBUG when settings.debug);
    production environments get JSON lines. Calling it again replaces
    the handler it installed before.
    """
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in package_logger.handlers[:]:
        if isinstance(handler.formatter, StepFormatter):
            package_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.addFilter(AttemptContextFilter())
    handler.setFormatter(StepFormatter(json_lines=settings.environment == "production"))
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
