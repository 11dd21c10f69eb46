"""Unit tests for logging configuration and attempt correlation."""

import json
import logging

import pytest

from qbehaviour.config import Settings
from qbehaviour.logging_config import (
    PACKAGE_LOGGER,
    AttemptContextFilter,
    StepFormatter,
    attempt_id_var,
    configure_logging,
    get_logger,
)


def _record(msg: str = "hello", **extra) -> logging.LogRecord:
    record = logging.LogRecord("qbehaviour.test", logging.INFO, __file__, 1, msg, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestStepFormatter:

    def test_plain_line_appends_step_fields(self):
        record = _record(usage_id="42", state="pending_grade", unrelated="x")
        AttemptContextFilter().filter(record)
        line = StepFormatter().format(record)
        assert line.endswith("hello usage_id=42 state=pending_grade")
        assert "unrelated" not in line
        assert "attempt_id" not in line

    def test_json_lines(self):
        record = _record(usage_id="42", certainty=3)
        payload = json.loads(StepFormatter(json_lines=True).format(record))
        assert payload["message"] == "hello"
        assert payload["usage_id"] == "42"
        assert payload["certainty"] == 3

    def test_attempt_id_from_context(self):
        token = attempt_id_var.set("attempt-1")
        try:
            record = _record()
            AttemptContextFilter().filter(record)
        finally:
            attempt_id_var.reset(token)
        payload = json.loads(StepFormatter(json_lines=True).format(record))
        assert payload["attempt_id"] == "attempt-1"

    def test_non_serializable_field_stringified(self):
        record = _record(target_filename={"a.py"})
        payload = json.loads(StepFormatter(json_lines=True).format(record))
        assert payload["target_filename"] == str({"a.py"})


@pytest.fixture
def restore_package_logger():
    """Put the package logger back after configure_logging."""
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    handlers, level = package_logger.handlers[:], package_logger.level
    yield package_logger
    package_logger.handlers[:] = handlers
    package_logger.setLevel(level)


class TestConfigureLogging:

    def test_production_uses_json_lines(self, restore_package_logger):
        handler = configure_logging(Settings(_env_file=None, log_level="WARNING", environment="production"))
        assert restore_package_logger.level == logging.WARNING
        assert handler.formatter.json_lines is True

    def test_debug_overrides_level(self, restore_package_logger):
        configure_logging(Settings(_env_file=None, log_level="ERROR", debug=True))
        assert restore_package_logger.level == logging.DEBUG

    def test_reconfigure_replaces_handler(self, restore_package_logger):
        settings = Settings(_env_file=None)
        configure_logging(settings)
        handler = configure_logging(settings)
        installed = [h for h in restore_package_logger.handlers if isinstance(h.formatter, StepFormatter)]
        assert installed == [handler]

    def test_root_logger_untouched(self, restore_package_logger):
        root_handlers = logging.getLogger().handlers[:]
        configure_logging(Settings(_env_file=None))
        assert logging.getLogger().handlers == root_handlers

    def test_get_logger(self):
        assert get_logger("qbehaviour.x").name == "qbehaviour.x"


class TestAttemptCorrelation:

    def test_attempt_id_set_during_action(self, attempt, behaviour, upload, submit_step, caplog):
        """Log lines emitted while processing carry the attempt id."""
        caplog.set_level(logging.INFO, logger="qbehaviour")
        seen = []

        class _Capture(logging.Handler):
            def emit(self, record):
                seen.append(record.attempt_id)

        handler = _Capture()
        handler.addFilter(AttemptContextFilter())
        logging.getLogger("qbehaviour").addHandler(handler)
        try:
            attempt.process_action(behaviour, submit_step({"answer": upload}, certainty=2))
        finally:
            logging.getLogger("qbehaviour").removeHandler(handler)

        assert seen and all(value == str(attempt.id) for value in seen)
        assert attempt_id_var.get() is None
