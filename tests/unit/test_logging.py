"""Unit tests for compound_lint.lint_logging module."""

import json
import logging
import sys

from compound_lint.lint_logging import (
    LOGGER_NAME,
    JSONFormatter,
    get_logger,
    setup_logging,
)


def _console_handler(logger: logging.Logger) -> logging.Handler:
    return next(h for h in logger.handlers if not isinstance(h, logging.FileHandler))


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_returns_package_logger(self):
        logger = setup_logging()
        assert logger is get_logger()
        assert logger.name == LOGGER_NAME
        assert logger.propagate is False

    def test_default_console_level(self):
        logger = setup_logging()
        assert _console_handler(logger).level == logging.WARNING

    def test_quiet_and_verbose(self):
        assert _console_handler(setup_logging(quiet=True)).level == logging.ERROR
        assert _console_handler(setup_logging(verbose=True)).level == logging.DEBUG
        # quiet wins when both are given
        assert (
            _console_handler(setup_logging(quiet=True, verbose=True)).level
            == logging.ERROR
        )

    def test_explicit_level(self):
        assert _console_handler(setup_logging(level="info")).level == logging.INFO

    def test_log_file_receives_debug(self, tmp_path):
        log_file = tmp_path / "nested" / "lint.log"
        logger = setup_logging(log_file=log_file)
        logging.getLogger(f"{LOGGER_NAME}.rules.engine").debug("checking dialog.tsx")

        assert any(isinstance(h, logging.FileHandler) for h in logger.handlers)
        assert "checking dialog.tsx" in log_file.read_text()

    def test_json_log_file(self, tmp_path):
        log_file = tmp_path / "lint.jsonl"
        setup_logging(log_file=log_file, log_format="json")
        get_logger().info("done", extra={"finding_count": 3})

        entry = json.loads(log_file.read_text().splitlines()[-1])
        assert entry["message"] == "done"
        assert entry["finding_count"] == 3


class TestJSONFormatter:
    """Tests for JSONFormatter."""

    def _record(self, **extra) -> logging.LogRecord:
        record = logging.LogRecord(
            name="compound_lint.rules.engine",
            level=logging.WARNING,
            pathname=__file__,
            lineno=42,
            msg="Rule %s failed",
            args=("COMPOUND.BEM_NAMING",),
            exc_info=None,
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_standard_fields(self):
        entry = json.loads(JSONFormatter().format(self._record()))
        assert entry["level"] == "WARNING"
        assert entry["logger"] == "compound_lint.rules.engine"
        assert entry["line"] == 42
        assert entry["message"] == "Rule COMPOUND.BEM_NAMING failed"
        assert "timestamp" in entry
        assert "duration_ms" not in entry

    def test_extra_fields(self):
        record = self._record(rule_id="COMPOUND.BEM_NAMING", duration_ms=1.5)
        entry = json.loads(JSONFormatter().format(record))
        assert entry["rule_id"] == "COMPOUND.BEM_NAMING"
        assert entry["duration_ms"] == 1.5

    def test_exception(self):
        try:
            raise ValueError("bad")
        except ValueError:
            record = self._record()
            record.exc_info = sys.exc_info()
        entry = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad" in entry["exception"]
