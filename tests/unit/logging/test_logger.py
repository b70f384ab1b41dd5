# tests/unit/logging/test_logger.py — v2
"""Tests for logging/logger.py — setup and formatters."""

from __future__ import annotations

import json
import logging
import sys

from docmeta.logging.context import clear_context, set_analysis_context, set_step
from docmeta.logging.logger import ROOT_LOGGER, JsonFormatter, TextFormatter, setup_logging


def _record(msg: str = "Hello", exc_info=None) -> logging.LogRecord:
    return logging.LogRecord(
        name="docmeta.test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=exc_info,
    )


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert parsed["logger"] == "docmeta.test"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_analysis_context("/docs/a.pdf", "gemini-2.0-flash")
        set_step("calling")
        parsed = json.loads(JsonFormatter().format(_record()))
        assert parsed["context"] == {
            "file_path": "/docs/a.pdf",
            "model": "gemini-2.0-flash",
            "step": "calling",
        }

    def test_format_with_extra_data(self):
        record = _record()
        record.data = {"pages": 3}
        parsed = json.loads(JsonFormatter().format(record))
        assert parsed["data"] == {"pages": 3}

    def test_format_with_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record(exc_info=sys.exc_info())
        parsed = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in parsed["exception"]


class TestTextFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "[INFO]" in output

    def test_format_includes_step(self):
        set_step("preprocessing")
        output = TextFormatter().format(_record())
        assert "(preprocessing)" in output

    def test_format_includes_file_name(self):
        set_analysis_context("/docs/papers/attention.pdf")
        output = TextFormatter().format(_record())
        assert "[attention.pdf]" in output
        assert "/docs/papers" not in output


class TestSetupLogging:
    def teardown_method(self):
        root = logging.getLogger(ROOT_LOGGER)
        for handler in root.handlers:
            handler.close()
        root.handlers.clear()

    def test_sets_level_and_console_handler(self):
        setup_logging(level="DEBUG")
        root = logging.getLogger(ROOT_LOGGER)
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_json_format(self):
        setup_logging(log_format="json")
        root = logging.getLogger(ROOT_LOGGER)
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_reinit_does_not_duplicate(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger(ROOT_LOGGER).handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "docmeta.log"
        setup_logging(log_file=log_file, rotation="1MB", retention=2)
        root = logging.getLogger(ROOT_LOGGER)
        assert len(root.handlers) == 2
        root.warning("written to file")
        for handler in root.handlers:
            handler.flush()
        assert "written to file" in log_file.read_text(encoding="utf-8")
