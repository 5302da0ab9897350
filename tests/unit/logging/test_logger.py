# tests/unit/logging/test_logger.py — v3
"""Tests for logging/logger.py — logger factory and formatters."""

from __future__ import annotations

import json
import logging
from logging.handlers import RotatingFileHandler

import pytest

from tikaclient.logging.context import clear_context, set_request_context
from tikaclient.logging.logger import (
    JsonFormatter,
    TextFormatter,
    get_logger,
    rotation_bytes,
    setup_logging,
)


def _record(msg: str) -> logging.LogRecord:
    return logging.LogRecord(
        name="test", level=logging.INFO, pathname="", lineno=0,
        msg=msg, args=(), exc_info=None,
    )


class TestJsonFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        parsed = json.loads(JsonFormatter().format(_record("Hello")))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Hello"
        assert "timestamp" in parsed
        assert "context" not in parsed

    def test_format_with_context(self):
        set_request_context("service", "meta", "report.pdf")
        parsed = json.loads(JsonFormatter().format(_record("test msg")))
        assert parsed["context"] == {
            "transport": "service", "kind": "meta", "file": "report.pdf",
        }


class TestTextFormatter:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_format_basic(self):
        output = TextFormatter().format(_record("Hello text"))
        assert "Hello text" in output
        assert "INFO" in output

    def test_format_with_context(self):
        set_request_context("process", "text", "a.pdf")
        output = TextFormatter().format(_record("running"))
        assert "[process]" in output
        assert "<text>" in output
        assert "(a.pdf)" in output


class TestGetLogger:
    def test_returns_logger(self):
        logger = get_logger("test_module")
        assert logger.name == "tikaclient.test_module"


class TestSetupLogging:
    def test_setup_json(self):
        setup_logging(level="DEBUG", log_format="json")
        root = logging.getLogger("tikaclient")
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_setup_text(self):
        setup_logging(level="INFO", log_format="text")
        root = logging.getLogger("tikaclient")
        assert root.level == logging.INFO
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_no_duplicate_handlers(self):
        setup_logging()
        setup_logging()
        assert len(logging.getLogger("tikaclient").handlers) == 1

    def test_file_handler(self, tmp_path):
        log_file = tmp_path / "logs" / "tika.log"
        setup_logging(log_file=str(log_file))
        root = logging.getLogger("tikaclient")
        try:
            assert len(root.handlers) == 2
            assert log_file.parent.is_dir()
            assert isinstance(root.handlers[1], RotatingFileHandler)
            assert root.handlers[1].maxBytes == 10 * 1024 * 1024
            assert root.handlers[1].backupCount == 5
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers.clear()

    def test_httpx_quieted(self):
        setup_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_file_handler_without_rotation(self, tmp_path):
        log_file = tmp_path / "tika.log"
        setup_logging(log_file=log_file, rotation=0)
        root = logging.getLogger("tikaclient")
        try:
            handler = root.handlers[1]
            assert type(handler) is logging.FileHandler
            root.info("written")
            handler.flush()
            assert "written" in log_file.read_text(encoding="utf-8")
        finally:
            for handler in root.handlers:
                handler.close()
            root.handlers.clear()


class TestRotationBytes:
    @pytest.mark.parametrize(
        "value, expected",
        [("100B", 100), ("512KB", 512 * 1024), ("10mb", 10 * 1024 * 1024),
         ("1 GB", 1024**3), (4096, 4096)],
    )
    def test_sizes(self, value, expected):
        assert rotation_bytes(value) == expected

    @pytest.mark.parametrize("value", ["10bytes", "MB", "", -1])
    def test_invalid(self, value):
        with pytest.raises(ValueError, match="Invalid log rotation size"):
            rotation_bytes(value)
