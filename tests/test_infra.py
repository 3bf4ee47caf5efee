"""
Tests for configuration and structured logging.
"""

import json
import logging

import pytest


class TestSettings:
    """Environment-driven settings."""

    def test_defaults(self):
        from querygate.config import Settings
        s = Settings()
        assert s.VERSION == "1.0.0"
        assert s.MAX_QUERY_CHARS > 0
        assert isinstance(s.PARALLEL_ANALYSIS, bool)

    def test_frozen(self):
        from dataclasses import FrozenInstanceError
        from querygate.config import settings
        with pytest.raises(FrozenInstanceError):
            settings.PARALLEL_ANALYSIS = True

    @pytest.mark.parametrize("raw,expected", [
        ("1", True), ("true", True), ("YES", True), (" on ", True),
        ("0", False), ("false", False), ("", False), ("nope", False),
    ])
    def test_env_flag(self, monkeypatch, raw, expected):
        from querygate.config import _env_flag
        monkeypatch.setenv("QUERYGATE_TEST_FLAG", raw)
        assert _env_flag("QUERYGATE_TEST_FLAG", "false") is expected

    def test_env_flag_default(self, monkeypatch):
        from querygate.config import _env_flag
        monkeypatch.delenv("QUERYGATE_TEST_FLAG", raising=False)
        assert _env_flag("QUERYGATE_TEST_FLAG", "true") is True

    def test_version_matches_package(self):
        import querygate
        from querygate.config import settings
        assert settings.VERSION == querygate.__version__


class TestLogging:
    """Structured logging tests."""

    def _record(self, msg="Test message"):
        return logging.LogRecord(
            name="querygate.test",
            level=logging.INFO,
            pathname="test.py",
            lineno=1,
            msg=msg,
            args=(),
            exc_info=None,
        )

    def test_json_formatter(self):
        from querygate.logging import JSONFormatter

        parsed = json.loads(JSONFormatter().format(self._record()))
        assert parsed["level"] == "INFO"
        assert parsed["message"] == "Test message"
        assert parsed["logger"] == "querygate.test"
        assert "timestamp" in parsed

    def test_json_formatter_extra_fields(self):
        from querygate.logging import JSONFormatter

        record = self._record("Query gated")
        record.grade = "B"
        record.should_process = True
        record.unlisted = "dropped"
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed["grade"] == "B"
        assert parsed["should_process"] is True
        assert "unlisted" not in parsed

    def test_json_formatter_exception(self):
        from querygate.logging import JSONFormatter

        try:
            raise ValueError("bad input")
        except ValueError:
            import sys
            record = self._record("failed")
            record.exc_info = sys.exc_info()
        parsed = json.loads(JSONFormatter().format(record))
        assert "ValueError: bad input" in parsed["exception"]

    def test_setup_logging_json(self):
        from querygate.logging import JSONFormatter, setup_logging

        root = setup_logging(level="debug", fmt="json")
        assert root.name == "querygate"
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)

    def test_setup_logging_text(self):
        from querygate.logging import TextFormatter, setup_logging

        root = setup_logging(level="warning", fmt="text")
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_get_logger(self):
        from querygate.logging import get_logger
        log = get_logger("validator")
        assert log.name == "querygate.validator"
