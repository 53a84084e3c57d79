"""Tests for settings and logging setup."""

import json
import logging

import pydantic
import pytest

from rulechain.config import Settings, get_settings
from rulechain.errors import NotAContainerError
from rulechain.logging import LIBRARY_LOGGER, configure_logging, get_logger
from rulechain.validation import Map, validate


class TestSettings:
    def test_defaults(self):
        settings = Settings()
        assert settings.MAX_DEPTH == 64
        assert settings.LOG_LEVEL == "WARNING"
        assert settings.LOG_JSON is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("RULECHAIN_MAX_DEPTH", "8")
        monkeypatch.setenv("RULECHAIN_LOG_JSON", "true")
        settings = get_settings()
        assert settings.MAX_DEPTH == 8
        assert settings.LOG_JSON is True

    def test_cached(self):
        assert get_settings() is get_settings()

    def test_max_depth_must_be_positive(self, monkeypatch):
        monkeypatch.setenv("RULECHAIN_MAX_DEPTH", "0")
        with pytest.raises(pydantic.ValidationError):
            Settings()


@pytest.mark.usefixtures("reset_structlog")
class TestLogging:
    def test_configure_sets_library_logger(self):
        configure_logging(level="DEBUG", json_logs=False)
        library_logger = logging.getLogger("rulechain")
        assert library_logger.level == logging.DEBUG
        assert len(library_logger.handlers) == 1
        assert not library_logger.propagate

    def test_defaults_from_settings(self, monkeypatch):
        monkeypatch.setenv("RULECHAIN_LOG_LEVEL", "ERROR")
        configure_logging()
        assert logging.getLogger("rulechain").level == logging.ERROR

    def test_json_output(self, capsys):
        configure_logging(level="INFO", json_logs=True)
        get_logger("rulechain.tests").info("checked", keys=2)
        line = capsys.readouterr().out.strip().splitlines()[-1]
        event = json.loads(line)
        assert event["event"] == "checked"
        assert event["keys"] == 2
        assert event["library"] == "rulechain"
        assert event["level"] == "info"

    def test_level_filters(self, capsys):
        configure_logging(level="WARNING", json_logs=True)
        get_logger("rulechain.tests").info("hidden")
        assert "hidden" not in capsys.readouterr().out


@pytest.mark.usefixtures("reset_structlog")
class TestUnconfiguredLogging:
    def test_library_logger_has_null_handler(self):
        assert any(isinstance(h, logging.NullHandler) for h in logging.getLogger(LIBRARY_LOGGER).handlers)

    def test_validation_writes_nothing_to_stdout(self, capsys):
        assert validate({"x": 1}, Map()) is not None
        with pytest.raises(NotAContainerError):
            validate(3, Map())
        assert capsys.readouterr().out == ""

    def test_events_reach_stdlib_logging(self, caplog):
        caplog.set_level(logging.DEBUG, logger=LIBRARY_LOGGER)
        validate({"x": 1}, Map())
        assert any("map_validation_failed" in record.getMessage() for record in caplog.records)
