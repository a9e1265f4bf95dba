#!/usr/bin/env python3
"""Tests for the structured logger."""

import logging

import pytest

from recordflow.core.config import ConfigError
from recordflow.core.constants import ErrorCode
from recordflow.core.logging import (
    Logger,
    LogLevel,
    configure_logging,
    get_logger,
    set_global_logger,
)


class ListHandler(logging.Handler):
    """Handler collecting records in memory."""

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def handler():
    return ListHandler()


@pytest.fixture
def logger(handler):
    return Logger("recordflow.test", level=LogLevel.DEBUG, handlers=[handler])


class TestLogger:
    """Tests for Logger."""

    def test_message_with_context(self, logger, handler):
        logger.info("Applied rule", rule="include", size=3)

        record = handler.records[0]
        assert record.getMessage() == "Applied rule | rule=include size=3"
        assert record.context == {"rule": "include", "size": 3}

    def test_message_without_context(self, logger, handler):
        logger.warning("Plain")

        assert handler.records[0].getMessage() == "Plain"
        assert handler.records[0].levelno == logging.WARNING

    def test_level_filtering(self, logger, handler):
        logger.set_level("warning")
        logger.debug("hidden")
        logger.info("hidden")
        logger.error("shown")

        assert [r.getMessage() for r in handler.records] == ["shown"]
        assert logger.logger.level == LogLevel.WARNING

    def test_numeric_level(self, logger):
        logger.set_level(40)

        assert logger.logger.level == LogLevel.ERROR

    @pytest.mark.parametrize("level", ["verbose", "", 15, 99])
    def test_unknown_level(self, logger, level):
        with pytest.raises(ConfigError) as exc_info:
            logger.set_level(level)

        assert exc_info.value.error_code == ErrorCode.INVALID_INPUT
        assert logger.logger.level == LogLevel.DEBUG

    def test_add_context(self, logger, handler):
        with logger.add_context(rule="sort_by"):
            logger.debug("inside", size=2)
        logger.debug("outside")

        assert handler.records[0].context == {"rule": "sort_by", "size": 2}
        assert handler.records[1].context == {}

    def test_nested_context(self, logger, handler):
        with logger.add_context(a=1):
            with logger.add_context(b=2):
                logger.info("nested")

        assert handler.records[0].context == {"a": 1, "b": 2}

    def test_does_not_propagate(self, logger):
        assert logger.logger.propagate is False

    def test_file_handler(self, logger, tmp_path):
        path = tmp_path / "recordflow.log"
        file_handler = logger.create_file_handler(path)
        logger.add_handler(file_handler)
        logger.info("to file", rule="exclude")
        file_handler.close()
        logger.logger.removeHandler(file_handler)

        assert "to file | rule=exclude" in path.read_text()


class TestGlobalLogger:
    """Tests for module-level helpers."""

    def test_get_logger_reuses_instance(self):
        assert get_logger() is get_logger()

    def test_get_logger_new_name(self):
        assert get_logger("recordflow.other").name == "recordflow.other"

    def test_set_global_logger(self, logger):
        set_global_logger(logger)

        assert get_logger("recordflow.test") is logger

    def test_configure_logging_file(self, tmp_path):
        path = tmp_path / "out.log"
        configured = configure_logging(level="DEBUG", log_file=str(path))
        configured.debug("configured")
        for h in configured.logger.handlers:
            h.flush()

        assert get_logger() is configured
        assert configured.logger.level == LogLevel.DEBUG
        assert "configured" in path.read_text()
        for h in list(configured.logger.handlers):
            h.close()

    def test_configure_logging_unknown_level(self):
        with pytest.raises(ConfigError):
            configure_logging(level="LOUD")
