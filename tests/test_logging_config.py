"""Tests for logging_config.py."""

import os
import sys
import logging
from unittest.mock import patch, MagicMock

import pytest

from pcomp.core.logging_config import (
    LOG_FORMATS,
    build_formatter,
    configure_multiprocessing_logging,
    get_logger,
    logger,
    resolve_level,
    setup_logger,
)


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_setup_logger_default_name(self):
        test_logger = setup_logger()
        assert test_logger.name == "pcomp"
        assert len(test_logger.handlers) >= 1
        assert not test_logger.propagate

    def test_setup_logger_level_by_parameter(self):
        test_logger = setup_logger(name="pcomp-test-param", level="debug")
        assert test_logger.level == logging.DEBUG

    def test_setup_logger_level_by_env_var(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "WARNING"}):
            test_logger = setup_logger(name="pcomp-test-env-level")
        assert test_logger.level == logging.WARNING

    def test_setup_logger_invalid_level_defaults_to_info(self):
        test_logger = setup_logger(name="pcomp-test-invalid", level="LOUD")
        assert test_logger.level == logging.INFO

    def test_setup_logger_structured_format(self):
        test_logger = setup_logger(name="pcomp-test-structured", format_type="structured")
        format_string = test_logger.handlers[0].formatter._fmt
        for field in (
            "%(asctime)s",
            "%(processName)s",
            "%(name)s",
            "%(filename)s",
            "%(lineno)d",
            "%(funcName)s",
        ):
            assert field in format_string

    def test_setup_logger_env_format_override(self):
        """LOG_FORMAT wins over the format_type argument."""
        with patch.dict(os.environ, {"LOG_FORMAT": "simple"}):
            test_logger = setup_logger(name="pcomp-test-env-format", format_type="structured")
        format_string = test_logger.handlers[0].formatter._fmt
        assert "%(filename)s" not in format_string
        assert "%(message)s" in format_string

    def test_setup_logger_unknown_env_format_is_structured(self):
        with patch.dict(os.environ, {"LOG_FORMAT": "fancy"}):
            test_logger = setup_logger(name="pcomp-test-unknown-format", format_type="simple")
        assert test_logger.handlers[0].formatter._fmt == LOG_FORMATS["structured"]

    def test_setup_logger_no_duplicate_handlers(self):
        first = setup_logger(name="pcomp-test-dupes")
        second = setup_logger(name="pcomp-test-dupes")
        assert first is second
        assert len(first.handlers) == 1

    def test_setup_logger_handler_uses_stderr(self):
        """Log records must stay off stdout, which carries the report."""
        test_logger = setup_logger(name="pcomp-test-stderr")
        handler = test_logger.handlers[0]
        assert handler.stream is sys.stderr
        assert handler.stream is not sys.stdout


class TestGetLogger:
    def test_get_logger_default_name(self):
        assert get_logger().name == "pcomp"

    def test_get_logger_child_propagates_to_pcomp(self):
        test_logger = get_logger(name="pcomp.test-child")
        assert test_logger.name == "pcomp.test-child"
        assert test_logger.handlers == []
        assert test_logger.propagate
        assert test_logger.parent is logging.getLogger("pcomp")
        assert logging.getLogger("pcomp").handlers

    def test_get_logger_outside_namespace_gets_own_handler(self):
        test_logger = get_logger(name="pcomp-test-standalone")
        assert len(test_logger.handlers) == 1
        assert not test_logger.propagate


class TestConfigureMultiprocessingLogging:
    @patch("pcomp.core.logging_config.multiprocessing.current_process")
    def test_configure_multiprocessing_logging(self, mock_current_process):
        """Each worker process gets a logger named after it."""
        mock_process = MagicMock()
        mock_process.name = "SpawnProcess-3"
        mock_current_process.return_value = mock_process

        worker_logger = configure_multiprocessing_logging()

        assert worker_logger.name == "pcomp.SpawnProcess-3"
        assert worker_logger.propagate
        assert logging.getLogger("pcomp").handlers


class TestHelpers:
    @pytest.mark.parametrize(
        "name, expected",
        [("debug", logging.DEBUG), ("ERROR", logging.ERROR), ("LOUD", logging.INFO)],
    )
    def test_resolve_level(self, name, expected):
        assert resolve_level(name) == expected

    def test_resolve_level_from_env(self):
        with patch.dict(os.environ, {"LOG_LEVEL": "critical"}):
            assert resolve_level() == logging.CRITICAL

    def test_build_formatter_simple(self, monkeypatch):
        monkeypatch.delenv("LOG_FORMAT", raising=False)
        assert build_formatter("simple")._fmt == LOG_FORMATS["simple"]


def test_default_logger_configured():
    assert isinstance(logger, logging.Logger)
    assert logger.name == "pcomp"
    assert not logger.propagate


def test_log_level_filtering(capsys):
    test_logger = setup_logger(name="pcomp-test-filtering", level="WARNING")

    test_logger.info("hidden message")
    test_logger.warning("visible message")

    captured = capsys.readouterr()
    assert captured.out == ""
