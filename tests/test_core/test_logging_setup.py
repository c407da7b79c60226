"""Tests for logging configuration."""

import logging

import structlog

from zmk_export.core.logging import configure_library_logging, log_level_from_name


def test_package_logs_through_stdlib():
    config = structlog.get_config()
    assert isinstance(config["logger_factory"], structlog.stdlib.LoggerFactory)


def test_package_logger_has_null_handler():
    configure_library_logging()
    handlers = logging.getLogger("zmk_export").handlers
    assert any(isinstance(handler, logging.NullHandler) for handler in handlers)


def test_structlog_events_do_not_reach_stdout(capfd):
    structlog.get_logger("zmk_export.test").warning("library_event", key="value")

    out, _err = capfd.readouterr()
    assert out == ""


def test_log_level_from_name():
    assert log_level_from_name("debug") == logging.DEBUG
    assert log_level_from_name(" INFO ") == logging.INFO
    assert log_level_from_name("nonsense") == logging.WARNING
