"""Tests for bbprs.logging (BbprsLogging, level/format from config)."""

import logging

import pytest

from bbprs.config import LoggingConfig
from bbprs.logging import (
    DEFAULT_FORMAT,
    DEFAULT_LEVEL,
    LEVELS,
    PACKAGE_LOGGER,
    QUIET_LOGGERS,
    BbprsLogging,
    _resolve_level,
)


@pytest.fixture(autouse=True)
def restore_levels():
    names = (None, PACKAGE_LOGGER, *QUIET_LOGGERS)
    saved = {name: logging.getLogger(name).level for name in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_levels_map_four_standard_levels() -> None:
    assert LEVELS == {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
    }
    assert DEFAULT_LEVEL == "INFO"


def test_resolve_level_normalizes_and_falls_back() -> None:
    """Level is stripped and uppercased; unknown names give INFO."""
    assert _resolve_level(" debug ") == logging.DEBUG
    assert _resolve_level("Warning") == logging.WARNING
    assert _resolve_level("TRACE") == logging.INFO
    assert _resolve_level("") == logging.INFO


def test_setup_applies_level_to_package_logger() -> None:
    """The configured level goes on the bbprs logger, not on the root."""
    BbprsLogging(LoggingConfig(level="DEBUG", format="%(message)s")).setup()
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.DEBUG
    assert logging.getLogger("bbprs.adapters.bitbucket_cloud").isEnabledFor(logging.DEBUG)
    assert logging.root.level == logging.WARNING


def test_debug_keeps_http_libraries_quiet() -> None:
    BbprsLogging(LoggingConfig(level="DEBUG", format="%(message)s")).setup()
    for name in QUIET_LOGGERS:
        assert not logging.getLogger(name).isEnabledFor(logging.DEBUG)
        assert logging.getLogger(name).isEnabledFor(logging.WARNING)
    assert not logging.getLogger("urllib3.connectionpool").isEnabledFor(logging.DEBUG)


def test_setup_applies_format() -> None:
    custom = "%(levelname)s || %(message)s"
    BbprsLogging(LoggingConfig(level="ERROR", format=custom)).setup()
    root = logging.root
    assert root.handlers
    assert root.handlers[0].formatter is not None
    assert root.handlers[0].formatter._fmt == custom
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.ERROR


def test_empty_format_uses_default() -> None:
    BbprsLogging(LoggingConfig(level="INFO", format="")).setup()
    fmt = logging.root.handlers[0].formatter
    assert fmt is not None
    assert fmt._fmt == DEFAULT_FORMAT


def test_unknown_level_falls_back_to_info() -> None:
    assert BbprsLogging(LoggingConfig(level="TRACE", format="%(message)s")).level == logging.INFO
