from __future__ import annotations

import io
import logging

import pytest

from statement_converter.logging_setup import (
    PACKAGE_LOGGER,
    configure_logging,
    get_logger,
    resolve_level,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("debug", logging.DEBUG),
        (" WARNING ", logging.WARNING),
        ("15", 15),
        (logging.ERROR, logging.ERROR),
        ("not-a-level", logging.INFO),
        (None, logging.INFO),
    ],
)
def test_resolve_level(raw, expected):
    assert resolve_level(raw) == expected


def test_level_falls_back_to_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("STATEMENT_CONVERTER_LOG_LEVEL", "error")
    assert resolve_level(None) == logging.ERROR
    assert resolve_level("") == logging.ERROR


def test_library_logging_is_silent_until_configured():
    get_logger("statement_converter.test")
    handlers = logging.getLogger(PACKAGE_LOGGER).handlers
    assert handlers
    assert all(isinstance(h, logging.NullHandler) for h in handlers)


def test_configure_logging_installs_one_handler():
    stream = io.StringIO()
    first = configure_logging("INFO", stream=stream)
    second = configure_logging("DEBUG", stream=io.StringIO())
    assert first is second
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    assert pkg_logger.handlers == [first]
    assert pkg_logger.propagate is False

    get_logger("statement_converter.test").info("session:loaded count=%d", 3)
    get_logger("statement_converter.test").debug("hidden")
    output = stream.getvalue()
    assert "statement_converter.test INFO session:loaded count=3" in output
    assert "hidden" not in output


def test_api_keys_are_masked():
    stream = io.StringIO()
    configure_logging("INFO", stream=stream, fmt="%(message)s")
    get_logger("statement_converter.test").error(
        "extract_transactions:service_error detail=%s", "bad key sk-abcdefghijklmnop123"
    )
    output = stream.getvalue()
    assert "sk-abcdefghijklmnop123" not in output
    assert "bad key sk-***" in output
