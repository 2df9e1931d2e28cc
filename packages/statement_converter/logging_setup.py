"""Logging for ``statement_converter``.

Library modules log through ``get_logger("statement_converter.<module>")`` and
never attach handlers of their own. Until an entrypoint calls
:func:`configure_logging`, the package logger only carries a ``NullHandler``,
so embedding the package stays silent.

Log lines describe statements by filename, counts and sizes, never by their
content. The console handler also runs :class:`SecretFilter`, which masks
OpenAI-style keys should an SDK error message echo one.
"""

from __future__ import annotations

import logging
import os
import re
import sys
from typing import IO

PACKAGE_LOGGER = "statement_converter"
LEVEL_ENV_VAR = "STATEMENT_CONVERTER_LOG_LEVEL"
DEFAULT_FORMAT = "%(asctime)s %(name)s %(levelname)s %(message)s"

_CONSOLE_HANDLER_NAME = "statement_converter.console"
_SECRET_PATTERN = re.compile(r"sk-[A-Za-z0-9_\-]{8,}")
MASKED_SECRET = "sk-***"


def resolve_level(level: int | str | None) -> int:
    """Translate ``level`` to a numeric logging level.

    Blank or ``None`` falls back to ``STATEMENT_CONVERTER_LOG_LEVEL``; digit
    strings and level names are accepted; anything unknown means ``INFO``.
    """

    if level is None or (isinstance(level, str) and not level.strip()):
        level = os.getenv(LEVEL_ENV_VAR, "")
    if isinstance(level, int):
        return level
    name = level.strip().upper()
    if name.isdigit():
        return int(name)
    return logging.getLevelNamesMapping().get(name, logging.INFO)


class SecretFilter(logging.Filter):
    """Rewrite records whose formatted message contains an API key."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = _SECRET_PATTERN.sub(MASKED_SECRET, message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def _console_handler(logger: logging.Logger) -> logging.Handler | None:
    for handler in logger.handlers:
        if handler.get_name() == _CONSOLE_HANDLER_NAME:
            return handler
    return None


def configure_logging(
    level: int | str | None = None,
    *,
    fmt: str | None = None,
    stream: IO[str] | None = None,
) -> logging.Handler:
    """Install the package console handler and return it.

    The first call wins: later calls return the installed handler unchanged,
    so the CLI callback can run once per invocation without stacking output.

    Parameters
    ----------
    level:
        Level or level name; see :func:`resolve_level`.
    fmt:
        Format string, :data:`DEFAULT_FORMAT` by default.
    stream:
        Destination, ``sys.stderr`` by default so CSV and tables on stdout
        stay clean.
    """

    logger = logging.getLogger(PACKAGE_LOGGER)
    existing = _console_handler(logger)
    if existing is not None:
        return existing

    for handler in [h for h in logger.handlers if isinstance(h, logging.NullHandler)]:
        logger.removeHandler(handler)

    resolved = resolve_level(level)
    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.set_name(_CONSOLE_HANDLER_NAME)
    console.setLevel(resolved)
    console.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT))
    console.addFilter(SecretFilter())

    logger.setLevel(resolved)
    logger.addHandler(console)
    logger.propagate = False
    return console


def reset_logging() -> None:
    """Drop every package handler and return to the silent library default."""

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    logger.addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(PACKAGE_LOGGER)
    if not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
