"""Shared pytest fixtures.

Tests must never reach the real extraction service or pick up a developer's
``.env``: credentials and model overrides are removed from the environment
for every test, and the CLI's logging configuration is undone afterwards so
handlers do not point at streams captured by an earlier test.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from statement_converter import logging_setup
from statement_converter.models import StatementDocument

MINIMAL_PDF = b"%PDF-1.4\n1 0 obj << /Type /Catalog >> endobj\ntrailer << /Root 1 0 R >>\n%%EOF\n"


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ("OPENAI_API_KEY", "STATEMENT_CONVERTER_MODEL", "STATEMENT_CONVERTER_LOG_LEVEL"):
        # setenv first so teardown also removes values written by load_dotenv.
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    # The CLI loads ``.env`` from the working directory.
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logging_setup.reset_logging()


@pytest.fixture
def pdf_document() -> StatementDocument:
    return StatementDocument(filename="statement.pdf", content_type="application/pdf", data=MINIMAL_PDF)


@pytest.fixture
def pdf_file(tmp_path: Path) -> Path:
    p = tmp_path / "statement.pdf"
    p.write_bytes(MINIMAL_PDF)
    return p
