from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from statement_converter import UploadRejected, export_statement, load_statement
from statement_converter.api import DEMO_MODE_MESSAGE
from statement_converter.demo import DEMO_TRANSACTIONS
from statement_converter.models import ExportSettings, ExtractionSuccess
from tests.helpers.records import make_record


def test_load_statement_demo_mode(pdf_file: Path):
    session = load_statement(pdf_file, use_demo=True)
    assert session.records == DEMO_TRANSACTIONS
    assert session.warning == DEMO_MODE_MESSAGE
    assert session.source == "demo"


def test_load_statement_with_custom_gateway(pdf_file: Path):
    records = (make_record("only", balance=10),)
    session = load_statement(pdf_file, gateway=lambda doc: ExtractionSuccess(transactions=records))
    assert session.records == records
    assert session.source == "extracted"


def test_load_statement_rejects_non_pdf(tmp_path: Path):
    p = tmp_path / "statement.txt"
    p.write_text("not a pdf", encoding="utf-8")
    with pytest.raises(UploadRejected):
        load_statement(p, use_demo=True)


def test_export_defaults_to_dated_file_in_cwd(tmp_path: Path):
    written = export_statement(DEMO_TRANSACTIONS, today=date(2024, 2, 1))
    assert written == Path("bank_statement_2024-02-01.csv")
    assert (tmp_path / written.name).exists()


def test_export_into_directory(tmp_path: Path):
    out_dir = tmp_path / "exports"
    out_dir.mkdir()
    written = export_statement(DEMO_TRANSACTIONS, out_path=out_dir, today=date(2024, 2, 1))
    assert written == out_dir / "bank_statement_2024-02-01.csv"
    lines = written.read_text(encoding="utf-8").split("\n")
    assert len(lines) == 1 + len(DEMO_TRANSACTIONS)


def test_export_respects_settings(tmp_path: Path):
    settings = ExportSettings(columns=("date", "balance"), date_format="MM/DD/YYYY")
    written = export_statement(DEMO_TRANSACTIONS[:1], settings=settings, out_path=tmp_path / "x.csv")
    assert written.read_text(encoding="utf-8") == "Date,Balance\n01/15/2024,524580.00"
