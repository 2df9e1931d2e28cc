from __future__ import annotations

import csv
from pathlib import Path

import pytest
from typer.testing import CliRunner

import statement_converter.extraction as extraction_mod
from statement_converter.cli import app, parse_columns
from tests.helpers.openai_stub import OpenAIStub

runner = CliRunner()


def _mismatched_payload():
    return {
        "transactions": [
            {"id": "1", "date": "2024-03-01", "description": "Opening", "debit": 0, "credit": 0,
             "balance": 1000, "category": None, "isValid": True},
            {"id": "2", "date": "2024-03-02", "description": "Salary", "debit": 0, "credit": 500,
             "balance": 1400, "category": "Income", "isValid": True},
        ]
    }


def test_convert_demo_writes_csv(pdf_file: Path, tmp_path: Path):
    out = tmp_path / "out.csv"
    result = runner.invoke(app, ["convert", "--pdf-path", str(pdf_file), "--demo", "--out", str(out)])
    assert result.exit_code == 0, result.output
    assert "Exported 5 rows" in result.output
    # The demo rows open with a debit, so the banner reports the first-row mismatch.
    assert "Balance mismatch detected!" in result.output
    with out.open(encoding="utf-8", newline="") as f:
        rows = list(csv.reader(f))
    assert rows[0] == ["Date", "Description", "Debit Amount", "Credit Amount", "Balance", "Category"]
    assert len(rows) == 6


def test_convert_with_columns_and_date_format(pdf_file: Path, tmp_path: Path):
    out = tmp_path / "out.csv"
    result = runner.invoke(
        app,
        [
            "convert",
            "--pdf-path",
            str(pdf_file),
            "--demo",
            "--out",
            str(out),
            "--columns",
            "Date, Balance",
            "--date-format",
            "DD/MM/YYYY",
        ],
    )
    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8").split("\n")[:2] == ["Date,Balance", "15/01/2024,524580.00"]


def test_convert_rejects_unknown_column(pdf_file: Path):
    result = runner.invoke(
        app, ["convert", "--pdf-path", str(pdf_file), "--demo", "--columns", "date,memo"]
    )
    assert result.exit_code == 2


def test_convert_rejects_non_pdf(tmp_path: Path):
    p = tmp_path / "statement.txt"
    p.write_text("hello", encoding="utf-8")
    result = runner.invoke(app, ["convert", "--pdf-path", str(p), "--demo"])
    assert result.exit_code == 1
    assert "Please upload a PDF file only" in result.output
    assert not list(tmp_path.glob("bank_statement_*.csv"))


def test_convert_reports_missing_file(tmp_path: Path):
    result = runner.invoke(app, ["convert", "--pdf-path", str(tmp_path / "missing.pdf")])
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_convert_without_credential_warns_and_uses_demo(pdf_file: Path, tmp_path: Path):
    result = runner.invoke(app, ["convert", "--pdf-path", str(pdf_file)])
    assert result.exit_code == 0, result.output
    assert "OPENAI_API_KEY" in result.output
    assert "Exported 5 rows" in result.output
    assert list(tmp_path.glob("bank_statement_*.csv"))


@pytest.mark.parametrize(("strict", "expected_code"), [(False, 0), (True, 1)])
def test_validate_demo_reports_first_row_difference(pdf_file: Path, strict: bool, expected_code: int):
    args = ["validate", "--pdf-path", str(pdf_file), "--demo"]
    if strict:
        args.append("--strict")
    result = runner.invoke(app, args)
    assert result.exit_code == expected_code, result.output
    assert "Balance Validation" in result.output
    assert "15,420.00" in result.output


@pytest.mark.parametrize(("strict", "expected_code"), [(False, 0), (True, 1)])
def test_validate_reports_mismatch(
    pdf_file: Path, monkeypatch: pytest.MonkeyPatch, strict: bool, expected_code: int
):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    stub = OpenAIStub(_mismatched_payload())
    monkeypatch.setattr(extraction_mod, "_create_client", lambda: stub)
    args = ["validate", "--pdf-path", str(pdf_file)]
    if strict:
        args.append("--strict")
    result = runner.invoke(app, args)
    assert result.exit_code == expected_code, result.output
    assert "Balance mismatch detected!" in result.output
    assert len(stub.calls) == 1


def test_validate_empty_extraction(pdf_file: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    monkeypatch.setattr(extraction_mod, "_create_client", lambda: OpenAIStub({"transactions": []}))
    result = runner.invoke(app, ["validate", "--pdf-path", str(pdf_file)])
    assert result.exit_code == 0, result.output
    assert "No transactions were extracted." in result.output


def test_dotenv_supplies_credential(pdf_file: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    (tmp_path / ".env").write_text("OPENAI_API_KEY=sk-from-dotenv\n", encoding="utf-8")
    stub = OpenAIStub(_mismatched_payload())
    monkeypatch.setattr(extraction_mod, "_create_client", lambda: stub)
    result = runner.invoke(app, ["validate", "--pdf-path", str(pdf_file)])
    assert result.exit_code == 0, result.output
    assert len(stub.calls) == 1


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, None),
        ("  ", None),
        ("Date,balance", ("date", "balance")),
        (" debit , ,credit ", ("debit", "credit")),
    ],
)
def test_parse_columns(raw, expected):
    assert parse_columns(raw) == expected
