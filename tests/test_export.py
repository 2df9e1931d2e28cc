from __future__ import annotations

import csv
import io
from datetime import date
from pathlib import Path

import pytest

from statement_converter.export import export_filename, format_date, render_csv, write_export
from statement_converter.models import DateFormat, ExportColumn, ExportSettings
from tests.helpers.records import make_record


def _records():
    return [
        make_record(
            "1",
            date="2024-01-15",
            description="Purchase at AMAZON.CO.JP",
            debit=15420,
            balance=524580,
            category="Shopping",
        ),
        make_record(
            "2",
            date="2024-01-16",
            description='Transfer "ACME, Inc."',
            credit=250000.456,
            balance=774580.456,
            category=None,
            is_valid=False,
        ),
        make_record(
            "3",
            date="2024-02-03",
            description="Coffee",
            debit=4.5,
            balance=774575.956,
            category="Food, Drink",
        ),
    ]


def test_default_export_has_header_and_all_rows():
    text = render_csv(_records())
    lines = text.split("\n")
    assert lines[0] == "Date,Description,Debit Amount,Credit Amount,Balance,Category"
    assert lines[1] == "2024-01-15,Purchase at AMAZON.CO.JP,15420.00,0.00,524580.00,Shopping"
    assert lines[2] == '2024-01-16,"Transfer ""ACME, Inc.""",0.00,250000.46,774580.46,'
    assert lines[3] == '2024-02-03,Coffee,4.50,0.00,774575.96,"Food, Drink"'
    assert not text.endswith("\n")
    assert len(lines) == 4


def test_columns_follow_configured_order():
    settings = ExportSettings(columns=("balance", "date"))
    text = render_csv(_records(), settings)
    assert text.split("\n")[0] == "Balance,Date"
    assert text.split("\n")[1] == "524580.00,2024-01-15"


@pytest.mark.parametrize(
    ("fmt", "expected"),
    [
        (DateFormat.ISO, "2024-02-03"),
        (DateFormat.US, "02/03/2024"),
        (DateFormat.EUROPEAN, "03/02/2024"),
    ],
)
def test_date_formats(fmt, expected):
    settings = ExportSettings(columns=(ExportColumn.DATE,), date_format=fmt)
    assert render_csv(_records(), settings).split("\n")[3] == expected


def test_unparseable_date_passes_through():
    assert format_date("15th Jan", DateFormat.US) == "15th Jan"
    assert format_date("", DateFormat.EUROPEAN) == ""


def test_exclude_invalid_rows():
    settings = ExportSettings(exclude_invalid=True)
    records = _records()
    rows = render_csv(records, settings).split("\n")[1:]
    assert len(rows) == sum(1 for r in records if r.is_valid)
    assert all("ACME" not in row for row in rows)


def test_empty_ledger_exports_header_only():
    assert render_csv([]) == "Date,Description,Debit Amount,Credit Amount,Balance,Category"


def test_round_trip_through_csv_reader():
    records = _records()
    text = render_csv(records)
    parsed = list(csv.reader(io.StringIO(text)))
    header, rows = parsed[0], parsed[1:]
    assert len(rows) == len(records)
    by_label = [dict(zip(header, row, strict=True)) for row in rows]
    for record, row in zip(records, by_label, strict=True):
        assert row["Date"] == record.date
        assert row["Description"] == record.description
        assert float(row["Debit Amount"]) == pytest.approx(record.debit, abs=0.005)
        assert float(row["Credit Amount"]) == pytest.approx(record.credit, abs=0.005)
        assert float(row["Balance"]) == pytest.approx(record.balance, abs=0.005)
        assert row["Category"] == (record.category or "")


@pytest.mark.parametrize(
    "columns",
    [(), ("date", "memo"), ("date", "date")],
)
def test_invalid_settings_are_rejected(columns):
    with pytest.raises(ValueError):
        ExportSettings(columns=columns)


def test_settings_normalize_strings():
    settings = ExportSettings(columns=("category", "debit"), date_format="DD/MM/YYYY")
    assert settings.columns == (ExportColumn.CATEGORY, ExportColumn.DEBIT)
    assert settings.date_format is DateFormat.EUROPEAN


def test_export_filename_uses_iso_date():
    assert export_filename(date(2025, 3, 9)) == "bank_statement_2025-03-09.csv"


def test_write_export_is_utf8(tmp_path: Path):
    text = render_csv([make_record("1", balance=1, description="Café ☕")])
    path = write_export(text, tmp_path / "out.csv")
    assert path.read_bytes().decode("utf-8") == text
