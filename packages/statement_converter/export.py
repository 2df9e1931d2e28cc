"""CSV export of the ledger.

Output contract:
- UTF-8 text, comma-delimited, ``\\n`` between rows, no trailing newline.
- One header row of column labels in the configured order.
- Monetary columns as fixed-point with two decimals.
- Text fields containing a comma, quote or line break are wrapped in double
  quotes with embedded quotes doubled (``csv.QUOTE_MINIMAL``).
"""

from __future__ import annotations

import csv
import io
from collections.abc import Iterable
from datetime import date
from os import PathLike
from pathlib import Path

from .logging_setup import get_logger
from .models import (
    MONETARY_COLUMNS,
    DateFormat,
    ExportColumn,
    ExportSettings,
    TransactionRecord,
)

EXPORT_FILENAME_PREFIX = "bank_statement_"


_logger = get_logger("statement_converter.export")


def format_money(amount: float) -> str:
    return f"{amount:.2f}"


def format_date(value: str, date_format: DateFormat) -> str:
    """Reformat an ISO date; values that do not parse are written unchanged."""

    if date_format is DateFormat.ISO:
        return value
    try:
        parsed = date.fromisoformat(value.strip())
    except ValueError:
        return value
    if date_format is DateFormat.US:
        return parsed.strftime("%m/%d/%Y")
    return parsed.strftime("%d/%m/%Y")


def _cell(record: TransactionRecord, column: ExportColumn, settings: ExportSettings) -> str:
    if column in MONETARY_COLUMNS:
        return format_money(getattr(record, column.value))
    if column is ExportColumn.DATE:
        return format_date(record.date, settings.date_format)
    if column is ExportColumn.CATEGORY:
        return record.category or ""
    return record.description


def select_rows(
    records: Iterable[TransactionRecord], settings: ExportSettings
) -> list[TransactionRecord]:
    """Return the records that survive the ``exclude_invalid`` filter, in order."""

    if settings.exclude_invalid:
        return [r for r in records if r.is_valid]
    return list(records)


def render_csv(
    records: Iterable[TransactionRecord], settings: ExportSettings | None = None
) -> str:
    """Serialize ``records`` to CSV text according to ``settings``."""

    settings = settings or ExportSettings()
    rows = select_rows(records, settings)

    buf = io.StringIO()
    writer = csv.writer(buf, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow([c.label for c in settings.columns])
    for record in rows:
        writer.writerow([_cell(record, c, settings) for c in settings.columns])

    _logger.info(
        "export:render rows=%d columns=%d date_format=%s",
        len(rows),
        len(settings.columns),
        settings.date_format.value,
    )
    text = buf.getvalue()
    return text[:-1] if text.endswith("\n") else text


def export_filename(today: date | None = None) -> str:
    """Return ``bank_statement_<YYYY-MM-DD>.csv`` for ``today`` (default: now)."""

    return f"{EXPORT_FILENAME_PREFIX}{(today or date.today()).isoformat()}.csv"


def write_export(text: str, path: str | PathLike[str]) -> Path:
    """Write CSV ``text`` to ``path`` as UTF-8 and return the path."""

    p = Path(path)
    with p.open("w", encoding="utf-8", newline="") as f:
        f.write(text)
    _logger.info("export:written path=%s bytes=%d", p, len(text.encode("utf-8")))
    return p
