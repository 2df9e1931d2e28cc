"""Library entrypoints for converting a statement file.

:func:`load_statement` runs intake and extraction (with the demo fallback) and
returns the populated :class:`~statement_converter.session.StatementSession`.
:func:`export_statement` writes the CSV for a ledger. The CLI is a thin layer
over these two functions.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date
from os import PathLike
from pathlib import Path

from .export import export_filename, render_csv, write_export
from .intake import read_document
from .models import (
    ExportSettings,
    ExtractionFailure,
    FailureKind,
    StatementDocument,
    TransactionRecord,
)
from .session import Gateway, StatementSession

DEMO_MODE_MESSAGE = "Demo mode requested; AI extraction was skipped."


def demo_gateway(document: StatementDocument) -> ExtractionFailure:
    """Gateway that always declines, routing the session to the demo dataset."""

    return ExtractionFailure(kind=FailureKind.DISABLED, reason=DEMO_MODE_MESSAGE)


def load_statement(
    pdf_path: str | PathLike[str],
    *,
    use_demo: bool = False,
    gateway: Gateway | None = None,
) -> StatementSession:
    """Read ``pdf_path``, extract its transactions and return the session.

    Raises
    ------
    UploadRejected
        The file is not a PDF, is empty, or exceeds the size limit.
    OSError
        The file cannot be read.
    """

    document = read_document(pdf_path)
    if use_demo:
        session = StatementSession(gateway=demo_gateway)
    elif gateway is not None:
        session = StatementSession(gateway=gateway)
    else:
        session = StatementSession()
    session.process_sync(document)
    return session


def export_statement(
    records: Iterable[TransactionRecord],
    *,
    settings: ExportSettings | None = None,
    out_path: str | PathLike[str] | None = None,
    today: date | None = None,
) -> Path:
    """Render ``records`` as CSV and write them.

    ``out_path`` defaults to ``bank_statement_<date>.csv`` in the working
    directory; a directory path receives that file name inside it.
    """

    target = Path(out_path) if out_path is not None else Path(export_filename(today))
    if target.is_dir():
        target = target / export_filename(today)
    return write_export(render_csv(records, settings), target)
