"""Public interface for the ``statement_converter`` package.

Re-exports the library entrypoints and the public models; there is no runtime
logic here.
"""

from .api import export_statement, load_statement
from .export import export_filename, render_csv
from .extraction import extract_transactions
from .intake import UploadRejected, check_document, read_document
from .ledger import LedgerStore, UnknownRecordError, coerce_amount
from .models import (
    BalanceSummary,
    DateFormat,
    ExportColumn,
    ExportSettings,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    FailureKind,
    StatementDocument,
    TransactionRecord,
)
from .session import StatementSession
from .validation import validate_balances

__all__ = [
    # API
    "load_statement",
    "export_statement",
    "extract_transactions",
    "validate_balances",
    "render_csv",
    "export_filename",
    "read_document",
    "check_document",
    "coerce_amount",
    # State
    "LedgerStore",
    "StatementSession",
    # Models / types
    "TransactionRecord",
    "BalanceSummary",
    "StatementDocument",
    "ExportSettings",
    "ExportColumn",
    "DateFormat",
    "ExtractionResult",
    "ExtractionSuccess",
    "ExtractionFailure",
    "FailureKind",
    # Errors
    "UploadRejected",
    "UnknownRecordError",
]
