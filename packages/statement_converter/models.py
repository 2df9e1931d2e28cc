"""Data models and result types for ``statement_converter``.

Two families live here:

- Internal, immutable value types (frozen dataclasses) that flow through the
  ledger, the validator and the exporter.
- Pydantic models describing the loosely-typed JSON returned by the
  extraction model. They apply the defaulting rules at the boundary so nothing
  uncoerced reaches the ledger.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Ledger records
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class TransactionRecord:
    """A single statement line as held by the ledger.

    Attributes
    ----------
    id:
        Identifier assigned at ingestion; unique within a ledger and stable
        for the record's lifetime.
    date:
        ISO calendar date (``YYYY-MM-DD``) kept as text. Edits store the typed
        text verbatim, so the value is not guaranteed to parse.
    description:
        Free text from the statement.
    debit / credit:
        Amount subtracted from / added to the balance (``0.0`` when absent).
    balance:
        Running balance after this transaction, as declared by the source.
        Never recomputed; the validator compares against it.
    category:
        Optional classification label.
    is_valid:
        ``False`` flags the row for human review.
    notes:
        Optional free-form annotation.
    """

    id: str
    date: str
    description: str
    debit: float = 0.0
    credit: float = 0.0
    balance: float = 0.0
    category: str | None = None
    is_valid: bool = True
    notes: str | None = None


Ledger: TypeAlias = Sequence[TransactionRecord]
"""An ordered sequence of records; order is chronological and significant."""


@dataclass(frozen=True, slots=True)
class BalanceSummary:
    """Outcome of a balance-consistency check over a ledger."""

    is_valid: bool
    opening_balance: float
    expected_balance: float
    actual_balance: float
    difference: float
    total_transactions: int
    total_debits: float
    total_credits: float


# ---------------------------------------------------------------------------
# Uploaded documents
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class StatementDocument:
    """An uploaded statement: name, declared content type and raw bytes."""

    filename: str
    content_type: str
    data: bytes = field(repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


# ---------------------------------------------------------------------------
# Extraction results
# ---------------------------------------------------------------------------


class FailureKind(StrEnum):
    MISSING_CREDENTIAL = "missing_credential"
    SERVICE_ERROR = "service_error"
    MALFORMED_RESPONSE = "malformed_response"
    UNEXPECTED_ERROR = "unexpected_error"
    DISABLED = "disabled"


@dataclass(frozen=True, slots=True)
class ExtractionSuccess:
    transactions: tuple[TransactionRecord, ...]


@dataclass(frozen=True, slots=True)
class ExtractionFailure:
    """A gateway failure. ``reason`` is suitable for showing to the user."""

    kind: FailureKind
    reason: str


ExtractionResult: TypeAlias = ExtractionSuccess | ExtractionFailure


# ---------------------------------------------------------------------------
# Export configuration
# ---------------------------------------------------------------------------


class ExportColumn(StrEnum):
    DATE = "date"
    DESCRIPTION = "description"
    DEBIT = "debit"
    CREDIT = "credit"
    BALANCE = "balance"
    CATEGORY = "category"

    @property
    def label(self) -> str:
        return _COLUMN_LABELS[self]


_COLUMN_LABELS: dict[ExportColumn, str] = {
    ExportColumn.DATE: "Date",
    ExportColumn.DESCRIPTION: "Description",
    ExportColumn.DEBIT: "Debit Amount",
    ExportColumn.CREDIT: "Credit Amount",
    ExportColumn.BALANCE: "Balance",
    ExportColumn.CATEGORY: "Category",
}

MONETARY_COLUMNS: frozenset[ExportColumn] = frozenset(
    {ExportColumn.DEBIT, ExportColumn.CREDIT, ExportColumn.BALANCE}
)


class DateFormat(StrEnum):
    ISO = "YYYY-MM-DD"
    US = "MM/DD/YYYY"
    EUROPEAN = "DD/MM/YYYY"


@dataclass(frozen=True, slots=True)
class ExportSettings:
    """Which columns to write, how to format dates, and whether to drop flagged rows.

    ``columns`` keeps the caller's order; it may be given as strings and is
    normalized to :class:`ExportColumn` members.
    """

    columns: tuple[ExportColumn, ...] = tuple(ExportColumn)
    date_format: DateFormat = DateFormat.ISO
    exclude_invalid: bool = False

    def __post_init__(self) -> None:
        if not self.columns:
            raise ValueError("ExportSettings requires at least one column")
        try:
            normalized = tuple(ExportColumn(c) for c in self.columns)
        except ValueError as e:
            allowed = ", ".join(c.value for c in ExportColumn)
            raise ValueError(f"Unknown export column; expected one of: {allowed}") from e
        if len(set(normalized)) != len(normalized):
            raise ValueError("ExportSettings.columns must not repeat a column")
        object.__setattr__(self, "columns", normalized)
        object.__setattr__(self, "date_format", DateFormat(self.date_format))


# ---------------------------------------------------------------------------
# Boundary DTOs for the extraction model's JSON
# ---------------------------------------------------------------------------


class ExtractedTransaction(BaseModel):
    """One transaction as emitted by the model, before defaulting.

    Every field is optional; :func:`statement_converter.extraction.parse_extraction_payload`
    fills the gaps. Amounts are accepted as numbers or numeric strings.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, str_strip_whitespace=True)

    id: str | None = None
    date: str | None = None
    description: str | None = None
    debit: Any = None
    credit: Any = None
    balance: Any = None
    category: str | None = None
    is_valid: bool | None = Field(default=None, alias="isValid")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_text(cls, v: Any) -> str | None:
        if isinstance(v, str):
            return v
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(v)
        return None

    @field_validator("date", "description", "category", mode="before")
    @classmethod
    def _scalar_as_text(cls, v: Any) -> str | None:
        # A stray non-text value defaults this field only, not the whole row.
        if isinstance(v, str):
            return v
        if isinstance(v, int | float) and not isinstance(v, bool):
            return str(v)
        return None

    @field_validator("date", "description", "category")
    @classmethod
    def _blank_to_none(cls, v: str | None) -> str | None:
        return v if v else None

    @field_validator("is_valid", mode="before")
    @classmethod
    def _loose_bool(cls, v: Any) -> bool | None:
        # Only an explicit false marks the row; anything else is left to defaulting.
        if v is False or (isinstance(v, str) and v.strip().lower() == "false"):
            return False
        if v is None:
            return None
        return True


class ExtractionPayload(BaseModel):
    model_config = ConfigDict(extra="ignore")

    transactions: list[ExtractedTransaction]
