"""In-memory ledger with cell-level edits.

The store holds one immutable snapshot (a tuple of frozen records). Every edit
builds a new tuple and swaps it in, so readers such as the validator or the
exporter always see a whole snapshot. No validation happens at write time.
"""

from __future__ import annotations

import dataclasses
import math
from collections.abc import Iterable, Iterator
from typing import Any

from .logging_setup import get_logger
from .models import TransactionRecord

EDITABLE_FIELDS: tuple[str, ...] = (
    "date",
    "description",
    "debit",
    "credit",
    "balance",
    "category",
)
NUMERIC_FIELDS: frozenset[str] = frozenset({"debit", "credit", "balance"})


_logger = get_logger("statement_converter.ledger")


class UnknownRecordError(KeyError):
    """Raised when an edit targets an id that is not in the ledger."""


def coerce_amount(value: Any) -> float:
    """Parse ``value`` as a monetary amount, falling back to ``0.0``.

    Numbers pass through; text is stripped of whitespace and ``,`` thousands
    separators before ``float()``. Unparseable, empty, boolean and non-finite
    inputs yield ``0.0``.
    """

    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, int | float):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        try:
            number = float(text)
        except ValueError:
            _logger.debug("coerce_amount:unparseable value=%r", value)
            return 0.0
    return number if math.isfinite(number) else 0.0


def _ensure_unique_ids(records: Iterable[TransactionRecord]) -> tuple[TransactionRecord, ...]:
    snapshot = tuple(records)
    seen: set[str] = set()
    for record in snapshot:
        if record.id in seen:
            raise ValueError(f"Duplicate transaction id in ledger: {record.id!r}")
        seen.add(record.id)
    return snapshot


class LedgerStore:
    """Ordered collection of :class:`TransactionRecord` with immutable updates."""

    def __init__(self, records: Iterable[TransactionRecord] = ()) -> None:
        self._records: tuple[TransactionRecord, ...] = _ensure_unique_ids(records)

    @property
    def records(self) -> tuple[TransactionRecord, ...]:
        return self._records

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TransactionRecord]:
        return iter(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def load(self, records: Iterable[TransactionRecord]) -> tuple[TransactionRecord, ...]:
        """Replace the whole ledger with ``records`` (ids must be unique)."""

        self._records = _ensure_unique_ids(records)
        return self._records

    def reset(self) -> None:
        self._records = ()

    def get(self, record_id: str) -> TransactionRecord:
        for record in self._records:
            if record.id == record_id:
                return record
        raise UnknownRecordError(record_id)

    def _replace_record(self, record_id: str, **changes: Any) -> tuple[TransactionRecord, ...]:
        found = False
        updated: list[TransactionRecord] = []
        for record in self._records:
            if record.id == record_id:
                updated.append(dataclasses.replace(record, **changes))
                found = True
            else:
                updated.append(record)
        if not found:
            raise UnknownRecordError(record_id)
        self._records = tuple(updated)
        return self._records

    def update_field(self, record_id: str, field: str, value: Any) -> tuple[TransactionRecord, ...]:
        """Replace one field of one record and return the new snapshot.

        ``debit``/``credit``/``balance`` go through :func:`coerce_amount`;
        the other editable fields store ``str(value)`` verbatim. The previous
        snapshot object is left untouched.

        Raises
        ------
        ValueError
            ``field`` is not one of :data:`EDITABLE_FIELDS`.
        UnknownRecordError
            No record has ``record_id``.
        """

        if field not in EDITABLE_FIELDS:
            raise ValueError(
                f"Field {field!r} is not editable; expected one of: {', '.join(EDITABLE_FIELDS)}"
            )
        new_value: Any = coerce_amount(value) if field in NUMERIC_FIELDS else str(value)
        snapshot = self._replace_record(record_id, **{field: new_value})
        _logger.debug("ledger:update_field id=%s field=%s", record_id, field)
        return snapshot

    def set_validity(self, record_id: str, is_valid: bool) -> tuple[TransactionRecord, ...]:
        """Set the review flag of one record and return the new snapshot."""

        snapshot = self._replace_record(record_id, is_valid=bool(is_valid))
        _logger.debug("ledger:set_validity id=%s is_valid=%s", record_id, is_valid)
        return snapshot
