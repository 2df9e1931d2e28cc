"""State container for one statement-conversion session.

``StatementSession`` owns everything the interface shows: the uploaded
document, the ledger, the processing flag and the fallback warning. Display
and query helpers receive it (or its records) explicitly; nothing here is a
module-level singleton.

Extraction is the only suspension point. While it runs the ledger is empty,
so no edit can target a record. A result that arrives after :meth:`reset` or
after a newer :meth:`process` call is discarded.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Literal, TypeAlias

from .demo import demo_transactions
from .export import render_csv
from .extraction import extract_transactions
from .intake import check_document
from .ledger import LedgerStore
from .logging_setup import get_logger
from .models import (
    BalanceSummary,
    ExportSettings,
    ExtractionFailure,
    ExtractionResult,
    FailureKind,
    StatementDocument,
    TransactionRecord,
)
from .validation import validate_balances

Gateway: TypeAlias = Callable[[StatementDocument], ExtractionResult]
Fallback: TypeAlias = Callable[[], tuple[TransactionRecord, ...]]
DataSource: TypeAlias = Literal["extracted", "demo"]

UNEXPECTED_FAILURE_MESSAGE = "An error occurred while processing the file."


_logger = get_logger("statement_converter.session")


class StatementSession:
    """Current document, ledger and status for one user.

    Parameters
    ----------
    gateway:
        ``document -> ExtractionResult``; defaults to the OpenAI-backed
        :func:`~statement_converter.extraction.extract_transactions`.
    fallback:
        Supplies the demo dataset installed when the gateway fails.
    """

    def __init__(
        self,
        *,
        gateway: Gateway = extract_transactions,
        fallback: Fallback = demo_transactions,
    ) -> None:
        self._gateway = gateway
        self._fallback = fallback
        self._generation = 0
        self.document: StatementDocument | None = None
        self.ledger = LedgerStore()
        self.is_processing = False
        self.warning: str | None = None
        self.source: DataSource | None = None

    @property
    def records(self) -> tuple[TransactionRecord, ...]:
        return self.ledger.records

    @property
    def has_data(self) -> bool:
        return bool(self.ledger)

    @property
    def summary(self) -> BalanceSummary | None:
        return validate_balances(self.ledger.records)

    async def process(self, document: StatementDocument) -> bool:
        """Accept ``document`` and populate the ledger from the gateway.

        Raises :class:`~statement_converter.intake.UploadRejected` before any
        state changes when the document is not acceptable. Returns ``True``
        when this call's result was installed, ``False`` when it was
        superseded by :meth:`reset` or a newer upload.
        """

        check_document(document)

        self._generation += 1
        generation = self._generation
        self.document = document
        self.ledger.reset()
        self.is_processing = True
        self.warning = None
        self.source = None

        try:
            try:
                result: ExtractionResult = await asyncio.to_thread(self._gateway, document)
            except Exception as e:  # noqa: BLE001 - any gateway crash routes to the fallback
                _logger.error(
                    "session:gateway_crashed filename=%s error=%s",
                    document.filename,
                    e.__class__.__name__,
                )
                result = ExtractionFailure(
                    kind=FailureKind.UNEXPECTED_ERROR, reason=UNEXPECTED_FAILURE_MESSAGE
                )

            if generation != self._generation:
                _logger.info("session:result_discarded filename=%s", document.filename)
                return False

            if isinstance(result, ExtractionFailure):
                self.warning = result.reason
                self.ledger.load(self._fallback())
                self.source = "demo"
                _logger.warning(
                    "session:fallback filename=%s kind=%s count=%d",
                    document.filename,
                    result.kind,
                    len(self.ledger),
                )
            else:
                self.ledger.load(result.transactions)
                self.source = "extracted"
                _logger.info(
                    "session:loaded filename=%s count=%d", document.filename, len(self.ledger)
                )
            return True
        finally:
            # A newer upload owns the flag once the generation has moved on.
            if generation == self._generation:
                self.is_processing = False

    def process_sync(self, document: StatementDocument) -> bool:
        """Blocking wrapper around :meth:`process` for scripts and the CLI."""

        return asyncio.run(self.process(document))

    def update_field(self, record_id: str, field: str, value: str) -> tuple[TransactionRecord, ...]:
        return self.ledger.update_field(record_id, field, value)

    def set_validity(self, record_id: str, is_valid: bool) -> tuple[TransactionRecord, ...]:
        return self.ledger.set_validity(record_id, is_valid)

    def reset(self) -> None:
        """Drop the document, the ledger and any pending extraction result."""

        self._generation += 1
        self.document = None
        self.ledger.reset()
        self.is_processing = False
        self.warning = None
        self.source = None

    def render_csv(self, settings: ExportSettings | None = None) -> str:
        return render_csv(self.ledger.records, settings)
