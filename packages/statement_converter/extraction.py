"""Statement extraction through the OpenAI Responses API.

Public API:
    - :func:`extract_transactions`
    - :func:`parse_extraction_payload`

The gateway never raises for service problems: every failure comes back as an
:class:`~statement_converter.models.ExtractionFailure` whose ``reason`` can be
shown to the user. There are no retries; the caller decides what to do with a
failure (the session substitutes the demo dataset). No client is created and
no environment is read at import time.
"""

from __future__ import annotations

import dataclasses
import json
import os
import time
from collections.abc import Mapping
from datetime import date
from typing import Any

from openai import OpenAI
from pydantic import ValidationError

from . import prompting
from .ledger import coerce_amount
from .logging_setup import get_logger
from .models import (
    ExtractedTransaction,
    ExtractionFailure,
    ExtractionPayload,
    ExtractionResult,
    ExtractionSuccess,
    FailureKind,
    StatementDocument,
    TransactionRecord,
)

API_KEY_ENV_VAR = "OPENAI_API_KEY"
MODEL_ENV_VAR = "STATEMENT_CONVERTER_MODEL"
_DEFAULT_MODEL: str = "gpt-5"

UNKNOWN_DESCRIPTION = "Unknown transaction"
DEFAULT_CATEGORY = "Other"


_logger = get_logger("statement_converter.extraction")


def _create_client() -> OpenAI:
    return OpenAI()


def _resolve_model(model: str | None) -> str:
    if model:
        return model
    return os.getenv(MODEL_ENV_VAR) or _DEFAULT_MODEL


# ---- Response decoding -------------------------------------------------------


def _response_text(resp: Any) -> str:
    """Locate the text output of a Responses SDK result.

    Prefers ``resp.output_text`` and falls back to
    ``resp.output[0].content[0].text``.
    """

    text: str | None = getattr(resp, "output_text", None)
    if not text:
        try:
            first = resp.output[0] if getattr(resp, "output", None) else None
            content = getattr(first, "content", None)
            if content:
                candidate = getattr(content[0], "text", None)
                if isinstance(candidate, str):
                    text = candidate
        except (AttributeError, IndexError, TypeError):
            text = None
    if not text or not isinstance(text, str):
        raise ValueError("Unexpected Responses API shape; unable to locate text output")
    return text


def decode_json_object(text: str) -> Mapping[str, Any]:
    """Decode a JSON object from model output.

    Accepts either a bare object or prose around one; in the latter case the
    span from the first ``{`` to the last ``}`` is decoded.
    """

    try:
        decoded = json.loads(text)
    except json.JSONDecodeError:
        start, end = text.find("{"), text.rfind("}")
        if start == -1 or end <= start:
            raise ValueError("No JSON object found in model output") from None
        try:
            decoded = json.loads(text[start : end + 1])
        except json.JSONDecodeError as e:
            raise ValueError("Model output was not valid JSON") from e
    if not isinstance(decoded, Mapping):
        raise ValueError("Model output must be a JSON object")
    return decoded


def _unique_id(candidate: str, seen: set[str]) -> str:
    if candidate not in seen:
        return candidate
    n = 2
    while f"{candidate}-{n}" in seen:
        n += 1
    return f"{candidate}-{n}"


def _to_record(item: ExtractedTransaction, position: int, *, today: str) -> TransactionRecord:
    return TransactionRecord(
        id=item.id or f"transaction_{position}",
        date=item.date or today,
        description=item.description or UNKNOWN_DESCRIPTION,
        debit=coerce_amount(item.debit),
        credit=coerce_amount(item.credit),
        balance=coerce_amount(item.balance),
        category=item.category or DEFAULT_CATEGORY,
        is_valid=item.is_valid is not False,
    )


def parse_extraction_payload(
    body: Mapping[str, Any], *, today: date | None = None
) -> tuple[TransactionRecord, ...]:
    """Validate the decoded model JSON and apply the boundary defaults.

    Defaults: missing id → ``transaction_<n>`` (1-based position), repeated
    ids get a ``-2``/``-3``… suffix, missing date → ``today``, missing
    description → ``"Unknown transaction"``, amounts coerced with
    :func:`~statement_converter.ledger.coerce_amount`, missing category →
    ``"Other"``, ``isValid`` true unless explicitly false.

    Raises ``ValueError`` when ``transactions`` is missing or not a list of
    objects.
    """

    try:
        payload = ExtractionPayload.model_validate(body)
    except ValidationError as e:
        raise ValueError(f"Invalid extraction response: {e.error_count()} schema error(s)") from e

    today_iso = (today or date.today()).isoformat()
    seen: set[str] = set()
    records: list[TransactionRecord] = []
    for position, item in enumerate(payload.transactions, start=1):
        record = _to_record(item, position, today=today_iso)
        unique = _unique_id(record.id, seen)
        if unique != record.id:
            _logger.warning("extract_transactions:duplicate_id id=%s renamed=%s", record.id, unique)
            record = dataclasses.replace(record, id=unique)
        seen.add(record.id)
        records.append(record)
    return tuple(records)


# ---- Gateway -----------------------------------------------------------------


def extract_transactions(
    document: StatementDocument,
    *,
    client: OpenAI | None = None,
    model: str | None = None,
) -> ExtractionResult:
    """Extract the ordered transactions of ``document``.

    Parameters
    ----------
    document:
        An accepted statement (see :func:`statement_converter.intake.check_document`).
    client:
        Optional pre-built OpenAI client. When omitted, ``OPENAI_API_KEY`` must
        be set; otherwise a ``MISSING_CREDENTIAL`` failure is returned without
        any network call.
    model:
        Model name; defaults to ``STATEMENT_CONVERTER_MODEL`` or ``gpt-5``.
    """

    if client is None:
        if not os.getenv(API_KEY_ENV_VAR):
            _logger.info("extract_transactions:no_credential filename=%s", document.filename)
            return ExtractionFailure(
                kind=FailureKind.MISSING_CREDENTIAL,
                reason=f"{API_KEY_ENV_VAR} is not configured; AI extraction is unavailable.",
            )
        client = _create_client()

    resolved_model = _resolve_model(model)
    _logger.info(
        "extract_transactions:start filename=%s size=%d model=%s",
        document.filename,
        document.size,
        resolved_model,
    )

    t0 = time.perf_counter()
    try:
        resp = client.responses.create(
            model=resolved_model,
            instructions=prompting.build_system_instructions(),
            input=prompting.build_user_input(document),
            text={"format": prompting.build_response_format()},
        )
    except Exception as e:  # noqa: BLE001 - SDK/network errors surface as a failure value
        dt_ms = (time.perf_counter() - t0) * 1000.0
        _logger.error(
            "extract_transactions:service_error latency_ms=%.2f error=%s",
            dt_ms,
            e.__class__.__name__,
        )
        return ExtractionFailure(
            kind=FailureKind.SERVICE_ERROR,
            reason=f"AI processing failed ({e.__class__.__name__}). Please try again later.",
        )

    try:
        records = parse_extraction_payload(decode_json_object(_response_text(resp)))
    except ValueError as e:
        _logger.error("extract_transactions:malformed_response error=%s", e)
        return ExtractionFailure(
            kind=FailureKind.MALFORMED_RESPONSE,
            reason=(
                "Could not interpret the AI response; the PDF layout may not be supported. "
                f"({e})"
            ),
        )

    dt_ms = (time.perf_counter() - t0) * 1000.0
    _logger.info(
        "extract_transactions:done filename=%s count=%d latency_ms=%.2f",
        document.filename,
        len(records),
        dt_ms,
    )
    return ExtractionSuccess(transactions=records)
