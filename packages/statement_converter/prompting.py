"""Prompt text and strict response schema for statement extraction.

This module builds:
- The system instructions for the extraction task.
- The user-turn input: the PDF as an inline base64 ``input_file`` plus the
  task text.
- The strict ``json_schema`` text format for the OpenAI Responses API.
"""

from __future__ import annotations

import base64
from typing import Any

from openai.types.responses.response_format_text_json_schema_config_param import (
    ResponseFormatTextJSONSchemaConfigParam,
)

from .models import StatementDocument

TRANSACTION_FIELD_ORDER: tuple[str, ...] = (
    "id",
    "date",
    "description",
    "debit",
    "credit",
    "balance",
    "category",
    "isValid",
)


def build_system_instructions() -> str:
    return (
        "You are an assistant that extracts bank statement transactions from PDF documents. "
        "Return every transaction in statement order. Output JSON only that conforms to the "
        "specified schema."
    )


def build_task_text() -> str:
    """Return the extraction rules sent alongside the document."""

    rules = [
        "Extract all transactions from the attached bank statement.",
        "Rules:",
        "1. Give each transaction a unique id.",
        "2. Write dates as YYYY-MM-DD.",
        "3. Amounts are plain numbers without thousands separators or currency symbols.",
        "4. Put withdrawals/payments in debit and deposits in credit; use 0 when absent.",
        "5. balance is the running balance printed after the transaction.",
        "6. Suggest a short category for each transaction (e.g. Salary, Groceries, Utilities).",
        "7. Set isValid to false when any part of the row could not be read reliably.",
    ]
    return "\n".join(rules)


def _as_data_url(document: StatementDocument) -> str:
    encoded = base64.b64encode(document.data).decode("ascii")
    return f"data:{document.content_type};base64,{encoded}"


def build_user_input(document: StatementDocument) -> list[dict[str, Any]]:
    """Return the Responses ``input`` list carrying the document and the task."""

    return [
        {
            "role": "user",
            "content": [
                {
                    "type": "input_file",
                    "filename": document.filename,
                    "file_data": _as_data_url(document),
                },
                {"type": "input_text", "text": build_task_text()},
            ],
        }
    ]


def build_response_format() -> ResponseFormatTextJSONSchemaConfigParam:
    """Return the strict JSON Schema text format for the extraction response.

    Shape::

        {"transactions": [{"id", "date", "description", "debit", "credit",
                           "balance", "category", "isValid"}, ...]}
    """

    result: ResponseFormatTextJSONSchemaConfigParam = {
        "type": "json_schema",
        "name": "bank_statement_transactions",
        "schema": {
            "type": "object",
            "properties": {
                "transactions": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "id": {"type": "string"},
                            "date": {"type": "string"},
                            "description": {"type": "string"},
                            "debit": {"type": "number"},
                            "credit": {"type": "number"},
                            "balance": {"type": "number"},
                            "category": {"type": ["string", "null"]},
                            "isValid": {"type": "boolean"},
                        },
                        "required": list(TRANSACTION_FIELD_ORDER),
                        "additionalProperties": False,
                    },
                }
            },
            "required": ["transactions"],
            "additionalProperties": False,
        },
        "strict": True,
    }
    return result
