"""Interactive review of an extracted ledger.

The loop mirrors the editable table: show the rows and the balance banner,
pick a record and a field, type the new value, apply it through the session,
and re-run validation. Prompt and render callables are injectable so the loop
can be tested without a terminal.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import TypeAlias

from rich.console import Console

from . import term_ui
from .display import build_ledger_table, build_summary_panel, review_counts_line
from .ledger import EDITABLE_FIELDS, NUMERIC_FIELDS
from .logging_setup import get_logger
from .models import TransactionRecord
from .session import StatementSession

SelectRecord: TypeAlias = Callable[[Sequence[str]], str | None]
SelectField: TypeAlias = Callable[[Sequence[str]], str | None]
PromptValue: TypeAlias = Callable[[str, str], str | None]
Render: TypeAlias = Callable[[StatementSession], None]


_logger = get_logger("statement_converter.review")


def _initial_text(record: TransactionRecord, field_name: str) -> str:
    value = getattr(record, field_name)
    if value is None:
        return ""
    if field_name in NUMERIC_FIELDS:
        return f"{value:.2f}"
    return str(value)


def render_session(session: StatementSession, console: Console | None = None) -> None:
    """Print the ledger table, counts and the balance banner."""

    console = console or Console()
    console.print(build_ledger_table(session.records))
    console.print(review_counts_line(session.records))
    panel = build_summary_panel(session.summary)
    if panel is not None:
        console.print(panel)


def _select_field(fields: Sequence[str]) -> str | None:
    return term_ui.select_field(fields)


def _prompt_value(name: str, initial: str) -> str | None:
    return term_ui.prompt_field_value(name, initial=initial)


@dataclass
class ReviewPrompts:
    """Bundle of the interactive callables used by :func:`review_ledger`."""

    select_record: SelectRecord = term_ui.select_record_id
    select_field: SelectField = _select_field
    prompt_value: PromptValue = _prompt_value


def review_ledger(
    session: StatementSession,
    *,
    prompts: ReviewPrompts | None = None,
    render: Render | None = None,
) -> tuple[TransactionRecord, ...]:
    """Run the edit loop until the user submits an empty record id.

    Choosing :data:`~statement_converter.term_ui.TOGGLE_REVIEW_FIELD` flips the
    record's review flag instead of prompting for a value. Cancelling a field
    or value prompt returns to record selection without changes. Returns the
    final ledger snapshot.
    """

    prompts = prompts or ReviewPrompts()
    render = render or render_session
    field_choices = [*EDITABLE_FIELDS, term_ui.TOGGLE_REVIEW_FIELD]
    edits = 0

    while True:
        render(session)
        record_id = prompts.select_record([r.id for r in session.records])
        if record_id is None:
            break
        record = session.ledger.get(record_id)

        field_name = prompts.select_field(field_choices)
        if field_name is None:
            continue
        if field_name == term_ui.TOGGLE_REVIEW_FIELD:
            session.set_validity(record_id, not record.is_valid)
            edits += 1
            continue

        value = prompts.prompt_value(field_name, _initial_text(record, field_name))
        if value is None:
            continue
        session.update_field(record_id, field_name, value)
        edits += 1

    summary = session.summary
    _logger.info(
        "review:done edits=%d balanced=%s",
        edits,
        summary.is_valid if summary is not None else None,
    )
    return session.records
