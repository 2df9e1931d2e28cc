"""Terminal prompts (prompt_toolkit) for editing ledger cells.

The prompts are kept apart from the review loop so they can be driven by a
pipe input in tests. Each prompt accepts an optional ``session`` whose
``input``/``output`` are reused; Esc or Ctrl+C cancels and returns ``None``.
"""

from __future__ import annotations

from collections.abc import Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.validation import ValidationError, Validator

from .ledger import NUMERIC_FIELDS

TOGGLE_REVIEW_FIELD = "review-flag"


def _cancel_bindings() -> KeyBindings:
    kb = KeyBindings()

    @kb.add("escape")
    def _(event) -> None:  # pragma: no cover - exercised indirectly
        event.app.exit(result=None)

    @kb.add("c-c", eager=True)
    def _(event) -> None:  # pragma: no cover - exercised indirectly
        event.app.exit(result=None)

    return kb


def _session_for(session: PromptSession | None, kb: KeyBindings) -> PromptSession:
    if session is None:
        return PromptSession(key_bindings=kb)
    return PromptSession(
        input=getattr(session, "input", None),
        output=getattr(session, "output", None),
        key_bindings=kb,
    )


class _ChoiceValidator(Validator):
    def __init__(self, choices: Sequence[str], *, allow_empty: bool, hint: str) -> None:
        self._choices = set(choices)
        self._allow_empty = allow_empty
        self._hint = hint

    def validate(self, document) -> None:
        text = document.text.strip()
        if not text and self._allow_empty:
            return
        if text not in self._choices:
            raise ValidationError(message=self._hint)


def select_record_id(
    record_ids: Sequence[str],
    *,
    session: PromptSession | None = None,
    message: str = "Record id to edit (Enter when done): ",
) -> str | None:
    """Ask which record to edit. Empty input or Esc returns ``None``."""

    kb = _cancel_bindings()
    completer = WordCompleter(list(record_ids), sentence=True)
    value = _session_for(session, kb).prompt(
        message,
        completer=completer,
        validator=_ChoiceValidator(
            record_ids, allow_empty=True, hint="Enter an id shown in the table."
        ),
        validate_while_typing=False,
    )
    if value is None:
        return None
    value = value.strip()
    return value or None


def select_field(
    fields: Sequence[str],
    *,
    default: str = "description",
    session: PromptSession | None = None,
    message: str = "Field: ",
) -> str | None:
    """Ask which field to edit; the completion menu lists ``fields``."""

    kb = _cancel_bindings()
    completer = WordCompleter(list(fields), sentence=True)
    value = _session_for(session, kb).prompt(
        message,
        default=default,
        completer=completer,
        validator=_ChoiceValidator(
            fields, allow_empty=False, hint=f"Choose one of: {', '.join(fields)}"
        ),
        validate_while_typing=False,
    )
    return value.strip() if value is not None else None


def prompt_field_value(
    field: str,
    *,
    initial: str = "",
    session: PromptSession | None = None,
) -> str | None:
    """Collect the new text for ``field``, pre-filled with ``initial``.

    Monetary fields are not validated here: unparseable amounts become ``0``
    when the ledger applies the edit, and the prompt says so.
    """

    kb = _cancel_bindings()
    hint = " (number; invalid input saves as 0)" if field in NUMERIC_FIELDS else ""
    return _session_for(session, kb).prompt(f"New {field}{hint}: ", default=initial)


__all__ = [
    "TOGGLE_REVIEW_FIELD",
    "prompt_field_value",
    "select_field",
    "select_record_id",
]
