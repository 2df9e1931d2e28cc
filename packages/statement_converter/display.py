"""Rich renderables for the ledger table and the validation banner."""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .models import BalanceSummary, TransactionRecord
from .validation import count_needing_review, describe_summary, format_amount


def build_ledger_table(records: Iterable[TransactionRecord], *, title: str | None = None) -> Table:
    """Return a table with one row per record, flagged rows highlighted."""

    table = Table(title=title, show_lines=False, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("ID")
    table.add_column("Date")
    table.add_column("Description", overflow="fold")
    table.add_column("Debit", justify="right")
    table.add_column("Credit", justify="right")
    table.add_column("Balance", justify="right")
    table.add_column("Category")
    table.add_column("Review", justify="center")

    for pos, r in enumerate(records, start=1):
        table.add_row(
            str(pos),
            r.id,
            r.date,
            r.description,
            format_amount(r.debit) if r.debit else "",
            format_amount(r.credit) if r.credit else "",
            format_amount(r.balance),
            r.category or "",
            "" if r.is_valid else "!",
            style=None if r.is_valid else "yellow",
        )
    return table


def build_summary_panel(summary: BalanceSummary | None) -> Panel | None:
    """Return the validation banner, or ``None`` for an empty ledger."""

    if summary is None:
        return None
    lines = describe_summary(summary)
    style = "green" if summary.is_valid else "red"
    body = Group(Text(lines[0], style="dim"), *(Text(line, style=style) for line in lines[1:]))
    return Panel(body, title="Balance Validation", border_style=style)


def build_warning_panel(warning: str) -> Panel:
    return Panel(
        Text.assemble(
            (warning, "bold"),
            "\nShowing demo data instead; these rows do not come from your document.",
        ),
        title="Extraction unavailable",
        border_style="yellow",
    )


def review_counts_line(records: Iterable[TransactionRecord]) -> str:
    items = list(records)
    flagged = count_needing_review(items)
    return f"{len(items)} total transactions • {len(items) - flagged} valid • {flagged} need review"
