"""Balance-consistency check for a ledger.

The declared ``balance`` of each record is input data, never derived. This
module derives an opening balance from the first record, replays the
debits/credits of the remaining records from there, and compares the result
with the final balance the statement declares. The check is pure and cheap
enough to re-run after every edit.
"""

from __future__ import annotations

import math
from collections.abc import Iterable

from .models import BalanceSummary, Ledger, TransactionRecord

# One minor currency unit absorbs rounding noise from extraction.
BALANCE_TOLERANCE: float = 1.0


def validate_balances(records: Ledger) -> BalanceSummary | None:
    """Check that the declared balances of ``records`` chain together.

    Returns ``None`` for an empty ledger. Otherwise the opening balance is
    taken from the first record as ``balance - debit + credit``, the deltas of
    ``records[1:]`` are replayed in order, and the result is compared with the
    last record's declared balance. The chain is valid when the absolute
    difference is below :data:`BALANCE_TOLERANCE`.

    A single record is therefore valid only when its own debit and credit
    differ by less than the tolerance.
    """

    if not records:
        return None

    first = records[0]
    opening = first.balance - first.debit + first.credit

    expected = opening
    for record in records[1:]:
        expected = expected - record.debit + record.credit

    actual = records[-1].balance
    difference = abs(expected - actual)

    return BalanceSummary(
        is_valid=difference < BALANCE_TOLERANCE,
        opening_balance=opening,
        expected_balance=expected,
        actual_balance=actual,
        difference=difference,
        total_transactions=len(records),
        total_debits=math.fsum(r.debit for r in records),
        total_credits=math.fsum(r.credit for r in records),
    )


def count_needing_review(records: Iterable[TransactionRecord]) -> int:
    return sum(1 for r in records if not r.is_valid)


def format_amount(amount: float) -> str:
    return f"{amount:,.2f}"


def describe_summary(summary: BalanceSummary) -> list[str]:
    """Return the banner lines shown above the ledger table."""

    stats = (
        f"{summary.total_transactions} transactions | "
        f"Total Debits: {format_amount(summary.total_debits)} | "
        f"Total Credits: {format_amount(summary.total_credits)}"
    )
    if summary.is_valid:
        return [stats, "All balances are correctly calculated and validated"]
    return [
        stats,
        "Balance mismatch detected!",
        (
            f"Expected final balance: {format_amount(summary.expected_balance)} | "
            f"Actual final balance: {format_amount(summary.actual_balance)} | "
            f"Difference: {format_amount(summary.difference)}"
        ),
        "Please review the transaction amounts and balances for accuracy.",
    ]
