"""Fixed fallback dataset used when live extraction is unavailable.

Callers that install these rows must also show a warning; the dataset is never
presented as if it came from the uploaded document.
"""

from __future__ import annotations

from .models import TransactionRecord

DEMO_TRANSACTIONS: tuple[TransactionRecord, ...] = (
    TransactionRecord(
        id="1",
        date="2024-01-15",
        description="Purchase at AMAZON.CO.JP",
        debit=15420.0,
        credit=0.0,
        balance=524580.0,
        category="Shopping",
    ),
    TransactionRecord(
        id="2",
        date="2024-01-16",
        description="Salary deposit",
        debit=0.0,
        credit=250000.0,
        balance=774580.0,
        category="Salary",
    ),
    TransactionRecord(
        id="3",
        date="2024-01-17",
        description="Convenience store",
        debit=890.0,
        credit=0.0,
        balance=773690.0,
        category="Food",
    ),
    TransactionRecord(
        id="4",
        date="2024-01-18",
        description="Electricity bill",
        debit=8500.0,
        credit=0.0,
        balance=765190.0,
        category="Utilities",
    ),
    TransactionRecord(
        id="5",
        date="2024-01-19",
        description="ATM withdrawal",
        debit=20000.0,
        credit=0.0,
        balance=745190.0,
        category="Cash Withdrawal",
    ),
)


def demo_transactions() -> tuple[TransactionRecord, ...]:
    return DEMO_TRANSACTIONS
