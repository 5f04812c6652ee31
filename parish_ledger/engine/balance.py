"""
Balance Calculation

Balances are never stored. They are recomputed from the full transaction
set every time.
"""

import datetime as dt
from typing import Iterable, Optional, Sequence

from parish_ledger.config.defaults import UNASSIGNED_MEMBER_LABEL, UNNAMED_DONOR_LABEL
from parish_ledger.engine.ordering import canonical_order
from parish_ledger.models.ledger import Member, Transaction
from parish_ledger.models.views import BalanceSplit, LedgerEntry


def net_total(transactions: Iterable[Transaction]) -> int:
    """Sum of signed amounts."""
    return sum(tx.signed_amount for tx in transactions)


def split_balance(transactions: Iterable[Transaction], today: dt.date) -> BalanceSplit:
    """
    Balance before `today` and the change recorded on `today`.

    Transactions dated after `today` count toward neither figure.
    """
    previous = 0
    change = 0
    for tx in transactions:
        if tx.date < today:
            previous += tx.signed_amount
        elif tx.date == today:
            change += tx.signed_amount

    return BalanceSplit(
        previous_balance=previous,
        todays_change=change,
        todays_balance=previous + change,
    )


def running_balances(
    transactions: Iterable[Transaction],
    members: Iterable[Member] = (),
    priority: Optional[Sequence[str]] = None,
    unnamed_label: str = UNNAMED_DONOR_LABEL,
    unassigned_label: str = UNASSIGNED_MEMBER_LABEL,
) -> list[LedgerEntry]:
    """
    Attach a running balance to every transaction.

    The balance is accumulated in canonical order, then the list is reversed
    so the latest entry comes first. The first entry's balance is therefore
    the net total of the whole set.
    """
    ordered = canonical_order(
        transactions,
        members,
        priority=priority,
        unnamed_label=unnamed_label,
        unassigned_label=unassigned_label,
    )

    entries = []
    balance = 0
    for tx in ordered:
        balance += tx.signed_amount
        entries.append(LedgerEntry(transaction=tx, balance=balance))

    entries.reverse()
    return entries
