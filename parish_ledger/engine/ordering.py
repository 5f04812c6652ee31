"""
Transaction Ordering

Two orders exist and they are not interchangeable:

SIMPLE ORDER - newest first by date, ties broken by id descending. Used for
the flat transaction list.

CANONICAL ORDER - the ascending order in which running balances are
accumulated. Within a day:
    1. income before expense
    2. income: by position in the income priority table (a label matches
       the first entry that is a substring of it; no match sorts last),
       then by member display name, Korean order descending
    3. expense: by category label, Korean order descending, then by memo,
       Korean order descending (no memo compares as "")
    4. finally by id ascending
"""

from functools import cmp_to_key
from typing import Iterable, Optional, Sequence

from parish_ledger.config.defaults import (
    DEFAULT_INCOME_PRIORITY,
    UNASSIGNED_MEMBER_LABEL,
    UNNAMED_DONOR_LABEL,
)
from parish_ledger.engine.collation import compare_korean
from parish_ledger.models.ledger import Member, Transaction


def simple_order(transactions: Iterable[Transaction]) -> list[Transaction]:
    """Newest first: date descending, then id descending."""
    return sorted(transactions, key=lambda tx: (tx.date, tx.id), reverse=True)


def income_priority_index(label: str, priority: Sequence[str]) -> int:
    """Index of the first priority entry contained in `label`, else len(priority)."""
    for index, entry in enumerate(priority):
        if entry in label:
            return index
    return len(priority)


def member_display_name(
    member_id: Optional[int],
    names: dict[int, str],
    unnamed_label: str = UNNAMED_DONOR_LABEL,
    unassigned_label: str = UNASSIGNED_MEMBER_LABEL,
) -> str:
    """
    Name to show for a transaction's member.

    No member at all is an anonymous gift; a member id that no longer
    resolves belongs to a deleted member.
    """
    if member_id is None:
        return unnamed_label
    return names.get(member_id, unassigned_label)


def canonical_order(
    transactions: Iterable[Transaction],
    members: Iterable[Member] = (),
    priority: Optional[Sequence[str]] = None,
    unnamed_label: str = UNNAMED_DONOR_LABEL,
    unassigned_label: str = UNASSIGNED_MEMBER_LABEL,
) -> list[Transaction]:
    """Sort transactions into canonical (ascending) order."""
    if priority is None:
        priority = DEFAULT_INCOME_PRIORITY
    names = {m.id: m.name for m in members}

    def name_of(tx: Transaction) -> str:
        return member_display_name(tx.member_id, names, unnamed_label, unassigned_label)

    def compare(a: Transaction, b: Transaction) -> int:
        if a.date != b.date:
            return -1 if a.date < b.date else 1

        if a.type != b.type:
            return -1 if a.is_income else 1

        if a.is_income:
            index_a = income_priority_index(a.label, priority)
            index_b = income_priority_index(b.label, priority)
            if index_a != index_b:
                return index_a - index_b
            by_name = compare_korean(name_of(b), name_of(a))
            if by_name:
                return by_name
        else:
            by_category = compare_korean(b.label, a.label)
            if by_category:
                return by_category
            by_memo = compare_korean(b.memo or "", a.memo or "")
            if by_memo:
                return by_memo

        return a.id - b.id

    return sorted(transactions, key=cmp_to_key(compare))
