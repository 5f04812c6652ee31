"""
Category Codec

Conversion between the composite wire string and CategoryLabel, plus the
operations that rewrite category labels across a transaction set when a
category is renamed.

Wire format:  "<main> (세부) (<sub>)"
Display form: "<main> (<sub>)"

Rename functions never mutate their input; they return a new list in which
only the affected transactions are replaced.
"""

from typing import Iterable, Optional

from parish_ledger.models.category import COMPOSITE_DELIMITER, CategoryLabel
from parish_ledger.models.ledger import Transaction, TransactionType


def decode(label: str) -> CategoryLabel:
    """
    Parse a stored category string. Never raises; a damaged composite is
    kept verbatim as a simple label.
    """
    return CategoryLabel.decode(label)


def encode(main: str, sub: Optional[str] = None) -> str:
    """Build the wire string. A None or empty sub yields `main` unchanged."""
    return CategoryLabel(main=main, sub=sub).encode()


def render(label: str) -> str:
    """Display form of a stored label."""
    return decode(label).render()


def main_category(label: str) -> str:
    """Main part of a stored label; sub-category detail is dropped."""
    return decode(label).root


def check_category_name(name: str) -> str:
    """
    Validate a user-supplied category or sub-category name.

    Returns the stripped name.
    """
    stripped = name.strip()
    if not stripped:
        raise ValueError("Category name cannot be empty")
    if COMPOSITE_DELIMITER in stripped:
        raise ValueError(f"Category name cannot contain {COMPOSITE_DELIMITER!r}")
    return stripped


def uses_main_category(transaction: Transaction, main: str) -> bool:
    """True if the transaction is filed under `main`, with or without a sub."""
    return transaction.category.root == main


def uses_label(transaction: Transaction, main: str, sub: Optional[str]) -> bool:
    """True if the transaction carries exactly (main, sub)."""
    return transaction.category == CategoryLabel(main=main, sub=sub)


def rename_main_category(
    transactions: Iterable[Transaction],
    old_main: str,
    new_main: str,
    transaction_type: Optional[TransactionType] = None,
) -> list[Transaction]:
    """
    Rewrite every transaction filed under `old_main` to `new_main`.

    Both the simple label and all composite labels with that main are
    rewritten; sub-categories are preserved. Restrict to one transaction
    type with `transaction_type`.
    """
    result = []
    for tx in transactions:
        if (
            (transaction_type is None or tx.type == transaction_type)
            and uses_main_category(tx, old_main)
        ):
            tx = tx.model_copy(update={"category": tx.category.with_main(new_main)})
        result.append(tx)
    return result


def rename_sub_category(
    transactions: Iterable[Transaction],
    main: str,
    old_sub: str,
    new_sub: str,
    transaction_type: Optional[TransactionType] = None,
) -> list[Transaction]:
    """Rewrite transactions whose label is exactly (main, old_sub)."""
    result = []
    for tx in transactions:
        if (
            (transaction_type is None or tx.type == transaction_type)
            and uses_label(tx, main, old_sub)
        ):
            tx = tx.model_copy(update={"category": tx.category.with_sub(new_sub)})
        result.append(tx)
    return result
