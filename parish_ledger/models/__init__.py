"""
Data Models Package

This package contains all Pydantic models used in Parish Ledger.
All data flowing through the system must conform to these schemas.
"""

from parish_ledger.models.category import (
    COMPOSITE_DELIMITER,
    SUB_CATEGORY_MARKER,
    CategoryLabel,
)
from parish_ledger.models.ledger import (
    LedgerSnapshot,
    Member,
    SnapshotRecord,
    Transaction,
    TransactionType,
)
from parish_ledger.models.query import (
    ALL_CATEGORIES,
    CategoryTotal,
    DailyTotals,
    LedgerQuery,
    SearchResult,
)
from parish_ledger.models.validation import (
    ValidationIssue,
    ValidationResult,
)
from parish_ledger.models.views import (
    BalanceSplit,
    LedgerEntry,
    LedgerView,
    PeriodSummary,
)

__all__ = [
    # Category
    "COMPOSITE_DELIMITER",
    "SUB_CATEGORY_MARKER",
    "CategoryLabel",
    # Ledger models
    "LedgerSnapshot",
    "Member",
    "SnapshotRecord",
    "Transaction",
    "TransactionType",
    # Query models
    "ALL_CATEGORIES",
    "CategoryTotal",
    "DailyTotals",
    "LedgerQuery",
    "SearchResult",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
    # Views
    "BalanceSplit",
    "LedgerEntry",
    "LedgerView",
    "PeriodSummary",
]
