"""Validation package."""

from parish_ledger.validation.errors import (
    CategoryError,
    DuplicateCategoryError,
    ExportSelectionError,
    LedgerValidationError,
    MemberValidationError,
    SnapshotValidationError,
    TransactionValidationError,
    UnknownCategoryError,
)
from parish_ledger.validation.validator import (
    SnapshotValidator,
    build_member,
    build_transaction,
    issues_from_pydantic,
)

__all__ = [
    # Errors
    "CategoryError",
    "DuplicateCategoryError",
    "ExportSelectionError",
    "LedgerValidationError",
    "MemberValidationError",
    "SnapshotValidationError",
    "TransactionValidationError",
    "UnknownCategoryError",
    # Validators
    "SnapshotValidator",
    "build_member",
    "build_transaction",
    "issues_from_pydantic",
]
