"""
Validation Errors

Every rejected input raises a LedgerValidationError subclass carrying the
issues that caused it. No state is changed when one is raised.
"""

from typing import Optional

from parish_ledger.models.validation import ValidationIssue


class LedgerValidationError(Exception):
    """Base exception for rejected input."""

    def __init__(self, message: str, issues: Optional[list[ValidationIssue]] = None):
        super().__init__(message)
        self.issues = issues or []


class SnapshotValidationError(LedgerValidationError):
    """A snapshot payload could not be loaded."""
    pass


class TransactionValidationError(LedgerValidationError):
    """Transaction form input is invalid (amount, date, category...)."""
    pass


class MemberValidationError(LedgerValidationError):
    """Member input is invalid (blank name, unknown position)."""
    pass


class CategoryError(LedgerValidationError):
    """A category operation was rejected."""
    pass


class DuplicateCategoryError(CategoryError):
    """The target category name already exists."""
    pass


class UnknownCategoryError(CategoryError):
    """The category to change does not exist."""
    pass


class ExportSelectionError(LedgerValidationError):
    """The export period selection is empty or matches nothing."""
    pass
