"""Configuration package."""

from parish_ledger.config.defaults import (
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_EXPENSE_SUB_CATEGORIES,
    DEFAULT_FESTIVAL_CATEGORIES,
    DEFAULT_INCOME_CATEGORIES,
    DEFAULT_INCOME_PRIORITY,
    DEFAULT_OTHER_INCOME_CATEGORIES,
    FESTIVAL_PARENT,
    OTHER_INCOME_PARENT,
    POSITIONS,
    UNASSIGNED_MEMBER_LABEL,
    UNNAMED_DONOR_LABEL,
)
from parish_ledger.config.settings import LedgerSettings, get_settings

__all__ = [
    "DEFAULT_EXPENSE_CATEGORIES",
    "DEFAULT_EXPENSE_SUB_CATEGORIES",
    "DEFAULT_FESTIVAL_CATEGORIES",
    "DEFAULT_INCOME_CATEGORIES",
    "DEFAULT_INCOME_PRIORITY",
    "DEFAULT_OTHER_INCOME_CATEGORIES",
    "FESTIVAL_PARENT",
    "OTHER_INCOME_PARENT",
    "POSITIONS",
    "UNASSIGNED_MEMBER_LABEL",
    "UNNAMED_DONOR_LABEL",
    "LedgerSettings",
    "get_settings",
]
