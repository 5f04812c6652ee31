"""
Core Data Models for Parish Ledger

These models define the schemas for everything the ledger stores:
members, transactions and the category configuration, bundled together
as a LedgerSnapshot (the import/export boundary format).

DESIGN DECISION: Field names are snake_case in Python and camelCase on the
wire (memberId, expenseCategories, ...). Both spellings are accepted on
input; serialise with `to_wire()`.

Dates are strict ISO "YYYY-MM-DD" strings on the wire. Anything else is
rejected at ingestion instead of being partially aggregated later.
"""

import datetime as dt
import re
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from parish_ledger.config.defaults import (
    DEFAULT_EXPENSE_CATEGORIES,
    DEFAULT_EXPENSE_SUB_CATEGORIES,
    DEFAULT_FESTIVAL_CATEGORIES,
    DEFAULT_INCOME_CATEGORIES,
    DEFAULT_OTHER_INCOME_CATEGORIES,
)
from parish_ledger.models.category import CategoryLabel


_ISO_DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of a transaction."""
    INCOME = "income"
    EXPENSE = "expense"


# =============================================================================
# ENTITIES
# =============================================================================

class LedgerModel(BaseModel):
    """Shared configuration: camelCase aliases on the wire."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict[str, Any]:
        """Serialise to the JSON-compatible snapshot format."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


class Member(LedgerModel):
    """
    A parish member.

    Members can be deleted while transactions still reference them; such
    references resolve to a placeholder name rather than an error.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: Annotated[int, Field(strict=True, description="Creation-time derived id")]
    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Display name",
    )
    position: str = Field(
        ...,
        description="Role within the parish (see POSITIONS)",
    )


class Transaction(LedgerModel):
    """
    A single income or expense entry.

    Invariants: amount > 0, date always present.
    """

    id: Annotated[int, Field(strict=True, description="Unique transaction id")]
    type: TransactionType
    date: dt.date = Field(
        ...,
        description="Calendar date, no time component",
    )
    category: CategoryLabel = Field(
        ...,
        description="Category; composite string on the wire",
    )
    amount: Annotated[
        int,
        Field(strict=True, gt=0, description="Whole currency units"),
    ]
    member_id: Optional[Annotated[int, Field(strict=True)]] = None
    memo: Optional[str] = Field(
        default=None,
        max_length=500,
    )

    @field_validator("date", mode="before")
    @classmethod
    def parse_iso_date(cls, v: Any) -> Any:
        """Accept only date objects or exact YYYY-MM-DD strings."""
        if isinstance(v, dt.datetime):
            raise ValueError("date must not carry a time component")
        if isinstance(v, dt.date):
            return v
        if isinstance(v, str) and _ISO_DATE_PATTERN.fullmatch(v):
            return dt.date.fromisoformat(v)
        raise ValueError(f"date must be an ISO YYYY-MM-DD string, got {v!r}")

    @field_validator("category", mode="before")
    @classmethod
    def decode_category(cls, v: Any) -> Any:
        if isinstance(v, str):
            if not v.strip():
                raise ValueError("category cannot be empty")
            return CategoryLabel.decode(v)
        return v

    @field_validator("memo", mode="before")
    @classmethod
    def normalise_memo(cls, v: Any) -> Any:
        if isinstance(v, str):
            v = v.strip()
            return v or None
        return v

    @field_serializer("category")
    def encode_category(self, category: CategoryLabel) -> str:
        return category.encode()

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def signed_amount(self) -> int:
        """+amount for income, -amount for expense."""
        return self.amount if self.is_income else -self.amount

    @property
    def label(self) -> str:
        """Category in wire form."""
        return self.category.encode()


# =============================================================================
# SNAPSHOT
# =============================================================================

class LedgerSnapshot(LedgerModel):
    """
    Full state of a ledger at a point in time.

    `members` and `transactions` are required lists. Category arrays that
    are missing (or null) fall back to the defaults.
    """

    members: list[Member]
    transactions: list[Transaction]
    expense_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXPENSE_CATEGORIES),
    )
    income_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_INCOME_CATEGORIES),
    )
    festival_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_FESTIVAL_CATEGORIES),
    )
    other_income_categories: list[str] = Field(
        default_factory=lambda: list(DEFAULT_OTHER_INCOME_CATEGORIES),
    )
    expense_sub_categories: dict[str, list[str]] = Field(
        default_factory=lambda: {k: list(v) for k, v in DEFAULT_EXPENSE_SUB_CATEGORIES.items()},
    )

    @field_validator(
        "expense_categories",
        "income_categories",
        "festival_categories",
        "other_income_categories",
        "expense_sub_categories",
        mode="before",
    )
    @classmethod
    def null_means_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            field = cls.model_fields[info.field_name]
            return field.default_factory()
        return v

    @classmethod
    def empty(cls) -> "LedgerSnapshot":
        """A fresh ledger: no members, no transactions, default categories."""
        return cls(members=[], transactions=[])

    def member_names(self) -> dict[int, str]:
        return {m.id: m.name for m in self.members}


class SnapshotRecord(LedgerModel):
    """A saved copy of the ledger in the snapshot history."""

    timestamp: dt.datetime = Field(
        ...,
        description="When the snapshot was taken; also its identity",
    )
    data: LedgerSnapshot
