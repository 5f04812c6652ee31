"""
Query Models

A LedgerQuery is a structured search request. It is executed
deterministically over a snapshot by QueryExecutor.
"""

import datetime as dt
from typing import Literal, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, model_validator

from parish_ledger.models.ledger import Transaction, TransactionType


# Category query value selecting every category of the chosen type
ALL_CATEGORIES = "ALL"


class LedgerQuery(BaseModel):
    """
    A structured search over transactions.

    search_type:
        member   - income given by one member
        category - rows under one main category, or ALL of a type
        amount   - rows with an exact amount
    """

    query_id: UUID = Field(default_factory=uuid4)

    search_type: Literal["member", "category", "amount"]

    # Inclusive date range; None means unbounded on that side
    start_date: Optional[dt.date] = None
    end_date: Optional[dt.date] = None

    member_id: Optional[int] = None
    category_type: TransactionType = TransactionType.INCOME
    category: Optional[str] = None
    amount: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def validate_parameters(self) -> "LedgerQuery":
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date cannot be before start_date")

        if self.search_type == "member" and self.member_id is None:
            raise ValueError("member search requires member_id")
        if self.search_type == "category" and not self.category:
            raise ValueError("category search requires category")
        if self.search_type == "amount" and not self.amount:
            raise ValueError("amount search requires a non-zero amount")

        return self


class CategoryTotal(BaseModel):
    """One line of an ALL-categories breakdown."""

    category: str
    total: int


class SearchResult(BaseModel):
    """Result of executing a LedgerQuery."""

    query_id: UUID
    data_found: bool
    result_count: int = Field(ge=0)
    transactions: list[Transaction] = Field(default_factory=list)
    total: int = 0
    breakdown: list[CategoryTotal] = Field(default_factory=list)
    query_description: str = Field(
        ...,
        description="Human-readable description of what was queried",
    )


class DailyTotals(BaseModel):
    """Income and expense recorded on a single day."""

    day: dt.date
    total_income: int = 0
    total_expense: int = 0
