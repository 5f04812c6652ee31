"""
Derived View Models

Everything here is computed from a LedgerSnapshot plus a reference date.
None of it is ever stored.
"""

import datetime as dt

from pydantic import BaseModel, Field

from parish_ledger.models.ledger import Member, Transaction


class BalanceSplit(BaseModel):
    """Balance before today, today's net change, and the sum of both."""

    previous_balance: int = 0
    todays_change: int = 0
    todays_balance: int = 0


class LedgerEntry(BaseModel):
    """A transaction with the running balance after it in canonical order."""

    transaction: Transaction
    balance: int


class PeriodSummary(BaseModel):
    """
    Week and year totals.

    The yearly totals run from Jan 1 of the reference year with no upper
    bound. The yearly breakdowns cover the selected calendar year only.
    Breakdowns are keyed by main category.
    """

    reference_date: dt.date
    week_start: dt.date
    selected_year: int

    weekly_income: int = 0
    weekly_expense: int = 0
    weekly_balance: int = 0

    yearly_income: int = 0
    yearly_expense: int = 0
    yearly_balance: int = 0

    weekly_income_breakdown: dict[str, int] = Field(default_factory=dict)
    weekly_expense_breakdown: dict[str, int] = Field(default_factory=dict)
    yearly_income_breakdown: dict[str, int] = Field(default_factory=dict)
    yearly_expense_breakdown: dict[str, int] = Field(default_factory=dict)

    available_years: list[int] = Field(
        default_factory=list,
        description="Years with data plus the reference year, newest first",
    )


class LedgerView(BaseModel):
    """Everything the main screen shows, recomputed on every call."""

    transactions: list[Transaction] = Field(
        default_factory=list,
        description="Newest first by date, then id",
    )
    entries: list[LedgerEntry] = Field(
        default_factory=list,
        description="Canonical order with running balance, newest first",
    )
    balance: BalanceSplit
    summary: PeriodSummary
    members: list[Member] = Field(
        default_factory=list,
        description="Sorted by name",
    )
