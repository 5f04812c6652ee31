"""
Period Aggregation

Week and year totals for the main screen, and per-category breakdowns.

Windows (all inclusive):
    week           - [Sunday on or before the reference date, reference date]
    running year   - [Jan 1 of the reference year, no upper bound]
    selected year  - [Jan 1, Dec 31] of a caller-chosen year

Breakdowns are keyed by main category. Sub-category detail is rolled up
into its main category before summing.
"""

import datetime as dt
from typing import Iterable, Optional

from parish_ledger.models.ledger import Transaction, TransactionType
from parish_ledger.models.views import PeriodSummary


def week_start(day: dt.date) -> dt.date:
    """The Sunday on or before `day`."""
    days_since_sunday = (day.weekday() + 1) % 7
    return day - dt.timedelta(days=days_since_sunday)


def in_window(day: dt.date, start: Optional[dt.date], end: Optional[dt.date]) -> bool:
    """Inclusive window test; None leaves that side open."""
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


def totals_by_main_category(
    transactions: Iterable[Transaction],
    transaction_type: TransactionType,
    start: Optional[dt.date] = None,
    end: Optional[dt.date] = None,
) -> dict[str, int]:
    """Sum amounts per main category for one type inside a window."""
    totals: dict[str, int] = {}
    for tx in transactions:
        if tx.type != transaction_type or not in_window(tx.date, start, end):
            continue
        main = tx.category.root
        totals[main] = totals.get(main, 0) + tx.amount
    return totals


def available_years(transactions: Iterable[Transaction], today: dt.date) -> list[int]:
    """Years that have data, plus the reference year, newest first."""
    years = {tx.date.year for tx in transactions}
    years.add(today.year)
    return sorted(years, reverse=True)


def summarize_periods(
    transactions: Iterable[Transaction],
    today: dt.date,
    selected_year: Optional[int] = None,
) -> PeriodSummary:
    """
    Compute the weekly and yearly totals shown on the main screen.

    `selected_year` drives only the yearly breakdowns and defaults to the
    reference year.
    """
    transactions = list(transactions)
    if selected_year is None:
        selected_year = today.year

    start_of_week = week_start(today)
    start_of_year = dt.date(today.year, 1, 1)
    selected_start = dt.date(selected_year, 1, 1)
    selected_end = dt.date(selected_year, 12, 31)

    weekly_income = weekly_expense = 0
    yearly_income = yearly_expense = 0
    for tx in transactions:
        if in_window(tx.date, start_of_year, None):
            if tx.is_income:
                yearly_income += tx.amount
            else:
                yearly_expense += tx.amount
        if in_window(tx.date, start_of_week, today):
            if tx.is_income:
                weekly_income += tx.amount
            else:
                weekly_expense += tx.amount

    return PeriodSummary(
        reference_date=today,
        week_start=start_of_week,
        selected_year=selected_year,
        weekly_income=weekly_income,
        weekly_expense=weekly_expense,
        weekly_balance=weekly_income - weekly_expense,
        yearly_income=yearly_income,
        yearly_expense=yearly_expense,
        yearly_balance=yearly_income - yearly_expense,
        weekly_income_breakdown=totals_by_main_category(
            transactions, TransactionType.INCOME, start_of_week, today,
        ),
        weekly_expense_breakdown=totals_by_main_category(
            transactions, TransactionType.EXPENSE, start_of_week, today,
        ),
        yearly_income_breakdown=totals_by_main_category(
            transactions, TransactionType.INCOME, selected_start, selected_end,
        ),
        yearly_expense_breakdown=totals_by_main_category(
            transactions, TransactionType.EXPENSE, selected_start, selected_end,
        ),
        available_years=available_years(transactions, today),
    )
