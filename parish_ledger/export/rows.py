"""
Spreadsheet Export Rows

Prepares the rows of the donation spreadsheet. Writing the actual file is
left to the caller; this module only selects, orders and formats rows.

Rows are in plain chronological order (date, then id) with a running
balance starting from zero at the first exported row, not the canonical
ledger order.
"""

import datetime as dt
from enum import Enum
from typing import Any, Iterable, Optional

from parish_ledger.config.defaults import UNNAMED_DONOR_LABEL
from parish_ledger.engine.aggregation import week_start
from parish_ledger.models.ledger import Member, Transaction
from parish_ledger.validation.errors import ExportSelectionError


WEEKDAY_LABELS = ("월", "화", "수", "목", "금", "토", "일")

# Column headers, in sheet order
EXPORT_COLUMNS = ("날짜", "요일", "성도명", "직분", "항목", "입금액", "출금액", "비고", "잔액")

SHEET_NAME = "헌금내역"


class ExportMode(str, Enum):
    """Which period to export."""
    TOTAL = "total"
    YEARLY = "yearly"
    MONTHLY = "monthly"
    WEEKLY = "weekly"


def day_of_week_label(day: dt.date) -> str:
    """Korean weekday in parentheses, e.g. "(일)"."""
    return f"({WEEKDAY_LABELS[day.weekday()]})"


def available_weeks(transactions: Iterable[Transaction]) -> list[dt.date]:
    """Sunday week-starts that have at least one transaction, newest first."""
    return sorted({week_start(tx.date) for tx in transactions}, reverse=True)


def select_transactions(
    transactions: Iterable[Transaction],
    mode: ExportMode,
    year: Optional[int] = None,
    months: Iterable[int] = (),
    weeks: Iterable[dt.date] = (),
) -> list[Transaction]:
    """
    Filter transactions for an export period, oldest first.

    Raises:
        ExportSelectionError: If a monthly/weekly export selects nothing,
            or the selection matches no transactions
    """
    mode = ExportMode(mode)
    months = set(months)
    weeks = set(weeks)
    ordered = sorted(transactions, key=lambda tx: (tx.date, tx.id))

    if mode in (ExportMode.YEARLY, ExportMode.MONTHLY) and year is None:
        raise ExportSelectionError(f"{mode.value} export requires a year")

    if mode == ExportMode.YEARLY:
        selected = [tx for tx in ordered if tx.date.year == year]
    elif mode == ExportMode.MONTHLY:
        if not months:
            raise ExportSelectionError("Select at least one month")
        if not months <= set(range(1, 13)):
            raise ExportSelectionError(f"Invalid month(s): {sorted(months - set(range(1, 13)))}")
        selected = [
            tx for tx in ordered
            if tx.date.year == year and tx.date.month in months
        ]
    elif mode == ExportMode.WEEKLY:
        if not weeks:
            raise ExportSelectionError("Select at least one week")
        selected = [tx for tx in ordered if week_start(tx.date) in weeks]
    else:
        selected = ordered

    if not selected:
        raise ExportSelectionError("No transactions in the selected period")
    return selected


def export_rows(
    transactions: Iterable[Transaction],
    members: Iterable[Member],
    mode: ExportMode = ExportMode.TOTAL,
    year: Optional[int] = None,
    months: Iterable[int] = (),
    weeks: Iterable[dt.date] = (),
) -> list[dict[str, Any]]:
    """
    Rows for the donation spreadsheet, keyed by EXPORT_COLUMNS.

    Income without a resolvable member is shown as 무명; expenses without one
    as "-".
    """
    selected = select_transactions(transactions, mode, year, months, weeks)
    by_id = {m.id: m for m in members}

    rows = []
    balance = 0
    for tx in selected:
        member = by_id.get(tx.member_id) if tx.member_id is not None else None
        income = tx.amount if tx.is_income else 0
        expense = 0 if tx.is_income else tx.amount
        balance += income - expense

        rows.append({
            "날짜": tx.date.isoformat(),
            "요일": day_of_week_label(tx.date),
            "성도명": member.name if member else (UNNAMED_DONOR_LABEL if tx.is_income else "-"),
            "직분": member.position if member else "-",
            "항목": tx.category.render(),
            "입금액": income,
            "출금액": expense,
            "비고": tx.memo or "",
            "잔액": balance,
        })
    return rows


def export_file_name(church_name: str, mode: ExportMode, today: dt.date) -> str:
    """Suggested spreadsheet file name."""
    return f"{church_name}_{ExportMode(mode).value}_{today.isoformat()}.xlsx"
