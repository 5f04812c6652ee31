"""
Query Execution Engine

DESIGN DECISION: Search is DETERMINISTIC and runs over a snapshot the caller
passes in. The executor never reads storage itself and never modifies
the snapshot.

Three search types mirror the lookup screen:
- member:   income given by one member in a date range
- category: rows filed under one main category, or every category of a type
- amount:   rows with an exact amount
"""

import datetime as dt
from typing import Optional

from parish_ledger.engine.aggregation import in_window
from parish_ledger.engine.category_codec import uses_main_category
from parish_ledger.engine.ordering import simple_order
from parish_ledger.models.ledger import LedgerSnapshot, Transaction, TransactionType
from parish_ledger.models.query import (
    ALL_CATEGORIES,
    CategoryTotal,
    DailyTotals,
    LedgerQuery,
    SearchResult,
)


class QueryExecutionError(Exception):
    """Error during query execution."""
    pass


def default_date_range(today: dt.date) -> tuple[dt.date, dt.date]:
    """One year back from `today` through `today`. Feb 29 rolls to Mar 1."""
    try:
        start = today.replace(year=today.year - 1)
    except ValueError:
        start = dt.date(today.year - 1, 3, 1)
    return start, today


class QueryExecutor:
    """
    Executes structured queries against a ledger snapshot.

    GUARANTEES:
    - Only returns transactions present in the snapshot
    - Results are newest first (date, then id)
    - Clear "no data found" if nothing matches
    """

    def __init__(self, snapshot: LedgerSnapshot):
        self._snapshot = snapshot

    def execute(self, query: LedgerQuery) -> SearchResult:
        """Execute a structured query and return results."""
        candidates = [
            tx for tx in self._snapshot.transactions
            if in_window(tx.date, query.start_date, query.end_date)
        ]

        if query.search_type == "member":
            return self._execute_member(query, candidates)
        elif query.search_type == "category":
            return self._execute_category(query, candidates)
        elif query.search_type == "amount":
            return self._execute_amount(query, candidates)

        raise QueryExecutionError(f"Unsupported search type: {query.search_type}")

    def todays_totals(self, today: dt.date) -> DailyTotals:
        """Income and expense recorded on `today`."""
        todays = [tx for tx in self._snapshot.transactions if tx.date == today]
        return DailyTotals(
            day=today,
            total_income=sum(tx.amount for tx in todays if tx.is_income),
            total_expense=sum(tx.amount for tx in todays if not tx.is_income),
        )

    def _execute_member(
        self,
        query: LedgerQuery,
        candidates: list[Transaction],
    ) -> SearchResult:
        """Income rows for one member."""
        matches = [
            tx for tx in candidates
            if tx.member_id == query.member_id and tx.is_income
        ]

        desc_parts = [f"Income from member {query.member_id}"]
        name = self._snapshot.member_names().get(query.member_id)
        if name:
            desc_parts[0] = f"Income from {name}"
        desc_parts.append(self._date_range_str(query.start_date, query.end_date))

        return self._result(query, matches, " | ".join(p for p in desc_parts if p))

    def _execute_category(
        self,
        query: LedgerQuery,
        candidates: list[Transaction],
    ) -> SearchResult:
        """Rows under one main category, or ALL with a per-category breakdown."""
        of_type = [tx for tx in candidates if tx.type == query.category_type]

        breakdown = []
        if query.category == ALL_CATEGORIES:
            matches = of_type
            breakdown = self._breakdown(query.category_type, matches)
            desc = f"All {query.category_type.value} categories"
        else:
            matches = [tx for tx in of_type if uses_main_category(tx, query.category)]
            desc = f"{query.category_type.value} category: {query.category}"

        range_str = self._date_range_str(query.start_date, query.end_date)
        if range_str:
            desc = f"{desc} | {range_str}"

        return self._result(query, matches, desc, breakdown)

    def _execute_amount(
        self,
        query: LedgerQuery,
        candidates: list[Transaction],
    ) -> SearchResult:
        """Rows with exactly the queried amount."""
        matches = [tx for tx in candidates if tx.amount == query.amount]

        desc = f"Amount: {query.amount:,}"
        range_str = self._date_range_str(query.start_date, query.end_date)
        if range_str:
            desc = f"{desc} | {range_str}"

        return self._result(query, matches, desc)

    def _breakdown(
        self,
        category_type: TransactionType,
        matches: list[Transaction],
    ) -> list[CategoryTotal]:
        """
        Totals per configured category.

        Income keeps every configured category, even at zero; expense drops
        categories with no spending.
        """
        if category_type == TransactionType.INCOME:
            categories = self._snapshot.income_categories
        else:
            categories = self._snapshot.expense_categories

        lines = []
        for category in categories:
            total = sum(tx.amount for tx in matches if uses_main_category(tx, category))
            if total > 0 or category_type == TransactionType.INCOME:
                lines.append(CategoryTotal(category=category, total=total))
        return lines

    def _result(
        self,
        query: LedgerQuery,
        matches: list[Transaction],
        description: str,
        breakdown: Optional[list[CategoryTotal]] = None,
    ) -> SearchResult:
        ordered = simple_order(matches)
        return SearchResult(
            query_id=query.query_id,
            data_found=len(ordered) > 0,
            result_count=len(ordered),
            transactions=ordered,
            total=sum(tx.amount for tx in ordered),
            breakdown=breakdown or [],
            query_description=description,
        )

    def _date_range_str(
        self,
        date_from: Optional[dt.date],
        date_to: Optional[dt.date],
    ) -> str:
        """Format date range for description."""
        if date_from and date_to:
            if date_from == date_to:
                return f"on {date_from.isoformat()}"
            return f"from {date_from.isoformat()} to {date_to.isoformat()}"
        elif date_from:
            return f"from {date_from.isoformat()}"
        elif date_to:
            return f"until {date_to.isoformat()}"
        return ""
