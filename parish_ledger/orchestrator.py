"""
Main Orchestrator for Parish Ledger

This module ties together storage, validation and the computation engine
and defines every operation the application performs on a ledger:

1. Members       (add, rename, delete)
2. Transactions  (add, replace, delete)
3. Categories    (add, rename with propagation, delete)
4. Snapshots     (export, import, history, reset)
5. Views         (main screen, search, spreadsheet rows)

DESIGN DECISION: Each mutation loads the full state, builds a complete new
LedgerSnapshot and saves it in one call. Validation happens before the new
state is built, so a rejected operation leaves the store untouched.

Views are recomputed from the stored snapshot on every call; there is no
cached aggregate to invalidate. For very large histories, memoising
`ledger_view` by a hash of (snapshot, today, selected_year) is the
intended optimisation.
"""

import datetime as dt
import json
from typing import Any, Callable, Iterable, Optional, Union

from parish_ledger.config import FESTIVAL_PARENT, OTHER_INCOME_PARENT, LedgerSettings, get_settings
from parish_ledger.engine.aggregation import summarize_periods
from parish_ledger.engine.balance import running_balances, split_balance
from parish_ledger.engine.category_codec import (
    check_category_name,
    rename_main_category,
    rename_sub_category,
    uses_label,
    uses_main_category,
)
from parish_ledger.engine.collation import korean_sort_key
from parish_ledger.engine.hangul import group_by_initial
from parish_ledger.engine.ordering import simple_order
from parish_ledger.export import ExportMode, export_rows
from parish_ledger.log import get_logger
from parish_ledger.models.category import CategoryLabel
from parish_ledger.models.ledger import (
    LedgerSnapshot,
    Member,
    SnapshotRecord,
    Transaction,
    TransactionType,
)
from parish_ledger.models.query import DailyTotals, LedgerQuery, SearchResult
from parish_ledger.models.validation import ValidationIssue
from parish_ledger.models.views import LedgerView
from parish_ledger.queries import QueryExecutor
from parish_ledger.services.storage import (
    LedgerStore,
    NotFoundError,
    SnapshotStore,
    StorageError,
)
from parish_ledger.validation import (
    CategoryError,
    DuplicateCategoryError,
    SnapshotValidator,
    UnknownCategoryError,
    build_member,
    build_transaction,
)


# Income categories that parent a sub-category pool cannot be renamed or
# deleted; the pools are keyed by these exact names.
PROTECTED_INCOME_CATEGORIES = (FESTIVAL_PARENT, OTHER_INCOME_PARENT)


def _sorted_members(members: Iterable[Member]) -> list[Member]:
    return sorted(members, key=lambda m: korean_sort_key(m.name))


def _sorted_names(names: Iterable[str]) -> list[str]:
    return sorted(names, key=korean_sort_key)


class LedgerService:
    """
    Caller-side API over an injected ledger store.

    The service owns no state of its own apart from its collaborators.
    `clock` supplies the current time for new ids, snapshot timestamps and
    the default reference date.
    """

    def __init__(
        self,
        store: LedgerStore,
        snapshot_store: Optional[SnapshotStore] = None,
        settings: Optional[LedgerSettings] = None,
        validator: Optional[SnapshotValidator] = None,
        clock: Optional[Callable[[], dt.datetime]] = None,
    ):
        self._store = store
        self._snapshot_store = snapshot_store
        self._settings = settings or get_settings()
        self._validator = validator or SnapshotValidator()
        self._clock = clock or dt.datetime.now
        self._logger = get_logger(__name__)

    @property
    def state(self) -> LedgerSnapshot:
        """Current snapshot (a copy; mutate through the service)."""
        return self._store.load()

    def today(self) -> dt.date:
        return self._clock().date()

    def _commit(self, snapshot: LedgerSnapshot, event: str, **details: Any) -> None:
        self._store.save(snapshot)
        self._logger.info(event, **details)

    def _next_id(self, used: Iterable[int]) -> int:
        """Millisecond timestamp, moved past the largest id on collision."""
        used = set(used)
        candidate = int(self._clock().timestamp() * 1000)
        if candidate in used:
            candidate = max(used) + 1
        return candidate

    # =========================================================================
    # MEMBERS
    # =========================================================================

    def add_member(self, name: str, position: str) -> Member:
        """
        Register a new member.

        Raises:
            MemberValidationError: On a blank name or unknown position
        """
        state = self.state
        member = build_member(
            self._next_id(m.id for m in state.members),
            name,
            position,
        )
        members = _sorted_members(state.members + [member])
        self._commit(
            state.model_copy(update={"members": members}),
            "member_added",
            member_id=member.id,
        )
        return member

    def update_member(self, member_id: int, name: str, position: str) -> Member:
        """
        Change a member's name and position in place.

        Raises:
            NotFoundError: If the member does not exist
            MemberValidationError: On a blank name or unknown position
        """
        state = self.state
        if not any(m.id == member_id for m in state.members):
            raise NotFoundError(f"Member {member_id} not found")

        updated = build_member(member_id, name, position)
        members = _sorted_members(
            updated if m.id == member_id else m for m in state.members
        )
        self._commit(
            state.model_copy(update={"members": members}),
            "member_updated",
            member_id=member_id,
        )
        return updated

    def delete_member(self, member_id: int) -> int:
        """
        Remove a member. Their transactions are kept and display as unassigned.

        Returns:
            Number of transactions still referencing the removed member

        Raises:
            NotFoundError: If the member does not exist
        """
        state = self.state
        members = [m for m in state.members if m.id != member_id]
        if len(members) == len(state.members):
            raise NotFoundError(f"Member {member_id} not found")

        orphaned = sum(1 for tx in state.transactions if tx.member_id == member_id)
        self._commit(
            state.model_copy(update={"members": members}),
            "member_deleted",
            member_id=member_id,
            orphaned_transactions=orphaned,
        )
        return orphaned

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def add_transaction(
        self,
        transaction_type: Union[TransactionType, str],
        date: Union[dt.date, str],
        category: Union[CategoryLabel, str],
        amount: Any,
        member_id: Optional[int] = None,
        memo: Optional[str] = None,
    ) -> Transaction:
        """
        Record a new transaction.

        Raises:
            TransactionValidationError: On invalid amount, date or category
        """
        state = self.state
        tx = build_transaction(
            id=self._next_id(t.id for t in state.transactions),
            type=transaction_type,
            date=date,
            category=category,
            amount=amount,
            member_id=member_id,
            memo=memo,
        )
        self._commit(
            state.model_copy(update={"transactions": state.transactions + [tx]}),
            "transaction_added",
            transaction_id=tx.id,
            type=tx.type.value,
            amount=tx.amount,
        )
        return tx

    def update_transaction(self, transaction: Union[Transaction, dict[str, Any]]) -> Transaction:
        """
        Replace a transaction wholesale, matched by id.

        Raises:
            NotFoundError: If no transaction has that id
            TransactionValidationError: If the replacement is invalid
        """
        if isinstance(transaction, Transaction):
            data = transaction.model_dump()
        else:
            data = dict(transaction)
        tx = build_transaction(**data)

        state = self.state
        if not any(t.id == tx.id for t in state.transactions):
            raise NotFoundError(f"Transaction {tx.id} not found")

        transactions = [tx if t.id == tx.id else t for t in state.transactions]
        self._commit(
            state.model_copy(update={"transactions": transactions}),
            "transaction_updated",
            transaction_id=tx.id,
        )
        return tx

    def delete_transaction(self, transaction_id: int) -> None:
        """
        Remove a transaction by id.

        Raises:
            NotFoundError: If no transaction has that id
        """
        state = self.state
        transactions = [t for t in state.transactions if t.id != transaction_id]
        if len(transactions) == len(state.transactions):
            raise NotFoundError(f"Transaction {transaction_id} not found")

        self._commit(
            state.model_copy(update={"transactions": transactions}),
            "transaction_deleted",
            transaction_id=transaction_id,
        )

    # =========================================================================
    # CATEGORIES
    # =========================================================================

    @staticmethod
    def _clean_name(name: str, field: str) -> str:
        try:
            return check_category_name(name)
        except ValueError as e:
            raise CategoryError(
                str(e),
                issues=[ValidationIssue(
                    field=field,
                    issue_type="invalid_name",
                    message=str(e),
                    severity="error",
                )],
            ) from e

    @staticmethod
    def _ensure_absent(names: list[str], name: str, field: str) -> None:
        if name in names:
            raise DuplicateCategoryError(
                f"'{name}' already exists",
                issues=[ValidationIssue(
                    field=field,
                    issue_type="duplicate_name",
                    message=f"'{name}' already exists",
                    severity="error",
                    suggested_fix="Choose a different name",
                )],
            )

    @staticmethod
    def _ensure_present(names: list[str], name: str, field: str) -> None:
        if name not in names:
            raise UnknownCategoryError(
                f"'{name}' does not exist",
                issues=[ValidationIssue(
                    field=field,
                    issue_type="unknown_category",
                    message=f"'{name}' does not exist",
                    severity="error",
                )],
            )

    @staticmethod
    def _ensure_unprotected(name: str) -> None:
        if name in PROTECTED_INCOME_CATEGORIES:
            raise CategoryError(f"'{name}' parents a sub-category list and cannot be changed")

    def category_usage(
        self,
        transaction_type: Union[TransactionType, str],
        main: str,
        sub: Optional[str] = None,
    ) -> int:
        """
        Count transactions filed under a category.

        With `sub` None every label under `main` counts; otherwise only the
        exact (main, sub) pair.
        """
        transaction_type = TransactionType(transaction_type)
        state = self.state
        if sub is None:
            matches = (uses_main_category(tx, main) for tx in state.transactions
                       if tx.type == transaction_type)
        else:
            matches = (uses_label(tx, main, sub) for tx in state.transactions
                       if tx.type == transaction_type)
        return sum(1 for matched in matches if matched)

    # --- expense main categories (kept in Korean order) ---------------------

    def add_expense_category(self, name: str) -> None:
        name = self._clean_name(name, "expense_categories")
        state = self.state
        self._ensure_absent(state.expense_categories, name, "expense_categories")
        self._commit(
            state.model_copy(update={
                "expense_categories": _sorted_names(state.expense_categories + [name]),
            }),
            "category_added",
            kind="expense",
            name=name,
        )

    def rename_expense_category(self, old_name: str, new_name: str) -> None:
        """
        Rename an expense category, its sub-category list and every expense
        filed under it (sub-categories preserved).
        """
        new_name = self._clean_name(new_name, "expense_categories")
        state = self.state
        self._ensure_present(state.expense_categories, old_name, "expense_categories")
        self._ensure_absent(state.expense_categories, new_name, "expense_categories")

        sub_categories = dict(state.expense_sub_categories)
        if old_name in sub_categories:
            sub_categories[new_name] = sub_categories.pop(old_name)

        self._commit(
            state.model_copy(update={
                "expense_categories": _sorted_names(
                    new_name if c == old_name else c for c in state.expense_categories
                ),
                "expense_sub_categories": sub_categories,
                "transactions": rename_main_category(
                    state.transactions, old_name, new_name, TransactionType.EXPENSE,
                ),
            }),
            "category_renamed",
            kind="expense",
            old_name=old_name,
            new_name=new_name,
        )

    def delete_expense_category(self, name: str) -> int:
        """
        Remove an expense category and its sub-category list.

        Transactions are kept. Returns how many still use the category.
        """
        state = self.state
        self._ensure_present(state.expense_categories, name, "expense_categories")
        in_use = self.category_usage(TransactionType.EXPENSE, name)

        sub_categories = {k: v for k, v in state.expense_sub_categories.items() if k != name}
        self._commit(
            state.model_copy(update={
                "expense_categories": [c for c in state.expense_categories if c != name],
                "expense_sub_categories": sub_categories,
            }),
            "category_deleted",
            kind="expense",
            name=name,
            in_use=in_use,
        )
        return in_use

    # --- expense sub-categories ---------------------------------------------

    def add_expense_sub_category(self, main: str, sub: str) -> None:
        sub = self._clean_name(sub, "expense_sub_categories")
        state = self.state
        self._ensure_present(state.expense_categories, main, "expense_categories")
        subs = state.expense_sub_categories.get(main, [])
        self._ensure_absent(subs, sub, "expense_sub_categories")

        sub_categories = dict(state.expense_sub_categories)
        sub_categories[main] = subs + [sub]
        self._commit(
            state.model_copy(update={"expense_sub_categories": sub_categories}),
            "sub_category_added",
            main=main,
            name=sub,
        )

    def rename_expense_sub_category(self, main: str, old_sub: str, new_sub: str) -> None:
        """Rename a sub-category and rewrite expenses carrying exactly (main, old_sub)."""
        new_sub = self._clean_name(new_sub, "expense_sub_categories")
        state = self.state
        subs = state.expense_sub_categories.get(main, [])
        self._ensure_present(subs, old_sub, "expense_sub_categories")
        self._ensure_absent(subs, new_sub, "expense_sub_categories")

        sub_categories = dict(state.expense_sub_categories)
        sub_categories[main] = [new_sub if s == old_sub else s for s in subs]
        self._commit(
            state.model_copy(update={
                "expense_sub_categories": sub_categories,
                "transactions": rename_sub_category(
                    state.transactions, main, old_sub, new_sub, TransactionType.EXPENSE,
                ),
            }),
            "sub_category_renamed",
            main=main,
            old_name=old_sub,
            new_name=new_sub,
        )

    def delete_expense_sub_category(self, main: str, sub: str) -> int:
        state = self.state
        subs = state.expense_sub_categories.get(main, [])
        self._ensure_present(subs, sub, "expense_sub_categories")
        in_use = self.category_usage(TransactionType.EXPENSE, main, sub)

        sub_categories = dict(state.expense_sub_categories)
        sub_categories[main] = [s for s in subs if s != sub]
        self._commit(
            state.model_copy(update={"expense_sub_categories": sub_categories}),
            "sub_category_deleted",
            main=main,
            name=sub,
            in_use=in_use,
        )
        return in_use

    # --- income lists (insertion order) --------------------------------------

    def _add_income_list_entry(self, field: str, name: str) -> None:
        name = self._clean_name(name, field)
        state = self.state
        names = getattr(state, field)
        self._ensure_absent(names, name, field)
        self._commit(
            state.model_copy(update={field: names + [name]}),
            "category_added",
            kind=field,
            name=name,
        )

    def _rename_income_list_entry(
        self,
        field: str,
        old_name: str,
        new_name: str,
        rewrite: Callable[[list[Transaction]], list[Transaction]],
    ) -> None:
        new_name = self._clean_name(new_name, field)
        state = self.state
        names = getattr(state, field)
        self._ensure_present(names, old_name, field)
        self._ensure_absent(names, new_name, field)

        self._commit(
            state.model_copy(update={
                field: [new_name if n == old_name else n for n in names],
                "transactions": rewrite(state.transactions),
            }),
            "category_renamed",
            kind=field,
            old_name=old_name,
            new_name=new_name,
        )

    def _delete_income_list_entry(self, field: str, name: str, in_use: int) -> int:
        state = self.state
        names = getattr(state, field)
        self._ensure_present(names, name, field)
        self._commit(
            state.model_copy(update={field: [n for n in names if n != name]}),
            "category_deleted",
            kind=field,
            name=name,
            in_use=in_use,
        )
        return in_use

    def add_income_category(self, name: str) -> None:
        self._add_income_list_entry("income_categories", name)

    def rename_income_category(self, old_name: str, new_name: str) -> None:
        """Rename an income category and every income row filed under it."""
        self._ensure_unprotected(old_name)
        self._rename_income_list_entry(
            "income_categories",
            old_name,
            new_name,
            lambda txs: rename_main_category(txs, old_name, new_name, TransactionType.INCOME),
        )

    def delete_income_category(self, name: str) -> int:
        self._ensure_unprotected(name)
        return self._delete_income_list_entry(
            "income_categories",
            name,
            self.category_usage(TransactionType.INCOME, name),
        )

    def add_festival_category(self, name: str) -> None:
        self._add_income_list_entry("festival_categories", name)

    def rename_festival_category(self, old_name: str, new_name: str) -> None:
        """Rename a festival and rewrite `절기헌금 (세부) (old)` income rows."""
        self._rename_income_list_entry(
            "festival_categories",
            old_name,
            new_name,
            lambda txs: rename_sub_category(
                txs, FESTIVAL_PARENT, old_name, new_name, TransactionType.INCOME,
            ),
        )

    def delete_festival_category(self, name: str) -> int:
        return self._delete_income_list_entry(
            "festival_categories",
            name,
            self.category_usage(TransactionType.INCOME, FESTIVAL_PARENT, name),
        )

    def add_other_income_category(self, name: str) -> None:
        self._add_income_list_entry("other_income_categories", name)

    def rename_other_income_category(self, old_name: str, new_name: str) -> None:
        """Rename an other-income item and rewrite `기타헌금 (세부) (old)` income rows."""
        self._rename_income_list_entry(
            "other_income_categories",
            old_name,
            new_name,
            lambda txs: rename_sub_category(
                txs, OTHER_INCOME_PARENT, old_name, new_name, TransactionType.INCOME,
            ),
        )

    def delete_other_income_category(self, name: str) -> int:
        return self._delete_income_list_entry(
            "other_income_categories",
            name,
            self.category_usage(TransactionType.INCOME, OTHER_INCOME_PARENT, name),
        )

    # =========================================================================
    # SNAPSHOTS
    # =========================================================================

    def export_snapshot(self) -> dict[str, Any]:
        """Current state in the snapshot wire format."""
        return self.state.to_wire()

    def export_snapshot_json(self) -> str:
        return json.dumps(self.export_snapshot(), ensure_ascii=False, indent=2)

    def snapshot_file_name(self, today: Optional[dt.date] = None) -> str:
        """Suggested backup file name."""
        today = today or self.today()
        return f"{self._settings.church_name}_헌금_{today.isoformat()}.json"

    def _replace_state(self, snapshot: LedgerSnapshot, event: str) -> LedgerSnapshot:
        snapshot = snapshot.model_copy(update={
            "members": _sorted_members(snapshot.members),
            "expense_categories": _sorted_names(snapshot.expense_categories),
        })
        self._commit(
            snapshot,
            event,
            members=len(snapshot.members),
            transactions=len(snapshot.transactions),
        )
        return snapshot

    def import_snapshot(self, payload: Any) -> LedgerSnapshot:
        """
        Replace the whole ledger with a snapshot payload.

        Raises:
            SnapshotValidationError: If the payload is rejected; nothing changes
        """
        return self._replace_state(self._validator.parse(payload), "snapshot_imported")

    def import_snapshot_json(self, text: str) -> LedgerSnapshot:
        return self._replace_state(self._validator.parse_json(text), "snapshot_imported")

    def import_members_only(self, payload: Any) -> list[Member]:
        """
        Replace the member list and start the books from zero.

        All transactions are removed; categories are kept.
        """
        members = _sorted_members(self._validator.parse_members(payload))
        state = self.state
        self._commit(
            state.model_copy(update={"members": members, "transactions": []}),
            "members_imported",
            members=len(members),
            cleared_transactions=len(state.transactions),
        )
        return members

    def _require_snapshot_store(self) -> SnapshotStore:
        if self._snapshot_store is None:
            raise StorageError("Snapshot history is not configured")
        return self._snapshot_store

    def save_snapshot(self) -> SnapshotRecord:
        """
        Add the current state to the snapshot history.

        The history keeps the newest `snapshot_history_limit` records.
        """
        store = self._require_snapshot_store()
        record = SnapshotRecord(timestamp=self._clock(), data=self.state)
        store.append(record)
        dropped = store.truncate(self._settings.snapshot_history_limit)
        self._logger.info(
            "snapshot_saved",
            timestamp=record.timestamp.isoformat(),
            dropped=dropped,
        )
        return record

    def list_snapshots(self) -> list[SnapshotRecord]:
        """Saved snapshots, newest first."""
        return self._require_snapshot_store().list_snapshots()

    def restore_snapshot(self, timestamp: dt.datetime) -> LedgerSnapshot:
        """
        Replace the ledger with a saved snapshot.

        Raises:
            NotFoundError: If no snapshot has that timestamp
        """
        record = self._require_snapshot_store().get(timestamp)
        if record is None:
            raise NotFoundError(f"Snapshot {timestamp.isoformat()} not found")
        return self._replace_state(record.data, "snapshot_restored")

    def delete_snapshot(self, timestamp: dt.datetime) -> None:
        self._require_snapshot_store().delete(timestamp)
        self._logger.info("snapshot_deleted", timestamp=timestamp.isoformat())

    def reset(self) -> None:
        """Erase the ledger and the snapshot history."""
        self._store.clear()
        if self._snapshot_store is not None:
            self._snapshot_store.clear()
        self._logger.warning("ledger_reset")

    # =========================================================================
    # VIEWS
    # =========================================================================

    def ledger_view(
        self,
        today: Optional[dt.date] = None,
        selected_year: Optional[int] = None,
    ) -> LedgerView:
        """Main-screen view: lists, balances and period totals."""
        today = today or self.today()
        state = self.state
        settings = self._settings

        return LedgerView(
            transactions=simple_order(state.transactions),
            entries=running_balances(
                state.transactions,
                state.members,
                priority=settings.income_priority,
                unnamed_label=settings.unnamed_donor_label,
                unassigned_label=settings.unassigned_member_label,
            ),
            balance=split_balance(state.transactions, today),
            summary=summarize_periods(state.transactions, today, selected_year),
            members=_sorted_members(state.members),
        )

    def member_name(self, member_id: Optional[int]) -> str:
        """Display name for a member id; deleted or missing members are unassigned."""
        if member_id is None:
            return self._settings.unassigned_member_label
        return self.state.member_names().get(member_id, self._settings.unassigned_member_label)

    def member_groups(self) -> dict[str, list[Member]]:
        """Members bucketed by initial consonant."""
        return group_by_initial(_sorted_members(self.state.members))

    def search(self, query: LedgerQuery) -> SearchResult:
        result = QueryExecutor(self.state).execute(query)
        self._logger.info(
            "query_executed",
            query_id=str(query.query_id),
            search_type=query.search_type,
            result_count=result.result_count,
        )
        return result

    def todays_totals(self, today: Optional[dt.date] = None) -> DailyTotals:
        return QueryExecutor(self.state).todays_totals(today or self.today())

    def export_rows(
        self,
        mode: Union[ExportMode, str] = ExportMode.TOTAL,
        year: Optional[int] = None,
        months: Iterable[int] = (),
        weeks: Iterable[dt.date] = (),
    ) -> list[dict[str, Any]]:
        """
        Spreadsheet rows for a period.

        Raises:
            ExportSelectionError: If the selection is empty or matches nothing
        """
        state = self.state
        if year is None:
            year = self.today().year
        rows = export_rows(state.transactions, state.members, ExportMode(mode), year, months, weeks)
        self._logger.info("export_prepared", mode=ExportMode(mode).value, rows=len(rows))
        return rows
