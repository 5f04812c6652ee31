"""Tests for simple and canonical transaction ordering."""

import pytest

from parish_ledger.engine.balance import running_balances
from parish_ledger.engine.ordering import (
    canonical_order,
    income_priority_index,
    member_display_name,
    simple_order,
)
from parish_ledger.config import DEFAULT_INCOME_PRIORITY
from parish_ledger.models import Member


def _ids(transactions):
    return [tx.id for tx in transactions]


class TestSimpleOrder:
    """Tests for the flat list order."""

    def test_newest_first_then_id(self, make_tx):
        """Test date descending with id descending tie-break."""
        transactions = [
            make_tx(1, "income", "2024-01-01", "십일조", 100),
            make_tx(3, "income", "2024-01-02", "십일조", 100),
            make_tx(2, "expense", "2024-01-02", "친교", 100),
            make_tx(4, "income", "2023-12-31", "십일조", 100),
        ]
        assert _ids(simple_order(transactions)) == [3, 2, 1, 4]


class TestIncomePriority:
    """Tests for the priority table lookup."""

    def test_first_contained_entry_wins(self):
        """Test substring matching against the table."""
        assert income_priority_index("주일헌금", DEFAULT_INCOME_PRIORITY) == 6
        assert income_priority_index("십일조", DEFAULT_INCOME_PRIORITY) == 11

    def test_bare_gita_matches_first(self):
        """Test that any label containing 기타 gets the top slot."""
        assert income_priority_index("기타헌금 (세부) (생일감사)", DEFAULT_INCOME_PRIORITY) == 0
        assert income_priority_index("기타수입", DEFAULT_INCOME_PRIORITY) == 0

    def test_no_match_sorts_last(self):
        """Test unknown labels."""
        assert income_priority_index("이월금", DEFAULT_INCOME_PRIORITY) == len(DEFAULT_INCOME_PRIORITY)


class TestMemberDisplayName:
    """Tests for member name resolution."""

    def test_resolution(self):
        """Test known, missing and deleted members."""
        names = {1: "김철수"}
        assert member_display_name(1, names) == "김철수"
        assert member_display_name(None, names) == "무명"
        assert member_display_name(99, names) == "미지정"


class TestCanonicalOrder:
    """Tests for the running-balance order."""

    def test_date_ascending_first(self, make_tx):
        """Test that dates dominate every other key."""
        transactions = [
            make_tx(1, "expense", "2024-01-02", "친교", 100),
            make_tx(2, "income", "2024-01-03", "십일조", 100),
            make_tx(3, "income", "2024-01-01", "십일조", 100),
        ]
        assert _ids(canonical_order(transactions)) == [3, 1, 2]

    def test_income_before_expense(self, make_tx):
        """Test type ordering within a day."""
        transactions = [
            make_tx(1, "expense", "2024-01-05", "친교", 100),
            make_tx(2, "income", "2024-01-05", "십일조", 100),
        ]
        assert _ids(canonical_order(transactions)) == [2, 1]

    def test_income_by_priority(self, make_tx):
        """Test that higher priority categories come first."""
        transactions = [
            make_tx(1, "income", "2024-01-05", "십일조", 100),
            make_tx(2, "income", "2024-01-05", "주일헌금", 100),
            make_tx(3, "income", "2024-01-05", "기타헌금 (세부) (생일감사)", 100),
            make_tx(4, "income", "2024-01-05", "이월금", 100),
        ]
        assert _ids(canonical_order(transactions)) == [3, 2, 1, 4]

    def test_income_by_member_name_descending(self, make_tx, members):
        """Test the member name tie-break."""
        transactions = [
            make_tx(1, "income", "2024-01-05", "십일조", 100, member_id=1),  # 김철수
            make_tx(2, "income", "2024-01-05", "십일조", 100, member_id=3),  # 이민수
            make_tx(3, "income", "2024-01-05", "십일조", 100, member_id=2),  # 박영희
        ]
        assert _ids(canonical_order(transactions, members)) == [2, 3, 1]

    def test_custom_priority(self, make_tx):
        """Test an injected priority table."""
        transactions = [
            make_tx(1, "income", "2024-01-05", "주일헌금", 100),
            make_tx(2, "income", "2024-01-05", "십일조", 100),
        ]
        assert _ids(canonical_order(transactions, priority=["십일조", "주일헌금"])) == [2, 1]

    def test_expense_by_label_then_memo_descending(self, make_tx):
        """Test expense tie-breaks."""
        transactions = [
            make_tx(1, "expense", "2024-01-05", "교육비", 100, memo="가"),
            make_tx(2, "expense", "2024-01-05", "친교", 100),
            make_tx(3, "expense", "2024-01-05", "교육비", 100, memo="나"),
            make_tx(4, "expense", "2024-01-05", "교육비", 100),
        ]
        # 친교 > 교육비; within 교육비 memo 나 > 가 > no memo
        assert _ids(canonical_order(transactions)) == [2, 3, 1, 4]

    def test_id_breaks_remaining_ties(self, make_tx):
        """Test the final id tie-break."""
        transactions = [
            make_tx(9, "expense", "2024-01-05", "친교", 100),
            make_tx(5, "expense", "2024-01-05", "친교", 200),
        ]
        assert _ids(canonical_order(transactions)) == [5, 9]

    def test_order_is_independent_of_input_order(self, make_tx, members):
        """Test that the order is total."""
        transactions = [
            make_tx(1, "income", "2024-01-05", "십일조", 100, member_id=1),
            make_tx(2, "expense", "2024-01-05", "교육비 (세부) (강사비)", 100),
            make_tx(3, "income", "2024-01-04", "주일헌금", 100),
            make_tx(4, "income", "2024-01-05", "감사헌금", 100),
        ]
        forward = _ids(canonical_order(transactions, members))
        backward = _ids(canonical_order(list(reversed(transactions)), members))
        assert forward == backward == [3, 4, 1, 2]

class TestMixedScriptOrder:
    """Tests for tie-breaks on names, labels and memos that mix scripts."""

    def test_expense_label_hangul_before_latin(self, make_tx):
        """Test that a Latin label outranks a Hangul one when descending."""
        transactions = [
            make_tx(1, "expense", "2024-01-05", "교육비", 100),
            make_tx(2, "expense", "2024-01-05", "IT장비", 100),
        ]
        assert _ids(canonical_order(transactions)) == [2, 1]

    def test_member_names_across_scripts(self, make_tx):
        """Test Hangul, Hanja and Latin donor names on one day."""
        people = [
            Member(id=10, name="김철수", position="집사"),
            Member(id=11, name="John", position="성도"),
            Member(id=12, name="金영", position="성도"),
        ]
        transactions = [
            make_tx(1, "income", "2024-01-05", "십일조", 100, member_id=10),
            make_tx(2, "income", "2024-01-05", "십일조", 100, member_id=11),
            make_tx(3, "income", "2024-01-05", "십일조", 100, member_id=12),
        ]
        # ascending: 김철수 < 金영 < John
        assert _ids(canonical_order(transactions, people)) == [2, 3, 1]

    def test_memo_with_digits_and_punctuation(self, make_tx):
        """Test memo ordering across punctuation, digits, Hangul and Latin."""
        transactions = [
            make_tx(1, "expense", "2024-01-05", "사무비", 100, memo="(주)문구"),
            make_tx(2, "expense", "2024-01-05", "사무비", 100, memo="1월"),
            make_tx(3, "expense", "2024-01-05", "사무비", 100, memo="복사"),
            make_tx(4, "expense", "2024-01-05", "사무비", 100, memo="A4 용지"),
        ]
        assert _ids(canonical_order(transactions)) == [4, 3, 2, 1]

    def test_running_balance_follows_mixed_order(self, make_tx):
        """Test per-entry balances on a day with a Latin expense label."""
        transactions = [
            make_tx(1, "income", "2024-01-05", "십일조", 1000),
            make_tx(2, "expense", "2024-01-05", "교육비", 300),
            make_tx(3, "expense", "2024-01-05", "IT장비", 200),
        ]
        balances = {entry.transaction.id: entry.balance for entry in running_balances(transactions)}
        assert balances == {1: 1000, 3: 800, 2: 500}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
