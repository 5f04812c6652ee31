"""Shared fixtures for Parish Ledger tests."""

import pytest
from datetime import datetime, timedelta

from parish_ledger.models import Member, Transaction


class FakeClock:
    """Deterministic clock that advances one second per reading."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current += timedelta(seconds=1)
        return value


@pytest.fixture
def make_tx():
    """Factory for transactions with sensible defaults."""
    def _make(tx_id, kind, day, category, amount, member_id=None, memo=None):
        return Transaction(
            id=tx_id,
            type=kind,
            date=day,
            category=category,
            amount=amount,
            member_id=member_id,
            memo=memo,
        )
    return _make


@pytest.fixture
def members():
    return [
        Member(id=1, name="김철수", position="집사"),
        Member(id=2, name="박영희", position="권사"),
        Member(id=3, name="이민수", position="성도"),
    ]


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 1, 5, 9, 0, 0))
