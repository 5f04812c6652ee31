"""Tests for the two-stage snapshot validation pipeline."""

import json

import pytest

from parish_ledger.validation import (
    MemberValidationError,
    SnapshotValidationError,
    SnapshotValidator,
    TransactionValidationError,
    build_member,
    build_transaction,
)


def _payload(**overrides):
    payload = {
        "members": [{"id": 1, "name": "김철수", "position": "집사"}],
        "transactions": [
            {
                "id": 10,
                "type": "income",
                "date": "2024-01-05",
                "category": "십일조",
                "amount": 10000,
                "memberId": 1,
            },
        ],
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def validator():
    return SnapshotValidator()


class TestSchemaStage:
    """Tests for stage 1 (shape and types)."""

    def test_valid_payload(self, validator):
        """Test a well-formed payload."""
        result = validator.validate(_payload())
        assert result.is_valid is True
        assert result.schema_valid is True
        assert result.semantic_valid is True

    def test_payload_must_be_object(self, validator):
        """Test non-object payloads."""
        result = validator.validate([1, 2, 3])
        assert result.is_valid is False
        assert result.issues[0].field == "payload"

    def test_members_must_be_array(self, validator):
        """Test a non-array members value."""
        result = validator.validate(_payload(members={"id": 1}))
        assert result.schema_valid is False
        assert any(i.field == "members" and i.issue_type == "invalid_type" for i in result.issues)

    def test_transactions_must_be_present(self, validator):
        """Test a missing transactions array."""
        payload = _payload()
        del payload["transactions"]
        result = validator.validate(payload)
        assert result.schema_valid is False
        assert any(i.field == "transactions" and i.issue_type == "missing" for i in result.issues)

    def test_malformed_date_rejected(self, validator):
        """Test that a bad date fails at ingestion with its location."""
        payload = _payload()
        payload["transactions"][0]["date"] = "2024-1-5"
        result = validator.validate(payload)
        assert result.is_valid is False
        assert any(i.field == "transactions.0.date" for i in result.issues)

    def test_zero_amount_rejected(self, validator):
        """Test amount constraints inside a snapshot."""
        payload = _payload()
        payload["transactions"][0]["amount"] = 0
        result = validator.validate(payload)
        assert any(i.field == "transactions.0.amount" for i in result.issues)

    def test_semantic_stage_skipped_on_schema_failure(self, validator):
        """Test that stage 2 does not run after stage 1 fails."""
        result = validator.validate(_payload(members="nope"))
        assert result.semantic_valid is False
        assert all(i.issue_type != "duplicate_id" for i in result.issues)


class TestSemanticStage:
    """Tests for stage 2 (cross-record consistency)."""

    def test_duplicate_transaction_ids(self, validator):
        """Test that duplicate ids are errors."""
        payload = _payload()
        payload["transactions"].append(dict(payload["transactions"][0]))
        result = validator.validate(payload)
        assert result.is_valid is False
        assert any(i.issue_type == "duplicate_id" for i in result.issues)

    def test_duplicate_member_ids(self, validator):
        """Test duplicate member ids."""
        payload = _payload()
        payload["members"].append({"id": 1, "name": "박영희", "position": "권사"})
        assert validator.validate(payload).is_valid is False

    def test_unknown_position_is_warning(self, validator):
        """Test that unknown positions do not block loading."""
        payload = _payload(members=[{"id": 1, "name": "김철수", "position": "회장"}])
        result = validator.validate(payload)
        assert result.is_valid is True
        assert any("회장" in w for w in result.warnings)

    def test_dangling_member_is_info(self, validator):
        """Test that references to deleted members are allowed."""
        result = validator.validate(_payload(members=[]))
        assert result.is_valid is True
        assert any(i.issue_type == "dangling_reference" and i.severity == "info" for i in result.issues)

    def test_unconfigured_category_is_warning(self, validator):
        """Test categories missing from the configured lists."""
        payload = _payload()
        payload["transactions"][0]["category"] = "없는항목"
        result = validator.validate(payload)
        assert result.is_valid is True
        assert any(i.issue_type == "unconfigured_category" for i in result.issues)

    def test_incomplete_sub_category_is_warning(self, validator):
        """Test that a truncated composite label is loaded as written."""
        payload = _payload()
        payload["transactions"][0]["category"] = "십일조 (세부) (1월"
        result = validator.validate(payload)
        assert result.is_valid is True
        assert any(i.issue_type == "malformed_category" for i in result.issues)
        assert not any(i.issue_type == "unconfigured_category" for i in result.issues)

        snapshot = validator.parse(payload)
        assert snapshot.transactions[0].label == "십일조 (세부) (1월"


class TestParsing:
    """Tests for parse, parse_json and parse_members."""

    def test_parse_returns_snapshot(self, validator):
        """Test loading a valid payload."""
        snapshot = validator.parse(_payload())
        assert snapshot.transactions[0].member_id == 1
        assert "교육비" in snapshot.expense_categories

    def test_parse_raises_with_issues(self, validator):
        """Test that rejection carries the issues."""
        with pytest.raises(SnapshotValidationError) as exc_info:
            validator.parse(_payload(transactions={}))
        assert exc_info.value.issues

    def test_parse_json(self, validator):
        """Test parsing JSON text."""
        snapshot = validator.parse_json(json.dumps(_payload(), ensure_ascii=False))
        assert len(snapshot.members) == 1

    def test_parse_json_invalid(self, validator):
        """Test that malformed JSON is reported, not raised raw."""
        with pytest.raises(SnapshotValidationError) as exc_info:
            validator.parse_json("{not json")
        assert exc_info.value.issues[0].issue_type == "invalid_json"

    def test_parse_members_ignores_transactions(self, validator):
        """Test member-only loading."""
        members = validator.parse_members(_payload(transactions="ignored"))
        assert [m.name for m in members] == ["김철수"]

    def test_parse_members_requires_list(self, validator):
        """Test member-only loading without members."""
        with pytest.raises(SnapshotValidationError):
            validator.parse_members({"transactions": []})

    def test_user_friendly_summary(self, validator):
        """Test the display summary."""
        result = validator.validate(_payload(members="nope"))
        summary = validator.get_user_friendly_summary(result)
        assert "cannot be loaded" in summary
        assert validator.get_user_friendly_summary(validator.validate(_payload())) == "All checks passed."


class TestFormBuilders:
    """Tests for single-record builders."""

    def test_build_transaction(self):
        """Test a valid form submission."""
        tx = build_transaction(
            id=1,
            type="expense",
            date="2024-01-05",
            category="교육비 (세부) (강사비)",
            amount=3000,
        )
        assert tx.category.sub == "강사비"

    def test_build_transaction_rejects_text_amount(self):
        """Test a non-numeric amount."""
        with pytest.raises(TransactionValidationError) as exc_info:
            build_transaction(id=1, type="income", date="2024-01-05", category="십일조", amount="abc")
        assert exc_info.value.issues[0].field == "amount"

    def test_build_transaction_rejects_empty_date(self):
        """Test a missing date."""
        with pytest.raises(TransactionValidationError):
            build_transaction(id=1, type="income", date="", category="십일조", amount=100)

    def test_build_member_rejects_unknown_position(self):
        """Test positions outside the list."""
        with pytest.raises(MemberValidationError) as exc_info:
            build_member(1, "김철수", "회장")
        assert exc_info.value.issues[0].field == "position"

    def test_build_member_rejects_blank_name(self):
        """Test blank names."""
        with pytest.raises(MemberValidationError):
            build_member(1, "  ", "집사")


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
