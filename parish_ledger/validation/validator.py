"""
Two-Stage Validation Pipeline

Input enters the ledger in two ways: a whole snapshot (file import,
snapshot restore) or a single form submission (one transaction or member).
Both are validated before anything is changed.

STAGE 1 - SCHEMA VALIDATION:
- payload is an object; `members` and `transactions` are arrays
- every member and transaction matches its model (strict ISO dates,
  positive integer amounts, non-empty categories)

STAGE 2 - SEMANTIC VALIDATION (snapshots only):
- duplicate member or transaction ids (errors)
- transactions pointing at deleted members (info, they display as 미지정)
- incomplete sub-category labels, kept verbatim (warnings)
- positions and categories outside the configured lists (warnings)

Stage 2 only runs when stage 1 passes. Input with any error-level issue is
rejected as a whole.
"""

import json
from collections import Counter
from typing import Any, Optional

from pydantic import ValidationError

from parish_ledger.config.defaults import POSITIONS
from parish_ledger.log import get_logger
from parish_ledger.models.ledger import LedgerSnapshot, Member, Transaction, TransactionType
from parish_ledger.models.validation import ValidationIssue, ValidationResult
from parish_ledger.validation.errors import (
    MemberValidationError,
    SnapshotValidationError,
    TransactionValidationError,
)


logger = get_logger(__name__)


def issues_from_pydantic(exc: ValidationError, prefix: str = "") -> list[ValidationIssue]:
    """Convert a pydantic ValidationError into ValidationIssue entries."""
    issues = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"])
        if prefix:
            location = f"{prefix}.{location}" if location else prefix
        issues.append(ValidationIssue(
            field=location or "payload",
            issue_type=error["type"],
            message=error["msg"],
            severity="error",
        ))
    return issues


def _errors_only(issues: list[ValidationIssue]) -> bool:
    return any(issue.severity == "error" for issue in issues)


class SnapshotValidator:
    """
    Validates snapshot payloads through a two-stage pipeline.

    Use `validate` to inspect a payload and `parse` to load one.
    """

    def __init__(self, positions: Optional[list[str]] = None):
        self._positions = positions if positions is not None else list(POSITIONS)

    def _validate_schema(
        self,
        payload: Any,
    ) -> tuple[Optional[LedgerSnapshot], list[ValidationIssue]]:
        """
        Stage 1: shape and types.

        Returns: (snapshot or None, list_of_issues)
        """
        issues = []

        if not isinstance(payload, dict):
            issues.append(ValidationIssue(
                field="payload",
                issue_type="invalid_type",
                message="Snapshot must be a JSON object",
                severity="error",
            ))
            return None, issues

        for key in ("members", "transactions"):
            if not isinstance(payload.get(key), list):
                issues.append(ValidationIssue(
                    field=key,
                    issue_type="missing" if key not in payload else "invalid_type",
                    message=f"'{key}' must be an array",
                    severity="error",
                    suggested_fix="Check that the file is a ledger backup",
                ))
        if issues:
            return None, issues

        try:
            snapshot = LedgerSnapshot.model_validate(payload)
        except ValidationError as e:
            return None, issues_from_pydantic(e)

        return snapshot, issues

    def _validate_semantic(self, snapshot: LedgerSnapshot) -> list[ValidationIssue]:
        """Stage 2: cross-record consistency."""
        issues = []

        member_ids = Counter(m.id for m in snapshot.members)
        for member_id, count in member_ids.items():
            if count > 1:
                issues.append(ValidationIssue(
                    field="members",
                    issue_type="duplicate_id",
                    message=f"Member id {member_id} appears {count} times",
                    severity="error",
                ))

        transaction_ids = Counter(tx.id for tx in snapshot.transactions)
        for tx_id, count in transaction_ids.items():
            if count > 1:
                issues.append(ValidationIssue(
                    field="transactions",
                    issue_type="duplicate_id",
                    message=f"Transaction id {tx_id} appears {count} times",
                    severity="error",
                ))

        for member in snapshot.members:
            if member.position not in self._positions:
                issues.append(ValidationIssue(
                    field="members",
                    issue_type="unknown_position",
                    message=f"Member '{member.name}' has unknown position '{member.position}'",
                    severity="warning",
                ))

        dangling = sorted({
            tx.member_id
            for tx in snapshot.transactions
            if tx.member_id is not None and tx.member_id not in member_ids
        })
        if dangling:
            issues.append(ValidationIssue(
                field="transactions",
                issue_type="dangling_reference",
                message=(
                    f"{len(dangling)} member id(s) referenced by transactions "
                    f"no longer exist and will show as unassigned"
                ),
                severity="info",
            ))

        damaged = sorted({tx.id for tx in snapshot.transactions if tx.category.is_damaged})
        if damaged:
            issues.append(ValidationIssue(
                field="transactions",
                issue_type="malformed_category",
                message=(
                    f"{len(damaged)} transaction(s) carry an incomplete sub-category "
                    f"label and are kept as written"
                ),
                severity="warning",
            ))

        configured = {
            TransactionType.INCOME: set(snapshot.income_categories),
            TransactionType.EXPENSE: set(snapshot.expense_categories),
        }
        unconfigured = sorted({
            (tx.type.value, tx.category.root)
            for tx in snapshot.transactions
            if tx.category.root not in configured[tx.type]
        })
        for tx_type, main in unconfigured:
            issues.append(ValidationIssue(
                field="transactions",
                issue_type="unconfigured_category",
                message=f"{tx_type} category '{main}' is used but not configured",
                severity="warning",
            ))

        for field_name in (
            "expense_categories",
            "income_categories",
            "festival_categories",
            "other_income_categories",
        ):
            names = getattr(snapshot, field_name)
            if len(names) != len(set(names)):
                issues.append(ValidationIssue(
                    field=field_name,
                    issue_type="duplicate_name",
                    message=f"{field_name} contains duplicate names",
                    severity="warning",
                ))

        return issues

    def _run(self, payload: Any) -> tuple[ValidationResult, Optional[LedgerSnapshot]]:
        all_issues = []

        snapshot, schema_issues = self._validate_schema(payload)
        all_issues.extend(schema_issues)
        schema_valid = snapshot is not None and not _errors_only(schema_issues)

        semantic_valid = False
        if schema_valid:
            semantic_issues = self._validate_semantic(snapshot)
            all_issues.extend(semantic_issues)
            semantic_valid = not _errors_only(semantic_issues)

        result = ValidationResult(
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            issues=all_issues,
            warnings=[i.message for i in all_issues if i.severity == "warning"],
        )
        return result, snapshot

    def validate(self, payload: Any) -> ValidationResult:
        """Run full validation and report every issue found."""
        result, _ = self._run(payload)
        return result

    def parse(self, payload: Any) -> LedgerSnapshot:
        """
        Validate and load a snapshot payload.

        Raises:
            SnapshotValidationError: If any error-level issue is found
        """
        result, snapshot = self._run(payload)
        if not result.is_valid:
            logger.warning(
                "snapshot_rejected",
                error_count=result.error_count,
                fields=sorted({i.field for i in result.issues if i.severity == "error"}),
            )
            raise SnapshotValidationError(
                f"Snapshot rejected with {result.error_count} error(s)",
                issues=result.issues,
            )
        if result.warnings:
            logger.info("snapshot_warnings", warnings=result.warnings)
        return snapshot

    def parse_json(self, text: str) -> LedgerSnapshot:
        """Parse snapshot JSON text."""
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise SnapshotValidationError(
                "Snapshot is not valid JSON",
                issues=[ValidationIssue(
                    field="payload",
                    issue_type="invalid_json",
                    message=f"{e.msg} (line {e.lineno}, column {e.colno})",
                    severity="error",
                )],
            ) from e
        return self.parse(payload)

    def parse_members(self, payload: Any) -> list[Member]:
        """
        Load only the member list from a snapshot payload.

        Transactions and categories in the payload are ignored.
        """
        if not isinstance(payload, dict) or not isinstance(payload.get("members"), list):
            raise SnapshotValidationError(
                "Payload contains no member list",
                issues=[ValidationIssue(
                    field="members",
                    issue_type="missing",
                    message="'members' must be an array",
                    severity="error",
                )],
            )

        members = []
        issues = []
        for index, raw in enumerate(payload["members"]):
            try:
                members.append(Member.model_validate(raw))
            except ValidationError as e:
                issues.extend(issues_from_pydantic(e, prefix=f"members.{index}"))

        duplicates = [mid for mid, n in Counter(m.id for m in members).items() if n > 1]
        for member_id in duplicates:
            issues.append(ValidationIssue(
                field="members",
                issue_type="duplicate_id",
                message=f"Member id {member_id} appears more than once",
                severity="error",
            ))

        if issues:
            raise SnapshotValidationError(
                f"Member list rejected with {len(issues)} error(s)",
                issues=issues,
            )
        return members

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Summary of a validation result for display."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []
        if result.has_errors:
            lines.append("The data cannot be loaded:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.field}: {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please check the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)


def build_transaction(**fields: Any) -> Transaction:
    """
    Build a Transaction from form input.

    Raises:
        TransactionValidationError: On a non-numeric or non-positive amount,
            an empty or malformed date, or an empty category
    """
    try:
        return Transaction.model_validate(fields)
    except ValidationError as e:
        issues = issues_from_pydantic(e)
        raise TransactionValidationError(
            f"Transaction rejected: {', '.join(i.field for i in issues)}",
            issues=issues,
        ) from e


def build_member(
    member_id: int,
    name: str,
    position: str,
    positions: Optional[list[str]] = None,
) -> Member:
    """
    Build a Member from form input.

    Raises:
        MemberValidationError: On a blank name or a position outside the list
    """
    positions = positions if positions is not None else POSITIONS
    issues = []

    if position not in positions:
        issues.append(ValidationIssue(
            field="position",
            issue_type="unknown_position",
            message=f"Unknown position '{position}'",
            severity="error",
            suggested_fix=f"Choose one of: {', '.join(positions)}",
        ))

    member = None
    try:
        member = Member(id=member_id, name=name, position=position)
    except ValidationError as e:
        issues.extend(issues_from_pydantic(e))

    if issues:
        raise MemberValidationError(
            f"Member rejected: {', '.join(i.field for i in issues)}",
            issues=issues,
        )
    return member
