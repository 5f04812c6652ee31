"""
Validation Result Models

Validation never fixes input silently. It reports every issue it finds,
and callers refuse to apply input that has error-level issues.
"""

from typing import Optional

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue (dotted path for nested input)",
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'invalid_format', 'duplicate_id')",
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue",
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity",
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available",
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage validation.

    Stage 1: Schema validation (shape, types, required fields)
    Stage 2: Semantic validation (duplicate ids, references, configuration)
    """

    schema_valid: bool = Field(
        ...,
        description="Did schema validation pass?",
    )
    semantic_valid: bool = Field(
        ...,
        description="Did semantic validation pass?",
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result",
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found",
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings",
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")
