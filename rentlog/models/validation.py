"""Integrity report models."""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single integrity issue found in a document."""

    entity_type: str = Field(
        ...,
        description="Kind of record with the issue (property, tenant, bill, payment)"
    )
    entity_id: Optional[int] = None
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'orphaned', 'duplicate_id')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
    )
    suggested_fix: Optional[str] = None

    def to_log_dict(self) -> dict:
        return {
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "issue_type": self.issue_type,
            "severity": self.severity,
            "message": self.message,
        }


class ValidationResult(BaseModel):
    """
    Result of an integrity check.

    Issues are reported, never repaired.
    """

    checked_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.has_errors

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [issue for issue in self.issues if issue.severity == "warning"]
