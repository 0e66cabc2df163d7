"""
Validation Result Models

Form checks run before anything is submitted to the store.
A failed check blocks the action locally and is shown inline.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'mismatch', 'too_short')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        default="error",
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """Outcome of validating one form submission."""

    form: str = Field(
        ...,
        description="Which form was validated (e.g., 'transaction', 'register')"
    )
    validated_at: datetime = Field(
        default_factory=datetime.utcnow
    )
    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )

    @property
    def has_errors(self) -> bool:
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def is_valid(self) -> bool:
        """Warnings never block submission; errors always do."""
        return not self.has_errors

    @property
    def error_count(self) -> int:
        return sum(1 for issue in self.issues if issue.severity == "error")

    @property
    def first_error(self) -> Optional[str]:
        for issue in self.issues:
            if issue.severity == "error":
                return issue.message
        return None
