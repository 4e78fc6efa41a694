"""
Validation Models

Entry-time checks report what is wrong with a new helper, milk entry,
attendance mark or payment instead of quietly fixing it. Error-level
issues block the entry; warnings are shown and the entry is kept.
"""

from typing import Literal, Optional

from pydantic import BaseModel, Field


Severity = Literal["error", "warning", "info"]


class ValidationIssue(BaseModel):
    """One problem with one field of a new entry."""

    field: str = Field(..., description="Form field the problem is on, e.g. 'amount'")
    issue_type: str = Field(
        ...,
        description="Machine-readable kind: missing, invalid_value, invalid_format, ..."
    )
    message: str = Field(..., description="Short message shown to the user")
    severity: Severity
    suggested_fix: Optional[str] = None


class ValidationResult(BaseModel):
    """Every issue found with one new entry."""

    entity_type: str = Field(..., description="helper, milk_entry, attendance or payment")
    issues: list[ValidationIssue] = Field(default_factory=list)

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "error"]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == "warning"]

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)

    @property
    def is_valid(self) -> bool:
        """True when nothing blocks the entry."""
        return not self.has_errors

    @property
    def error_count(self) -> int:
        return len(self.errors)
