"""
Entry Validation

DESIGN DECISION: Ledgers are lenient on READ and strict on WRITE.

Stored data is never rejected - bad numbers read as zero so a statement
can always be produced. New entries, however, are checked here before
they are stored:

- Helpers need a name and a known role
- Milk entries need a valid date and more than zero liters
- Payments need a known kind, a YYYY-MM month and an amount above zero

Non-numeric salary or price input coerces to zero with a warning,
matching how stored records are read. Zero or negative payments are
REJECTED - aggregation assumes every stored payment is positive.

Validation never silently fixes issues. It reports them; the ledger
raises EntryRejectedError when any error-level issue exists.
"""

import re
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from gharkhata.models.household import (
    HelperRole,
    PaymentKind,
    coerce_amount,
)
from gharkhata.models.validation import ValidationIssue, ValidationResult


MONTH_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")


class EntryRejectedError(ValueError):
    """A new ledger entry failed validation and was not stored."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = [i.message for i in result.issues if i.severity == "error"]
        super().__init__("; ".join(messages) or "Entry rejected")

    @property
    def issues(self) -> list[ValidationIssue]:
        return self.result.issues


def is_month_key(value: Any) -> bool:
    """True for YYYY-MM strings whose month is 01 to 12."""
    return isinstance(value, str) and bool(MONTH_PATTERN.match(value))


def parse_date_key(value: Any) -> Optional[date]:
    """Parse a YYYY-MM-DD key, or None when it is not one."""
    if not isinstance(value, str):
        return None
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        return None
    # fromisoformat accepts other ISO shapes on newer Pythons
    if parsed.isoformat() != value:
        return None
    return parsed


def _is_numeric(value: Any) -> bool:
    if value is None or isinstance(value, bool):
        return False
    if isinstance(value, str) and not value.strip():
        return False
    try:
        return Decimal(str(value).strip()).is_finite()
    except ArithmeticError:
        return False


class EntryValidator:
    """
    Validates new ledger entries.

    Stateless; `today` can be injected for deterministic checks.
    """

    def __init__(self, today: Optional[date] = None):
        self._today = today

    @property
    def today(self) -> date:
        return self._today or date.today()

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def validate_helper(
        self,
        name: Any,
        role: Any,
        monthly_salary: Any = None,
        default_price_per_liter: Any = None,
        start_date: Any = None,
    ) -> ValidationResult:
        issues = []

        if not isinstance(name, str) or not name.strip():
            issues.append(ValidationIssue(
                field="name",
                issue_type="missing",
                message="Please enter the helper's name",
                severity="error",
            ))

        valid_roles = {r.value for r in HelperRole}
        role_value = role.value if isinstance(role, HelperRole) else role
        if not role_value:
            issues.append(ValidationIssue(
                field="role",
                issue_type="missing",
                message="Please choose a role",
                severity="error",
            ))
        elif not isinstance(role_value, str) or role_value not in valid_roles:
            issues.append(ValidationIssue(
                field="role",
                issue_type="invalid_value",
                message=f"Unknown role: {role_value}",
                severity="error",
                suggested_fix=f"Use one of: {', '.join(sorted(valid_roles))}",
            ))

        issues.extend(self._coercion_warnings("monthly_salary", monthly_salary))
        issues.extend(
            self._coercion_warnings("default_price_per_liter", default_price_per_liter)
        )

        if start_date:
            parsed = parse_date_key(start_date)
            if parsed is None:
                issues.append(ValidationIssue(
                    field="start_date",
                    issue_type="invalid_format",
                    message=f"Start date {start_date!r} is not a YYYY-MM-DD date",
                    severity="warning",
                ))
            elif parsed > self.today:
                issues.append(ValidationIssue(
                    field="start_date",
                    issue_type="future_date",
                    message=f"Start date ({parsed}) is in the future",
                    severity="warning",
                    suggested_fix="Please verify the date is correct",
                ))

        return ValidationResult(entity_type="helper", issues=issues)

    # -------------------------------------------------------------------------
    # Milk
    # -------------------------------------------------------------------------

    def validate_milk_entry(
        self,
        entry_date: Any,
        liters: Any,
        price_per_liter: Any = None,
    ) -> ValidationResult:
        issues = []

        if not entry_date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="missing",
                message="Please select a date",
                severity="error",
            ))
        elif parse_date_key(entry_date) is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Date {entry_date!r} is not a YYYY-MM-DD date",
                severity="error",
            ))

        if coerce_amount(liters) <= 0:
            issues.append(ValidationIssue(
                field="liters",
                issue_type="invalid_value",
                message="Please enter liters",
                severity="error",
                suggested_fix="Liters must be a number greater than zero",
            ))

        issues.extend(self._coercion_warnings("price_per_liter", price_per_liter))
        if price_per_liter is not None and coerce_amount(price_per_liter) == 0:
            issues.append(ValidationIssue(
                field="price_per_liter",
                issue_type="zero_price",
                message="Price per liter is zero; this delivery will cost nothing",
                severity="warning",
            ))

        return ValidationResult(entity_type="milk_entry", issues=issues)

    # -------------------------------------------------------------------------
    # Attendance
    # -------------------------------------------------------------------------

    def validate_attendance(self, mark_date: Any, helper_id: Any) -> ValidationResult:
        issues = []

        if parse_date_key(mark_date) is None:
            issues.append(ValidationIssue(
                field="date",
                issue_type="invalid_format",
                message=f"Date {mark_date!r} is not a YYYY-MM-DD date",
                severity="error",
            ))

        if not isinstance(helper_id, str) or not helper_id.strip():
            issues.append(ValidationIssue(
                field="helper_id",
                issue_type="missing",
                message="Attendance must be marked for a helper",
                severity="error",
            ))

        return ValidationResult(entity_type="attendance", issues=issues)

    # -------------------------------------------------------------------------
    # Payments
    # -------------------------------------------------------------------------

    def validate_payment(
        self,
        kind: Any,
        month: Any,
        amount: Any,
    ) -> ValidationResult:
        issues = []

        kind_value = kind.value if isinstance(kind, PaymentKind) else kind
        if not isinstance(kind_value, str) or kind_value not in {k.value for k in PaymentKind}:
            issues.append(ValidationIssue(
                field="type",
                issue_type="invalid_value",
                message=f"Unknown payment type: {kind_value!r}",
                severity="error",
                suggested_fix="Use 'salary' or 'milk'",
            ))

        if not is_month_key(month):
            issues.append(ValidationIssue(
                field="month",
                issue_type="invalid_format",
                message=f"Month {month!r} is not in YYYY-MM form",
                severity="error",
            ))

        if not _is_numeric(amount) or coerce_amount(amount) <= 0:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Please enter a valid amount",
                severity="error",
                suggested_fix="The amount must be a number greater than zero",
            ))

        return ValidationResult(entity_type="payment", issues=issues)

    # -------------------------------------------------------------------------

    def _coercion_warnings(self, field: str, value: Any) -> list[ValidationIssue]:
        """Warn when a supplied number will be stored as zero."""
        if value is None or (isinstance(value, str) and not value.strip()):
            return []
        if not _is_numeric(value) or Decimal(str(value).strip()) < 0:
            return [ValidationIssue(
                field=field,
                issue_type="coerced_to_zero",
                message=f"{value!r} is not a valid amount and will be saved as 0",
                severity="warning",
            )]
        return []


def ensure_valid(result: ValidationResult) -> ValidationResult:
    """Raise EntryRejectedError when the result has errors."""
    if result.has_errors:
        raise EntryRejectedError(result)
    return result
