"""
Data Models Package

This package contains all Pydantic models used in GharKhata.
Ledger records live in household.py, engine output in statement.py.
"""

from gharkhata.models.household import (
    AttendanceMark,
    AttendanceStatus,
    Helper,
    HelperRole,
    MilkEntry,
    Payment,
    PaymentKind,
    PaymentType,
    coerce_amount,
)
from gharkhata.models.statement import (
    PAID_TOLERANCE,
    UNASSIGNED_LABEL,
    UNKNOWN_LABEL,
    BucketKey,
    HelperBucket,
    MaidsSummary,
    MilkBucket,
    MilkTotals,
    MonthlyStatement,
    SalaryLine,
    SalaryTotals,
    SettlementStatus,
    UnassignedBucket,
    bucket_for,
)
from gharkhata.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Ledger records
    "AttendanceMark",
    "AttendanceStatus",
    "Helper",
    "HelperRole",
    "MilkEntry",
    "Payment",
    "PaymentKind",
    "PaymentType",
    "coerce_amount",
    # Statement
    "PAID_TOLERANCE",
    "UNASSIGNED_LABEL",
    "UNKNOWN_LABEL",
    "BucketKey",
    "HelperBucket",
    "MaidsSummary",
    "MilkBucket",
    "MilkTotals",
    "MonthlyStatement",
    "SalaryLine",
    "SalaryTotals",
    "SettlementStatus",
    "UnassignedBucket",
    "bucket_for",
    # Validation
    "ValidationIssue",
    "ValidationResult",
]
