"""
Household Ledger Models for GharKhata

These models define the records kept in each ledger:
helpers, attendance marks, milk entries and payments.

DESIGN DECISION: Reading is LENIENT, writing is STRICT.
Old records may carry junk in numeric fields (blank strings, "abc", NaN).
Those coerce to zero on read so one bad row never blocks a month's
statement. New entries are checked by the EntryValidator before they are
stored, so junk never gets in through the front door.

Field names are snake_case in Python and camelCase on disk, so data
files stay interchangeable with the browser version of the app.
"""

from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PlainSerializer,
)
from pydantic.alias_generators import to_camel


# =============================================================================
# LENIENT COERCION
# =============================================================================

ZERO = Decimal("0")


def coerce_amount(value: Any) -> Decimal:
    """
    Coerce a stored numeric value to a non-negative Decimal.

    Anything that is not a finite, non-negative number becomes 0.
    """
    if isinstance(value, bool) or value is None:
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, (int, float)):
        amount = Decimal(str(value))
    elif isinstance(value, str):
        try:
            amount = Decimal(value.strip())
        except InvalidOperation:
            return ZERO
    else:
        return ZERO

    if not amount.is_finite() or amount < 0:
        return ZERO
    return amount


def _money_to_json(value: Decimal):
    """Store whole amounts as ints and the rest as floats."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def _coerce_text(value: Any) -> Any:
    """Ids written by older versions may be numbers."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


def _text_or_blank(value: Any) -> Any:
    if value is None:
        return ""
    return _coerce_text(value)


def _optional_id(value: Any) -> Optional[str]:
    """Blank helper references mean 'no helper'."""
    value = _coerce_text(value)
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return value


Money = Annotated[
    Decimal,
    BeforeValidator(coerce_amount),
    PlainSerializer(_money_to_json, when_used="json"),
]
RecordId = Annotated[str, BeforeValidator(_coerce_text), Field(min_length=1)]
HelperRef = Annotated[Optional[str], BeforeValidator(_optional_id)]
Text = Annotated[str, BeforeValidator(_text_or_blank)]


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class HelperRole(str, Enum):
    """What a helper does for the household."""
    MAID = "Maid"
    MILKMAN = "Milkman"
    OTHER = "Other"


class PaymentType(str, Enum):
    """
    How a helper's pay is worked out.

    MONTHLY: monthly_salary prorated by attendance.
    DAILY: monthly_salary is read as a per-day rate.
    """
    MONTHLY = "Monthly"
    DAILY = "Daily"


class AttendanceStatus(str, Enum):
    """
    Attendance mark for one helper on one date.

    UNSET is never stored - it is the absence of a mark, and it does NOT
    count as a recorded day.
    """
    PRESENT = "P"
    ABSENT = "A"
    UNSET = ""

    @property
    def is_recorded(self) -> bool:
        return self is not AttendanceStatus.UNSET

    @property
    def label(self) -> str:
        return {
            AttendanceStatus.PRESENT: "Present",
            AttendanceStatus.ABSENT: "Absent",
            AttendanceStatus.UNSET: "Mark",
        }[self]

    def next(self) -> "AttendanceStatus":
        """Toggle order used by the attendance screen: unset, P, A, unset."""
        if self is AttendanceStatus.UNSET:
            return AttendanceStatus.PRESENT
        if self is AttendanceStatus.PRESENT:
            return AttendanceStatus.ABSENT
        return AttendanceStatus.UNSET


class PaymentKind(str, Enum):
    """What a payment settles."""
    SALARY = "salary"
    MILK = "milk"


def _lenient_role(value: Any) -> Any:
    if isinstance(value, HelperRole):
        return value
    try:
        return HelperRole(value)
    except ValueError:
        return HelperRole.OTHER


def _lenient_payment_type(value: Any) -> PaymentType:
    # Anything that is not explicitly Monthly pays per day.
    if value == PaymentType.MONTHLY or value == PaymentType.MONTHLY.value:
        return PaymentType.MONTHLY
    return PaymentType.DAILY


def _lenient_status(value: Any) -> Any:
    if isinstance(value, AttendanceStatus):
        return value
    try:
        return AttendanceStatus(value)
    except ValueError:
        return AttendanceStatus.UNSET


# =============================================================================
# LEDGER RECORDS
# =============================================================================

class LedgerRecord(BaseModel):
    """Common configuration for everything persisted in a ledger."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )

    def to_storage(self) -> dict:
        """Serialize with the on-disk (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)


class Helper(LedgerRecord):
    """
    A paid household worker.

    For DAILY helpers, monthly_salary holds the per-day rate.
    For milkmen, default_price_per_liter pre-fills new milk entries.
    """

    id: RecordId
    name: Annotated[Text, Field(max_length=200)] = ""
    role: Annotated[HelperRole, BeforeValidator(_lenient_role)] = HelperRole.OTHER
    monthly_salary: Money = ZERO
    default_price_per_liter: Money = ZERO
    payment_type: Annotated[
        PaymentType, BeforeValidator(_lenient_payment_type)
    ] = PaymentType.MONTHLY
    start_date: Optional[str] = None

    @property
    def is_milkman(self) -> bool:
        return self.role is HelperRole.MILKMAN


class AttendanceMark(LedgerRecord):
    """Presence mark keyed by (date, helper_id)."""

    date: RecordId
    helper_id: RecordId
    status: Annotated[
        AttendanceStatus, BeforeValidator(_lenient_status)
    ] = AttendanceStatus.UNSET

    @property
    def key(self) -> tuple[str, str]:
        return (self.date, self.helper_id)


class MilkEntry(LedgerRecord):
    """
    One milk delivery.

    helper_id None means an unassigned / general delivery.
    """

    id: RecordId
    date: RecordId
    helper_id: HelperRef = None
    liters: Money = ZERO
    price_per_liter: Money = ZERO

    @property
    def cost(self) -> Decimal:
        return self.liters * self.price_per_liter


class Payment(LedgerRecord):
    """
    Money paid against a (kind, helper, month) triple.

    Several payments may target the same triple; they are summed.
    """

    id: RecordId
    date: RecordId
    kind: PaymentKind = Field(alias="type")
    helper_id: HelperRef = None
    month: Text = ""
    amount: Money = ZERO
    notes: Text = ""
