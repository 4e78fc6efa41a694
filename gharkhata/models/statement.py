"""
Monthly Statement Models

The output of the aggregation engine. Every view (payments page,
dashboard, HTML and Excel exports) reads these - nothing recomputes
salary or milk figures on its own.

All money is Decimal and is NOT rounded here. Rounding is a display
concern.
"""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from gharkhata.models.household import HelperRole, Payment, PaymentType


# One unit of currency absorbs the noise of prorated salaries.
PAID_TOLERANCE = Decimal("1")

UNKNOWN_LABEL = "Unknown"
UNASSIGNED_LABEL = "Unassigned / General"


class SettlementStatus(str, Enum):
    """Whether a salary line or milk bucket is settled."""
    PAID = "Paid"
    DUE = "Due"

    @classmethod
    def from_outstanding(cls, outstanding: Decimal) -> "SettlementStatus":
        return cls.PAID if outstanding <= PAID_TOLERANCE else cls.DUE


# =============================================================================
# MILK BUCKET KEYS
# =============================================================================

class UnassignedBucket(BaseModel):
    """Milk delivered without a specific milkman."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["unassigned"] = "unassigned"

    @property
    def helper_id(self) -> None:
        return None

    def __str__(self) -> str:
        return "unassigned"


class HelperBucket(BaseModel):
    """Milk delivered by one helper (who may since have been deleted)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["helper"] = "helper"
    helper_id: str

    def __str__(self) -> str:
        return self.helper_id


BucketKey = Annotated[
    Union[UnassignedBucket, HelperBucket],
    Field(discriminator="kind"),
]


def bucket_for(helper_id: Optional[str]) -> Union[UnassignedBucket, HelperBucket]:
    """Bucket key for a milk entry or milk payment's helper reference."""
    if helper_id is None:
        return UnassignedBucket()
    return HelperBucket(helper_id=helper_id)


# =============================================================================
# STATEMENT LINES
# =============================================================================

class SalaryLine(BaseModel):
    """
    Salary position of one (non-milkman) helper for the month.

    Helpers that were deleted but still have payments or attendance in
    the month appear with label "Unknown", no role and zero calculated
    salary.
    """

    helper_id: str
    label: str
    role: Optional[HelperRole] = None
    payment_type: Optional[PaymentType] = None
    in_registry: bool = True

    present_days: int = Field(ge=0)
    recorded_days: int = Field(ge=0)

    calculated_salary: Decimal = Field(ge=0)
    paid_salary: Decimal = Field(ge=0)
    outstanding_salary: Decimal = Field(ge=0)
    status: SettlementStatus


class MilkBucket(BaseModel):
    """Milk bill for one bucket (a milkman, or unassigned)."""

    bucket_key: BucketKey
    label: str
    liters: Decimal = Field(ge=0)
    cost: Decimal = Field(ge=0)
    paid: Decimal = Field(ge=0)
    outstanding: Decimal = Field(ge=0)
    status: SettlementStatus

    @property
    def helper_id(self) -> Optional[str]:
        return self.bucket_key.helper_id


class MilkTotals(BaseModel):
    """
    Month-wide milk totals.

    NOTE: paid counts every milk payment of the month, whichever
    bucket it was made against, so outstanding here can differ from the
    sum of per-bucket outstanding amounts.
    """

    liters: Decimal = Field(ge=0)
    cost: Decimal = Field(ge=0)
    paid: Decimal = Field(ge=0)
    outstanding: Decimal = Field(ge=0)


class SalaryTotals(BaseModel):
    """Salary figures summed over every salary line."""

    calculated: Decimal = Field(ge=0)
    paid: Decimal = Field(ge=0)
    outstanding: Decimal = Field(ge=0)


class MaidsSummary(BaseModel):
    """Roll-up over helpers whose role is Maid."""

    count: int = Field(ge=0)
    present_days: int = Field(ge=0)
    recorded_days: int = Field(ge=0)
    calculated: Decimal = Field(ge=0)
    paid: Decimal = Field(ge=0)
    outstanding: Decimal = Field(ge=0)


class MonthlyStatement(BaseModel):
    """
    Everything owed and paid for one month.

    Produced only by compute_monthly_statement().
    """

    month: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    per_helper_salary: list[SalaryLine] = Field(default_factory=list)
    milk_by_bucket: list[MilkBucket] = Field(default_factory=list)
    milk_totals: MilkTotals
    salary_totals: SalaryTotals
    maids_summary: MaidsSummary
    payments_in_month: list[Payment] = Field(
        default_factory=list,
        description="Payments for the month, newest date first"
    )
    helper_names: dict[str, str] = Field(
        default_factory=dict,
        description="Name of every registered helper by id"
    )

    def salary_line(self, helper_id: str) -> Optional[SalaryLine]:
        """Find the salary line for a helper, if any."""
        for line in self.per_helper_salary:
            if line.helper_id == helper_id:
                return line
        return None

    def helper_name(self, helper_id: Optional[str]) -> str:
        """Registered name for a helper id, or "Unknown"."""
        return self.helper_names.get(helper_id or "", UNKNOWN_LABEL)

    def milk_bucket(self, helper_id: Optional[str]) -> Optional[MilkBucket]:
        """Find a milk bucket by helper id (None for unassigned)."""
        key = bucket_for(helper_id)
        for bucket in self.milk_by_bucket:
            if bucket.bucket_key == key:
                return bucket
        return None

    @property
    def has_milk(self) -> bool:
        return bool(self.milk_by_bucket)
